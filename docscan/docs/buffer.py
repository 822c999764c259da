from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
from typing import Optional

logger = logging.getLogger(__name__)


class BufferManager:
    """Scratch directory for page images rendered during one scan.

    In debug mode the buffer lives under ``config/buffer/<timestamp>`` and is
    kept after ``cleanup()``; otherwise a temporary directory is used and
    removed. Usable as a context manager.
    """

    def __init__(self, project_root: Optional[str] = None, debug: bool = False) -> None:
        self.debug = bool(debug)
        if self.debug:
            root = project_root or os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
            self.base_dir = os.path.join(root, "config", "buffer", time.strftime("%Y%m%d-%H%M%S"))
            os.makedirs(self.base_dir, exist_ok=True)
        else:
            self.base_dir = tempfile.mkdtemp(prefix="docscan-")

    def path(self, *parts: str) -> str:
        p = os.path.join(self.base_dir, *parts)
        os.makedirs(os.path.dirname(p), exist_ok=True)
        return p

    def cleanup(self) -> None:
        if self.debug:
            logger.debug("Keeping buffer %s", self.base_dir)
            return
        shutil.rmtree(self.base_dir, ignore_errors=True)

    def __enter__(self) -> "BufferManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
