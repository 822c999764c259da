import json
import logging
import os
from typing import Optional

import pytesseract

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
DEPENDENCIES_PATH = os.path.join(PROJECT_ROOT, "config", "dependencies.json")


def _resolve_path(base: str, relative: str) -> str:
    return os.path.abspath(os.path.join(base, relative))


def configure_dependencies(deps_path: str = DEPENDENCIES_PATH, project_root: str = PROJECT_ROOT) -> Optional[str]:
    """Point pytesseract at a bundled Tesseract and return the Poppler directory.

    Paths in ``config/dependencies.json`` are relative to the project root.
    A missing or broken file only logs a warning; the system PATH is used then.
    """
    if not os.path.exists(deps_path):
        logger.warning("dependencies.json not found at %s", deps_path)
        return None

    try:
        with open(deps_path, "r", encoding="utf-8") as deps_file:
            deps = json.load(deps_file) or {}
    except (OSError, ValueError) as exc:
        logger.warning("Could not load dependencies from %s: %s", deps_path, exc)
        return None

    tess_rel = deps.get("tesseract_path")
    if tess_rel:
        tess_abs = _resolve_path(project_root, tess_rel)
        if os.path.exists(tess_abs):
            pytesseract.pytesseract.tesseract_cmd = tess_abs
            logger.debug("Using Tesseract at %s", tess_abs)
        else:
            logger.warning("Tesseract path from config does not exist: %s", tess_abs)

    poppler_rel = deps.get("poppler_path")
    if not poppler_rel:
        return None
    candidate = _resolve_path(project_root, poppler_rel)
    if not os.path.isdir(candidate):
        logger.warning("Poppler path from config does not exist or is not a directory: %s", candidate)
        return None
    return candidate
