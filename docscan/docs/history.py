"""Scan history persisted as a JSON list of records.

The default file is ``config/history.json`` under the project root; the
``DOCSCAN_HISTORY`` environment variable points it elsewhere.
"""

from __future__ import annotations

import json
import logging
import os
from typing import List, Optional, Tuple

from .model import ScanRecord

logger = logging.getLogger(__name__)

HISTORY_ENV = "DOCSCAN_HISTORY"
_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
DEFAULT_HISTORY_PATH = os.path.join(_ROOT_DIR, "config", "history.json")


def default_history_path() -> str:
    return os.environ.get(HISTORY_ENV) or DEFAULT_HISTORY_PATH


def format_file_size(num_bytes: int) -> str:
    """Human readable size with decimal units, e.g. ``512 bytes``, ``1.5 KB``."""
    size = float(max(0, num_bytes))
    if size < 1000:
        return f"{int(size)} bytes"
    for unit in ("KB", "MB", "GB"):
        size /= 1000.0
        if size < 1000 or unit == "GB":
            break
    text = f"{size:.1f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"


class HistoryStore:
    """Load, append and query scan records in a JSON file.

    Records are returned newest first. Entries that cannot be parsed are
    skipped with a warning instead of failing the whole history.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or default_history_path()

    def _read(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ValueError(f"History file {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise ValueError(f"History file {self.path} must contain a JSON list")
        return data

    def _write(self, records: List[ScanRecord]) -> None:
        out_dir = os.path.dirname(self.path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def load(self) -> List[ScanRecord]:
        records: List[ScanRecord] = []
        for entry in self._read():
            record = ScanRecord.from_dict(entry)
            if record is None:
                logger.warning("Skipping malformed history entry in %s", self.path)
                continue
            records.append(record)
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def add(self, record: ScanRecord) -> ScanRecord:
        records = [r for r in self.load() if r.id != record.id]
        records.insert(0, record)
        self._write(records)
        logger.info("Saved scan %s to history (%d chars)", record.id, record.text_length)
        return record

    def get(self, record_id: str) -> Optional[ScanRecord]:
        for record in self.load():
            if record.id == record_id:
                return record
        return None

    def delete(self, record_id: str) -> bool:
        records = self.load()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return False
        self._write(kept)
        return True

    def clear(self) -> None:
        self._write([])

    def search(self, query: str) -> List[ScanRecord]:
        """Case-insensitive match on text, device name and conversion type; blank returns all."""
        records = self.load()
        needle = (query or "").strip().lower()
        if not needle:
            return records
        return [
            r for r in records
            if needle in r.extracted_text.lower()
            or needle in r.device_name.lower()
            or needle in r.conversion_type.lower()
        ]

    def storage_stats(self) -> Tuple[int, int]:
        """Return (record count, total stored image payload size)."""
        records = self.load()
        return len(records), sum(r.image_size or 0 for r in records)
