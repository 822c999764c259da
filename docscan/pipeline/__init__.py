"""Scan orchestration: OCR, cleaning, formatting and output files."""

from .process import (
    EmptyTextError,
    extract_raw_text,
    format_text,
    prepare_text,
    process_scan,
)

__all__ = [
    "EmptyTextError",
    "extract_raw_text",
    "format_text",
    "prepare_text",
    "process_scan",
]
