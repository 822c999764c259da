"""Format OCR text as a formal application letter."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from .dates import long_date, month_name

DEFAULT_SALUTATION = "Dear Hiring Manager,"
DEFAULT_CLOSING = "Sincerely,"
HEADER_SCAN_LINES = 5
MAX_NAME_LENGTH = 50

_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")
_PHONE_LIKE_RE = re.compile(r"\d{3}")
_DEAR_RE = re.compile("dear", re.IGNORECASE)


def has_letter_structure(text: str) -> bool:
    """Case-sensitive check for a salutation and a closing.

    Deliberately naive: body text that happens to say "Dear" and "Regards"
    counts as a letter too.
    """
    return "Dear" in text and ("Sincerely" in text or "Regards" in text)


def _is_header_line(line: str, index: int) -> bool:
    if "@" in line or _PHONE_LIKE_RE.search(line):
        return True
    return index == 0 and len(line) < MAX_NAME_LENGTH and "." not in line


def _format_existing_letter(text: str, today: Optional[date]) -> str:
    formatted = _EXTRA_BLANK_LINES_RE.sub("\n\n", text)
    if month_name(today).lower() in formatted.lower():
        return formatted
    match = _DEAR_RE.search(formatted)
    if match is None:
        return formatted
    before, after = formatted[:match.start()], formatted[match.start():]
    if before and not before.endswith("\n"):
        before += "\n"
    return f"{before}{long_date(today)}\n\n{after}"


def _convert_to_letter(text: str, today: Optional[date]) -> str:
    lines = [line.strip() for line in text.split("\n")]
    header_lines: List[str] = []
    scanned = lines[:HEADER_SCAN_LINES]
    content_start = 0
    for index, line in enumerate(scanned):
        if not line:
            continue
        if _is_header_line(line, index):
            header_lines.append(line)
        else:
            content_start = index
            break

    parts: List[str] = []
    if header_lines:
        parts.append("\n".join(header_lines) + "\n\n")
    parts.append(long_date(today) + "\n\n")

    body = "\n".join(lines[content_start:])
    lowered = body.lower()
    if "dear" not in lowered:
        parts.append(DEFAULT_SALUTATION + "\n\n")
    parts.append(body)
    if "sincerely" not in lowered and "regards" not in lowered:
        parts.append(f"\n\n{DEFAULT_CLOSING}\n\n")
        if header_lines:
            parts.append(header_lines[0])
    return "".join(parts)


def format_as_letter(text: str, today: Optional[date] = None) -> str:
    """Format text as a dated letter with salutation and closing.

    Text that already has "Dear" and "Sincerely"/"Regards" only gets its
    spacing tidied and a date line when the current month is not mentioned.
    Anything else is rebuilt: contact lines from the top become the header,
    then the date, a salutation if missing, the body and a closing signed
    with the first header line.

    Doxygen:
    - @param text: Normalized OCR text.
    - @param today: Date to insert; defaults to today.
    - @return: Letter text. Never raises.
    """
    cleaned = (text or "").strip()
    if has_letter_structure(cleaned):
        return _format_existing_letter(cleaned, today)
    return _convert_to_letter(cleaned, today)
