"""Whitespace and punctuation normalization for stripped OCR text.

Rules run in a fixed order; later rules rely on the earlier ones (for
example, spacing after punctuation assumes stray periods are already gone).
Line breaks between logical paragraphs are kept, blank lines are not.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

logger = logging.getLogger(__name__)

PUNCTUATION_MARKS = ",.!?;:"

# cent, section, pilcrow, daggers, bullet, per-mille, trademark, copyright, registered
_DECORATIVE_SYMBOLS_RE = re.compile("[#¢§¶†‡•‰™©®]")
_ELLIPSIS_RE = re.compile(r"\.{3,}")
_STRAY_PERIOD_RE = re.compile(r"(?<!\S)\.(?![\w.])")
_MULTI_SPACE_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.!?;:])")
_MISSING_SPACE_RE = re.compile(r"(?<=\S)([,.!?;:])(?=[^\s\d,.!?;:])")

_LONG_SYMBOL_RUN_RE = re.compile(r"[|\\_\-*]{3,}")
# Lossy: "modern" becomes "modem". Only used when explicitly requested.
_MISREAD_SUBSTITUTIONS = (
    (re.compile(r"(?<=[A-Za-z])0(?=[A-Za-z])"), "o"),
    (re.compile(r"(?<=[A-Za-z])1(?=[A-Za-z])"), "l"),
    (re.compile(r"(?<=[a-z])5(?=[a-z])"), "s"),
    (re.compile(r"rn"), "m"),
    (re.compile(r"vv"), "w"),
)


def _tidy_lines(lines: Iterable[str]) -> str:
    kept = []
    for line in lines:
        line = _MULTI_SPACE_RE.sub(" ", line).strip()
        if line:
            kept.append(line)
    return "\n".join(kept)


def normalize_text(text: str) -> str:
    """Remove OCR noise while keeping paragraph line breaks.

    Steps:
    1. Delete decorative symbols (``#``, section/paragraph marks, daggers, ...).
    2. Collapse runs of three or more periods to ``...``.
    3. Delete isolated periods with whitespace (or nothing) on both sides.
    4. Per line: collapse repeated spaces, trim, drop empty lines.
    5. Rejoin with single newlines.
    6. Remove whitespace (line breaks included) in front of ``,.!?;:``.
    7. Add a space after ``,.!?;:`` unless followed by whitespace, a digit
       or another mark.
    8. Trim.

    The function is idempotent and never raises.

    Doxygen:
    - @param text: Output of ``strip_ocr_markdown``.
    - @return: Normalized text.
    """
    if not text:
        return ""
    text = _DECORATIVE_SYMBOLS_RE.sub("", text)
    text = _ELLIPSIS_RE.sub("...", text)
    text = _STRAY_PERIOD_RE.sub("", text)
    text = _tidy_lines(text.splitlines())
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _MISSING_SPACE_RE.sub(r"\1 ", text)
    return text.strip()


def advanced_clean(text: str) -> str:
    """Opt-in heuristic cleanup for badly scanned pages.

    Drops long runs of ``| \\ _ - *`` (table rules, underlines) and rewrites
    common character misreads (digits inside words, ``rn`` → ``m``,
    ``vv`` → ``w``). The substitutions can corrupt correct words, so the
    default pipeline never calls this.
    """
    if not text:
        return ""
    text = _LONG_SYMBOL_RUN_RE.sub(" ", text)
    for pattern, replacement in _MISREAD_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    cleaned = _tidy_lines(text.splitlines())
    logger.debug("Advanced cleaning: %d -> %d chars", len(text), len(cleaned))
    return cleaned
