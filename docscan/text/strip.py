"""Remove OCR provider markdown artifacts from raw page output.

The provider returns each page as markdown. Pages that contain only a
picture come back as a bare image embed, and embedded figures leave
``![alt](url)`` tokens and ``img-<n>.<ext>`` file names in the text.
"""

from __future__ import annotations

import re

NO_TEXT_DETECTED_MESSAGE = (
    "The image was processed but no text was detected. "
    "The image might contain only graphics or the text might not be readable."
)
NO_READABLE_TEXT_MESSAGE = "No readable text found in the image"

_IMAGE_REF = r"!\[[^\]\n]*\]\([^)\n]*\)"
_IMAGE_ONLY_RE = re.compile(r"#?\s*" + _IMAGE_REF + r"\s*")
_HEADER_IMAGE_RE = re.compile(r"#\s*" + _IMAGE_REF)
_IMAGE_RE = re.compile(_IMAGE_REF)
_IMAGE_FILENAME_RE = re.compile(r"img-\d+\.\w+")
_LONE_HASH_LINE_RE = re.compile(r"^[ \t]*#[ \t]*$", re.MULTILINE)
_INNER_SPACES_RE = re.compile(r"[ \t]{2,}")


def has_image_reference(raw: str) -> bool:
    """Return True when the raw page still carries an image embed."""
    return "![" in raw and "](" in raw


def strip_ocr_markdown(raw: str) -> str:
    """Strip image embeds, file-name tokens and lone header markers.

    Returns an empty string when the page is a single image reference with
    no other content. Turning that into a user-facing message is left to the
    caller (see ``docscan.ocr.response.resolve_page_text``).

    Doxygen:
    - @param raw: Markdown text of one OCR page.
    - @return: Artifact-free text, lines trimmed, empty lines dropped.
    """
    if not raw:
        return ""
    if _IMAGE_ONLY_RE.fullmatch(raw.strip()):
        return ""

    cleaned = _HEADER_IMAGE_RE.sub("", raw)
    cleaned = _IMAGE_RE.sub("", cleaned)
    cleaned = _IMAGE_FILENAME_RE.sub("", cleaned)
    cleaned = _LONE_HASH_LINE_RE.sub("", cleaned)

    lines = []
    for line in cleaned.splitlines():
        # removed tokens leave a double space behind
        line = _INNER_SPACES_RE.sub(" ", line).strip()
        if line:
            lines.append(line)
    return "\n".join(lines).strip()
