"""Turn OCR provider responses into page text.

The provider answers with JSON shaped like::

    {"pages": [{"index": 0, "markdown": "...",
                "images": [{"id": "img-0.jpeg", "image_annotation": null}]}]}

Each page's markdown goes through the stripper; pages that end up empty
are replaced by a user-facing message instead of an empty string.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from docscan.text.strip import (
    NO_READABLE_TEXT_MESSAGE,
    NO_TEXT_DETECTED_MESSAGE,
    has_image_reference,
    strip_ocr_markdown,
)

logger = logging.getLogger(__name__)

NO_PAGES_MESSAGE = "No pages found in the document"


def resolve_page_text(markdown: str, annotation: Optional[str] = None) -> str:
    """Return the text of one page, or the matching "no text" message.

    Doxygen:
    - @param markdown: Raw markdown of the page.
    - @param annotation: Optional image annotation; wins when non-empty.
    - @return: Cleaned page text or a fallback message. Never empty.
    """
    if annotation and annotation.strip():
        return annotation.strip()
    cleaned = strip_ocr_markdown(markdown or "")
    if cleaned:
        return cleaned
    if has_image_reference(markdown or ""):
        return NO_TEXT_DETECTED_MESSAGE
    return NO_READABLE_TEXT_MESSAGE


def _first_annotation(page: Dict[str, Any]) -> Optional[str]:
    images = page.get("images") or []
    if not images or not isinstance(images[0], dict):
        return None
    return images[0].get("image_annotation")


def text_from_ocr_response(payload: Dict[str, Any]) -> str:
    """Join the text of every page that produced any.

    When no page has text, the fallback message of the first page is
    returned so the caller can still show something meaningful.
    """
    pages: List[Dict[str, Any]] = payload.get("pages") or []
    if not pages:
        return NO_PAGES_MESSAGE

    texts: List[str] = []
    fallback: Optional[str] = None
    for page in sorted(pages, key=lambda p: p.get("index", 0)):
        markdown = str(page.get("markdown") or "")
        text = resolve_page_text(markdown, _first_annotation(page))
        if text in (NO_TEXT_DETECTED_MESSAGE, NO_READABLE_TEXT_MESSAGE):
            logger.info("Page %s has no extractable text", page.get("index"))
            fallback = fallback or text
            continue
        texts.append(text)
    if not texts:
        return fallback or NO_READABLE_TEXT_MESSAGE
    return "\n\n".join(texts)


def load_ocr_response(path: str) -> Dict[str, Any]:
    """Read a saved OCR response from disk.

    Doxygen:
    - @param path: Path to a JSON file.
    - @return: Parsed response object.
    - @throws FileNotFoundError: If the file is missing.
    - @throws ValueError: If the JSON root is not an object.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"OCR response not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"OCR response must be a JSON object: {path}")
    return payload
