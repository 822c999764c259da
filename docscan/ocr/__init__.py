"""OCR providers and response handling.

- reader: local Tesseract OCR (pytesseract + OpenCV)
- response: OCR service JSON responses to page text
"""

from .reader import (
    build_dataframe_from_tesseract,
    group_words_to_lines,
    lines_to_text,
    load_image,
    ocr_image_text,
    preprocess_image_for_ocr,
)
from .response import (
    NO_PAGES_MESSAGE,
    load_ocr_response,
    resolve_page_text,
    text_from_ocr_response,
)

__all__ = [
    "build_dataframe_from_tesseract",
    "group_words_to_lines",
    "lines_to_text",
    "load_image",
    "ocr_image_text",
    "preprocess_image_for_ocr",
    "NO_PAGES_MESSAGE",
    "load_ocr_response",
    "resolve_page_text",
    "text_from_ocr_response",
]
