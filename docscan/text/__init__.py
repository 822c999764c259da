"""Pure text pipeline applied to OCR output.

raw page markdown -> strip_ocr_markdown -> normalize_text
    -> structure_as_document | format_as_letter
"""

from .strip import (
    NO_READABLE_TEXT_MESSAGE,
    NO_TEXT_DETECTED_MESSAGE,
    has_image_reference,
    strip_ocr_markdown,
)
from .normalize import advanced_clean, normalize_text
from .structure import (
    convert_to_document,
    enhance_document,
    has_document_structure,
    structure_as_document,
)
from .letter import format_as_letter, has_letter_structure
from .dates import long_date, month_name

__all__ = [
    "NO_READABLE_TEXT_MESSAGE",
    "NO_TEXT_DETECTED_MESSAGE",
    "has_image_reference",
    "strip_ocr_markdown",
    "advanced_clean",
    "normalize_text",
    "convert_to_document",
    "enhance_document",
    "has_document_structure",
    "structure_as_document",
    "format_as_letter",
    "has_letter_structure",
    "long_date",
    "month_name",
]
