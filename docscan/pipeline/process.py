"""High-level pipeline: OCR → clean → (grammar) → format → write.

`process_scan` is the single entry point used by the CLI; the smaller
steps are exposed for scripts and tests.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from docscan.docs import (
    BufferManager,
    ConversionType,
    HistoryStore,
    OutputKind,
    ScanRecord,
    read_pdf_scanned,
    write_docx,
    write_pdf,
    write_txt,
)
from docscan.image import compress_image_base64, create_thumbnail_base64, crop_image
from docscan.llm import GrammarCorrectionError, get_openrouter_client, get_picked_model
from docscan.llm import correct_grammar as _correct_grammar
from docscan.ocr import load_image, load_ocr_response, ocr_image_text, text_from_ocr_response
from docscan.text import (
    advanced_clean,
    format_as_letter,
    normalize_text,
    strip_ocr_markdown,
    structure_as_document,
)

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp")
OUT_FORMATS = ("txt", "docx", "pdf")

_KIND_SUFFIX = {
    OutputKind.PLAIN_TEXT: "text",
    OutputKind.APPLICATION_LETTER: "letter",
    OutputKind.WORD_DOCUMENT: "document",
}

Crop = Union[bool, Tuple[int, int, int, int], None]


class EmptyTextError(ValueError):
    """Raised when there is no text left to format."""

    def __init__(self, message: str = "Please provide text to format") -> None:
        super().__init__(message)


def prepare_text(raw: str, advanced: bool = False) -> str:
    """Strip OCR markup, normalize spacing and optionally run the heuristic cleanup."""
    text = normalize_text(strip_ocr_markdown(raw or ""))
    if advanced:
        text = advanced_clean(text)
    return text


def format_text(text: str, kind: Union[OutputKind, str], today: Optional[date] = None) -> str:
    """Dispatch normalized text to the formatter for ``kind``.

    Doxygen:
    - @param text: Normalized text.
    - @param kind: OutputKind or one of its values/aliases.
    - @param today: Date used by the letter and document formatters.
    - @return: Formatted text; plain text is returned unchanged.
    - @throws EmptyTextError: If ``text`` is blank.
    - @throws ValueError: If ``kind`` is unknown.
    """
    output_kind = OutputKind.parse(kind)
    if not text or not text.strip():
        raise EmptyTextError()
    if output_kind is OutputKind.APPLICATION_LETTER:
        return format_as_letter(text, today)
    if output_kind is OutputKind.WORD_DOCUMENT:
        return structure_as_document(text, today)
    return text


def _pages_to_text(page_texts: List[str]) -> str:
    # same page joining and fallback messages as an OCR service response
    pages = [{"index": i, "markdown": t} for i, t in enumerate(page_texts)]
    return text_from_ocr_response({"pages": pages})


def _prepare_image(img, crop: Crop):
    if crop is None or crop is False:
        return img
    return crop_image(img, None if crop is True else crop)


def extract_raw_text(
    file_path: str,
    lang: str = "eng",
    conf_threshold: int = 30,
    ocr_mode: str = "auto",
    poppler_path: Optional[str] = None,
    crop: Crop = None,
    debug_buffer: bool = False,
) -> str:
    """Return the raw page text of a scan.

    Supported inputs: saved OCR service responses (``.json``), scanned PDFs
    (each page rendered and read with Tesseract) and images.

    Doxygen:
    - @throws FileNotFoundError: If ``file_path`` does not exist.
    - @throws ValueError: If the file type is not supported.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1].lower()
    if ext == ".json":
        return text_from_ocr_response(load_ocr_response(file_path))

    if ext == ".pdf":
        buffer = BufferManager(debug=debug_buffer)
        try:
            page_texts = []
            for page_path in read_pdf_scanned(file_path, buffer, poppler_path=poppler_path):
                img = _prepare_image(load_image(page_path), crop)
                page_texts.append(ocr_image_text(img, lang=lang, conf_threshold=conf_threshold, ocr_mode=ocr_mode))
        finally:
            buffer.cleanup()
        return _pages_to_text(page_texts)

    if ext in IMAGE_EXTENSIONS:
        img = _prepare_image(load_image(file_path), crop)
        return _pages_to_text([ocr_image_text(img, lang=lang, conf_threshold=conf_threshold, ocr_mode=ocr_mode)])

    raise ValueError(f"Unsupported file type: {file_path}")


def _default_grammar_corrector(timeout: float | None) -> Callable[[str], str]:
    model, api_key = get_picked_model()
    client = get_openrouter_client(api_key)
    return lambda text: _correct_grammar(client, model, text, timeout=timeout)


def _default_conversion_type(file_path: str) -> ConversionType:
    if file_path.lower().endswith(".pdf"):
        return ConversionType.PDF_TO_PDF
    return ConversionType.IMAGE_TO_TEXT


def process_scan(
    file_path: str,
    output_kind: Union[OutputKind, str] = OutputKind.PLAIN_TEXT,
    out_format: str = "txt",
    correct_grammar: bool = False,
    advanced: bool = False,
    lang: str = "eng",
    conf_threshold: int = 30,
    ocr_mode: str = "auto",
    crop: Crop = None,
    poppler_path: Optional[str] = None,
    conversion_type: Union[ConversionType, str, None] = None,
    history_path: Optional[str] = None,
    save_full_image: bool = False,
    request_timeout: float | None = 60.0,
    grammar_corrector: Optional[Callable[[str], str]] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Run the full scan pipeline and write the result next to the input.

    Doxygen:
    - @param file_path: Image, scanned PDF or saved OCR response (.json).
    - @param output_kind: plainText | applicationLetter | wordDocument (or text/letter/document).
    - @param out_format: txt | docx | pdf. PDF also leaves the DOCX behind.
    - @param correct_grammar: Send the cleaned text through the configured LLM.
    - @param advanced: Apply the heuristic OCR cleanup after normalizing.
    - @param lang: Tesseract languages, e.g. 'eng' or 'eng+deu'.
    - @param conf_threshold: Minimum OCR word confidence.
    - @param ocr_mode: 'auto' preprocesses images, 'raw' uses them as is.
    - @param crop: None, True for the centred default crop, or an (x, y, w, h) rect.
    - @param poppler_path: Poppler directory for PDF rendering.
    - @param conversion_type: Stored in the history record; derived from the input when None.
    - @param history_path: History JSON file; no record is written when None.
    - @param save_full_image: Also store the compressed page image in the record.
    - @param request_timeout: LLM request timeout in seconds.
    - @param grammar_corrector: Replaces the configured LLM corrector.
    - @param today: Date used by the formatters and the DOCX footer.
    - @return: Dict with 'text', one key per written format, 'record_id'
      and optionally 'grammar_error' / 'pdf_error'.
    - @throws EmptyTextError: If no text is left after cleaning.
    """
    kind = OutputKind.parse(output_kind)
    fmt = (out_format or "txt").lower()
    if fmt not in OUT_FORMATS:
        raise ValueError(f"Unsupported output format: {out_format}")

    raw = extract_raw_text(
        file_path,
        lang=lang,
        conf_threshold=conf_threshold,
        ocr_mode=ocr_mode,
        poppler_path=poppler_path,
        crop=crop,
    )
    text = prepare_text(raw, advanced=advanced)
    logger.info("Extracted %d characters from %s", len(text), file_path)

    out: Dict[str, Any] = {}
    if correct_grammar and text:
        try:
            corrector = grammar_corrector or _default_grammar_corrector(request_timeout)
            text = corrector(text)
        except (GrammarCorrectionError, ValueError, OSError) as e:
            # keep the uncorrected text, the scan itself succeeded
            logger.warning("Grammar correction skipped: %s", e)
            out["grammar_error"] = str(e)

    formatted = format_text(text, kind, today=today)
    out["text"] = formatted

    base_dir = os.path.dirname(file_path)
    base_name = os.path.splitext(os.path.basename(file_path))[0]
    stem = os.path.join(base_dir, f"{base_name}.{_KIND_SUFFIX[kind]}")

    if fmt == "txt":
        out["txt"] = write_txt(formatted, stem + ".txt")
    elif fmt == "docx":
        out["docx"] = write_docx(formatted, stem + ".docx", today=today)
    else:
        try:
            out["pdf"] = write_pdf(formatted, stem + ".pdf", today=today)
        except RuntimeError as e:
            logger.warning("PDF export failed, keeping DOCX: %s", e)
            out["pdf_error"] = str(e)
        out["docx"] = stem + ".docx"

    out["record_id"] = None
    if history_path:
        record = _build_record(file_path, formatted, kind, conversion_type, crop, save_full_image)
        HistoryStore(history_path).add(record)
        out["record_id"] = record.id
    return out


def _build_record(
    file_path: str,
    text: str,
    kind: OutputKind,
    conversion_type: Union[ConversionType, str, None],
    crop: Crop,
    save_full_image: bool,
) -> ScanRecord:
    thumbnail = image = None
    if os.path.splitext(file_path)[1].lower() in IMAGE_EXTENSIONS:
        img = _prepare_image(load_image(file_path), crop)
        thumbnail = create_thumbnail_base64(img)
        if save_full_image:
            image = compress_image_base64(img)
    return ScanRecord.create(
        text,
        conversion_type or _default_conversion_type(file_path),
        kind,
        thumbnail_base64=thumbnail,
        image_base64=image,
    )
