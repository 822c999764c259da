"""
Entry point and compatibility facade for the scan → clean → format pipeline.

This module exposes a stable API and a CLI suitable for PyInstaller builds.

Packages:
- docscan.text: markdown stripping, normalization, document and letter formatting
- docscan.ocr: Tesseract reader and OCR service responses
- docscan.llm: OpenRouter/OpenAI client helpers and grammar correction
- docscan.image: crop, resize and JPEG payloads for history records
- docscan.docs: TXT/DOCX/PDF writers and scan history
- docscan.pipeline: High-level orchestration (`process_scan`)
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

# Text pipeline
from docscan.text import (
    strip_ocr_markdown,
    normalize_text,
    advanced_clean,
    structure_as_document,
    format_as_letter,
)

# OCR
from docscan.ocr import ocr_image_text, text_from_ocr_response

# LLM client and grammar correction
from docscan.llm import (
    CONFIG_PATH as CONFIG_PATH,
    get_picked_model,
    get_openrouter_client,
    chat_completion,
    check_model_health,
    correct_grammar,
)

# Documents and history
from docscan.docs import OutputKind, HistoryStore, default_history_path, format_file_size

# High-level pipeline
from docscan.pipeline import EmptyTextError, format_text, prepare_text, process_scan

__all__ = [
    # text
    "strip_ocr_markdown",
    "normalize_text",
    "advanced_clean",
    "structure_as_document",
    "format_as_letter",
    # ocr
    "ocr_image_text",
    "text_from_ocr_response",
    # config/client
    "CONFIG_PATH",
    "get_picked_model",
    "get_openrouter_client",
    "chat_completion",
    "check_model_health",
    "correct_grammar",
    # documents
    "OutputKind",
    "HistoryStore",
    "format_file_size",
    # pipeline
    "EmptyTextError",
    "format_text",
    "prepare_text",
    "process_scan",
]

logger = logging.getLogger(__name__)


def _parse_crop(value: Optional[str]):
    """Map the --crop argument to process_scan's ``crop`` value."""
    if value is None:
        return None
    if value == "auto":
        return True
    parts = value.split(",")
    if len(parts) != 4:
        raise ValueError(f"--crop expects 'auto' or X,Y,W,H, got: {value}")
    x, y, w, h = (int(p) for p in parts)
    rect: Tuple[int, int, int, int] = (x, y, w, h)
    return rect


def _print_history(store: HistoryStore, query: str) -> None:
    records = store.search(query)
    for record in records:
        preview = record.extracted_text.replace("\n", " ")[:60]
        print(f"{record.id}  {record.conversion_type:<14}  {record.output_format:<17}  {preview}")
    count, size = store.storage_stats()
    print(f"{count} scan(s), {format_file_size(size)} of images")


def _cli() -> None:
    """CLI for scanning a page into text, a letter or a structured document.

    --file / -f: Image, scanned PDF or saved OCR response (.json)
    --format: text|letter|document (default: text)
    --out-format: txt|docx|pdf (default: txt)
    --grammar: Correct grammar with the model picked in config/models.json
    --advanced-clean: Extra heuristic cleanup for poor scans
    --lang: Tesseract languages (default: eng)
    --conf: OCR confidence threshold (default: 30)
    --ocr-mode: 'auto' for photographed pages, 'raw' for clean images (default: auto)
    --crop: 'auto' for the centred 75% crop or X,Y,W,H
    --timeout: Per-request timeout seconds (<=0 means no timeout)
    --history [PATH]: Record the scan in the history file
    --save-image: Store the compressed page image in the history record
    --list-history [QUERY]: Print stored scans (optionally filtered) and exit
    --log-level: DEBUG|INFO|WARNING|ERROR (default: INFO)
    """
    import argparse

    parser = argparse.ArgumentParser(description="Extract, clean and format text from scanned pages.")
    parser.add_argument("--file", "-f", type=str, help="Path to input image, scanned PDF or OCR response (.json)")
    parser.add_argument("--format", type=str, default="text", choices=["text", "letter", "document"], help="Output style (default: text)")
    parser.add_argument("--out-format", type=str, default="txt", choices=["txt", "docx", "pdf"], help="Output file format (default: txt)")
    parser.add_argument("--grammar", action="store_true", help="Correct grammar through the configured OpenRouter model")
    parser.add_argument("--advanced-clean", action="store_true", help="Apply heuristic cleanup of common OCR mistakes")
    parser.add_argument("--lang", type=str, default="eng", help="Tesseract languages (default: eng)")
    parser.add_argument("--conf", type=int, default=30, help="Confidence threshold for OCR words (default: 30)")
    parser.add_argument("--ocr-mode", type=str, default="auto", choices=["auto", "raw"], help="OCR preprocessing mode: 'auto' for scanned docs, 'raw' for clean images (default: auto)")
    parser.add_argument("--crop", type=str, nargs="?", const="auto", default=None, help="Crop before OCR: 'auto' (centred 75%%) or X,Y,W,H")
    parser.add_argument("--timeout", type=float, default=60.0, help="Per-request timeout in seconds for OpenRouter API (default: 60.0; set 0 or negative for no timeout)")
    parser.add_argument("--history", type=str, nargs="?", const="", default=None, help="Save the scan to the history file (default: config/history.json or $DOCSCAN_HISTORY)")
    parser.add_argument("--save-image", action="store_true", help="Store the compressed page image in the history record")
    parser.add_argument("--list-history", type=str, nargs="?", const="", default=None, metavar="QUERY", help="List saved scans matching QUERY and exit")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO", help="Set logging verbosity (default: INFO)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    history_path = None
    if args.history is not None:
        history_path = args.history or default_history_path()

    if args.list_history is not None:
        _print_history(HistoryStore(history_path), args.list_history)
        return

    if not args.file:
        print("Please provide --file with an image, a scanned PDF or an OCR response (.json).")
        print("Examples:\n  python main.py --file scan.jpg --format letter --out-format docx\n  python main.py --file page.json --format document --history")
        raise SystemExit(2)

    try:
        crop = _parse_crop(args.crop)
    except ValueError as e:
        print(str(e))
        raise SystemExit(2)

    # Configure external dependencies like Tesseract and get Poppler path
    from docscan.config import configure_dependencies
    poppler_path = configure_dependencies()

    timeout_value = None if args.timeout is not None and args.timeout <= 0 else args.timeout
    try:
        result = process_scan(
            file_path=args.file,
            output_kind=args.format,
            out_format=args.out_format,
            correct_grammar=args.grammar,
            advanced=args.advanced_clean,
            lang=args.lang,
            conf_threshold=args.conf,
            ocr_mode=args.ocr_mode,
            crop=crop,
            poppler_path=poppler_path,
            history_path=history_path,
            save_full_image=args.save_image,
            request_timeout=timeout_value,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        raise SystemExit(1)

    # Print produced paths
    for k, v in result.items():
        if k != "text" and v is not None:
            print(f"{k}: {v}")


if __name__ == "__main__":
    _cli()
