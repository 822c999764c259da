from __future__ import annotations

import logging
import os
from datetime import date
from typing import List, Optional

from .buffer import BufferManager
from .docx_io import write_docx

logger = logging.getLogger(__name__)


def write_pdf(text: str, out_path: str, title: Optional[str] = None, today: Optional[date] = None) -> str:
    """Export formatted text to PDF by writing a DOCX next to it and converting it.

    Doxygen:
    - @return: ``out_path``.
    - @throws RuntimeError: If docx2pdf is missing or the conversion fails
      (it needs Microsoft Word or LibreOffice on the host).
    """
    docx_path = os.path.splitext(out_path)[0] + ".docx"
    write_docx(text, docx_path, title=title, today=today)
    try:
        from docx2pdf import convert
        convert(docx_path, out_path)
    except Exception as e:
        raise RuntimeError(f"DOCX→PDF conversion failed: {e}") from e
    logger.info("PDF written to %s", out_path)
    return out_path


def read_pdf_scanned(
    path: str,
    buffer: BufferManager,
    dpi: int = 300,
    poppler_path: str | None = None,
) -> List[str]:
    """Render every PDF page to a PNG inside ``buffer``.

    Doxygen:
    - @param path: Path to the PDF file.
    - @param buffer: Session buffer receiving the page images.
    - @param dpi: Render resolution.
    - @param poppler_path: Poppler binary directory, if not on PATH.
    - @return: Page image paths in page order.
    - @throws FileNotFoundError: If the PDF does not exist.
    - @throws RuntimeError: If pdf2image is not installed.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"PDF file not found: {path}")

    try:
        from pdf2image import convert_from_path
    except ImportError as e:
        raise RuntimeError(
            "pdf2image is required to process scanned PDFs. Please install it (`pip install pdf2image`) "
            "and ensure Poppler is installed and configured."
        ) from e

    page_paths: List[str] = []
    for index, page in enumerate(convert_from_path(path, dpi=dpi, poppler_path=poppler_path)):
        out_path = buffer.path(f"pdf-page-{index:04d}.png")
        page.save(out_path)
        page_paths.append(out_path)
    logger.info("Rendered %d page(s) from %s", len(page_paths), path)
    return page_paths
