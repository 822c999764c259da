"""Document outputs and scan history.

Exposes:
- Data model: OutputKind, ConversionType, ScanRecord
- Writers: write_txt, write_docx, write_pdf (DOCX→PDF conversion)
- Reader: read_pdf_scanned (pages rendered via pdf2image into a BufferManager)
- History: HistoryStore, format_file_size
"""

from .model import OutputKind, ConversionType, ScanRecord
from .buffer import BufferManager
from .txt import write_txt
from .docx_io import write_docx
from .pdf_io import write_pdf, read_pdf_scanned
from .history import HistoryStore, default_history_path, format_file_size

__all__ = [
    "OutputKind",
    "ConversionType",
    "ScanRecord",
    "BufferManager",
    "write_txt",
    "write_docx",
    "write_pdf",
    "read_pdf_scanned",
    "HistoryStore",
    "default_history_path",
    "format_file_size",
]
