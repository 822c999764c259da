import json
import sys
import types
from datetime import date

import cv2
import numpy as np
import pytest

from docscan.docs.history import HistoryStore
from docscan.llm.grammar import GrammarCorrectionError
from docscan.pipeline import process
from docscan.pipeline.process import (
    EmptyTextError,
    extract_raw_text,
    format_text,
    prepare_text,
    process_scan,
)
from docscan.text.strip import NO_READABLE_TEXT_MESSAGE

TODAY = date(2026, 10, 18)


def _write_response(tmp_path, *markdowns, name="scan.json"):
    path = tmp_path / name
    pages = [{"index": i, "markdown": md} for i, md in enumerate(markdowns)]
    path.write_text(json.dumps({"pages": pages}), encoding="utf-8")
    return str(path)


def _write_image(tmp_path, name="page.png"):
    path = str(tmp_path / name)
    img = np.full((400, 300, 3), 255, dtype=np.uint8)
    cv2.putText(img, "Hi", (50, 200), cv2.FONT_HERSHEY_SIMPLEX, 2, (0, 0, 0), 3)
    cv2.imwrite(path, img)
    return path


def test_prepare_text_strips_and_normalizes():
    assert prepare_text("# ![img-0.jpeg](img-0.jpeg)\nHello , world") == "Hello, world"
    assert prepare_text("he1lo w0rld") == "he1lo w0rld"
    assert prepare_text("he1lo w0rld", advanced=True) == "hello world"


def test_format_text_dispatch():
    assert format_text("Just text", "text") == "Just text"
    assert format_text("I apply.", "letter", TODAY).startswith("October 18, 2026\n\nDear Hiring Manager,")
    assert format_text("Memo\nBody.", "document", TODAY).startswith("MEMO\n====\n\nDate: October 18, 2026")


def test_format_text_empty_input():
    with pytest.raises(EmptyTextError, match="Please provide text to format"):
        format_text("  \n ", "letter")
    assert issubclass(EmptyTextError, ValueError)


def test_format_text_unknown_kind():
    with pytest.raises(ValueError):
        format_text("text", "sonnet")


def test_extract_raw_text_from_ocr_response(tmp_path):
    path = _write_response(tmp_path, "Page one", "![img-0.jpeg](img-0.jpeg)", "Page three")
    assert extract_raw_text(path) == "Page one\n\nPage three"


def test_extract_raw_text_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_raw_text(str(tmp_path / "missing.png"))
    other = tmp_path / "notes.docx"
    other.write_bytes(b"")
    with pytest.raises(ValueError, match="Unsupported file type"):
        extract_raw_text(str(other))


def test_extract_raw_text_from_image(tmp_path, monkeypatch):
    seen = {}

    def fake_ocr(img, lang, conf_threshold, ocr_mode):
        seen.update(shape=img.shape, lang=lang, conf=conf_threshold, mode=ocr_mode)
        return "Line one\n\nLine two"

    monkeypatch.setattr(process, "ocr_image_text", fake_ocr)
    path = _write_image(tmp_path)
    assert extract_raw_text(path, lang="deu", conf_threshold=50, ocr_mode="raw", crop=True) == "Line one\nLine two"
    assert seen == {"shape": (300, 225, 3), "lang": "deu", "conf": 50, "mode": "raw"}


def test_extract_raw_text_image_without_text(tmp_path, monkeypatch):
    monkeypatch.setattr(process, "ocr_image_text", lambda img, **kwargs: "")
    assert extract_raw_text(_write_image(tmp_path)) == NO_READABLE_TEXT_MESSAGE


def test_extract_raw_text_from_pdf(tmp_path, monkeypatch):
    page = _write_image(tmp_path, "rendered.png")
    monkeypatch.setattr(process, "read_pdf_scanned", lambda path, buffer, poppler_path=None: [page, page])
    texts = iter(["First page", "Second page"])
    monkeypatch.setattr(process, "ocr_image_text", lambda img, **kwargs: next(texts))
    pdf = tmp_path / "scan.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    assert extract_raw_text(str(pdf)) == "First page\n\nSecond page"


def test_process_scan_letter_to_txt(tmp_path):
    path = _write_response(tmp_path, "Jane Doe\n555-123-4567\nI would like to apply , please.")
    result = process_scan(path, "letter", out_format="txt", today=TODAY)
    expected = (
        "Jane Doe\n555-123-4567\n\nOctober 18, 2026\n\nDear Hiring Manager,\n\n"
        "I would like to apply, please.\n\nSincerely,\n\nJane Doe"
    )
    assert result["text"] == expected
    assert result["txt"] == str(tmp_path / "scan.letter.txt")
    assert result["record_id"] is None
    with open(result["txt"], encoding="utf-8") as f:
        assert f.read() == expected + "\n"


def test_process_scan_document_to_docx(tmp_path):
    path = _write_response(tmp_path, "Memo\nBody text.")
    result = process_scan(path, "document", out_format="docx", today=TODAY)
    assert result["docx"] == str(tmp_path / "scan.document.docx")
    assert result["text"].startswith("MEMO\n")


def test_process_scan_pdf_failure_reported(tmp_path, monkeypatch):
    fake = types.ModuleType("docx2pdf")

    def convert(src, dst):
        raise NotImplementedError("no converter")

    fake.convert = convert
    monkeypatch.setitem(sys.modules, "docx2pdf", fake)
    path = _write_response(tmp_path, "Plain words here")
    result = process_scan(path, "text", out_format="pdf", today=TODAY)
    assert "pdf" not in result
    assert "no converter" in result["pdf_error"]
    assert result["docx"] == str(tmp_path / "scan.text.docx")


def test_process_scan_rejects_unknown_out_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported output format"):
        process_scan(_write_response(tmp_path, "x"), "text", out_format="odt")


def test_process_scan_empty_text(tmp_path):
    path = _write_response(tmp_path, "§ ¶")
    with pytest.raises(EmptyTextError):
        process_scan(path, "text")


def test_process_scan_grammar_corrector(tmp_path):
    path = _write_response(tmp_path, "i has a cat")
    result = process_scan(path, "text", correct_grammar=True, grammar_corrector=lambda t: "I have a cat.")
    assert result["text"] == "I have a cat."
    assert "grammar_error" not in result


def test_process_scan_grammar_failure_keeps_text(tmp_path):
    def failing(text):
        raise GrammarCorrectionError("API Error: offline")

    path = _write_response(tmp_path, "i has a cat")
    result = process_scan(path, "text", correct_grammar=True, grammar_corrector=failing)
    assert result["text"] == "i has a cat"
    assert result["grammar_error"] == "API Error: offline"


def test_process_scan_records_history(tmp_path):
    history = str(tmp_path / "history.json")
    path = _write_response(tmp_path, "Receipt total 12.50")
    result = process_scan(path, "text", history_path=history)
    records = HistoryStore(history).load()
    assert [r.id for r in records] == [result["record_id"]]
    record = records[0]
    assert record.extracted_text == "Receipt total 12.50"
    assert record.conversion_type == "Image to Text"
    assert record.output_format == "plainText"
    assert record.thumbnail_base64 is None


def test_process_scan_image_history_with_thumbnail(tmp_path, monkeypatch):
    monkeypatch.setattr(process, "ocr_image_text", lambda img, **kwargs: "Scanned words")
    history = str(tmp_path / "history.json")
    result = process_scan(
        _write_image(tmp_path),
        "text",
        history_path=history,
        save_full_image=True,
        conversion_type="Camera to PDF",
    )
    record = HistoryStore(history).get(result["record_id"])
    assert record.conversion_type == "Camera to PDF"
    assert record.thumbnail_base64
    assert record.image_size == len(record.image_base64)
