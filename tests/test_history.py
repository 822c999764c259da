import json

import pytest

from docscan.docs.history import HISTORY_ENV, HistoryStore, default_history_path, format_file_size
from docscan.docs.model import ConversionType, OutputKind, ScanRecord


def _record(text, timestamp, conversion=ConversionType.IMAGE_TO_TEXT, image=None):
    record = ScanRecord.create(text, conversion, OutputKind.PLAIN_TEXT, image_base64=image)
    record.timestamp = timestamp
    record.device_name = "scanner-01"
    return record


def test_scan_record_create_and_to_dict():
    record = ScanRecord.create("Hello", ConversionType.CAMERA_TO_PDF, OutputKind.APPLICATION_LETTER)
    data = record.to_dict()
    assert data["textLength"] == 5
    assert data["conversionType"] == "Camera to PDF"
    assert data["outputFormat"] == "applicationLetter"
    assert "imageBase64" not in data and "thumbnailBase64" not in data
    assert ScanRecord.from_dict(data) == record


def test_scan_record_image_size():
    record = ScanRecord.create("x", ConversionType.IMAGE_TO_TEXT, OutputKind.PLAIN_TEXT, image_base64="abcd")
    assert record.image_size == 4
    assert ScanRecord.from_dict(record.to_dict()).image_base64 == "abcd"


def test_scan_record_from_dict_missing_keys():
    data = _record("x", 1.0).to_dict()
    del data["deviceName"]
    assert ScanRecord.from_dict(data) is None
    assert ScanRecord.from_dict({**_record("x", 1.0).to_dict(), "timestamp": "soon"}) is None


def test_history_add_load_newest_first(tmp_path):
    store = HistoryStore(str(tmp_path / "h" / "history.json"))
    assert store.load() == []
    old = store.add(_record("old scan", 100.0))
    new = store.add(_record("new scan", 200.0))
    assert [r.id for r in store.load()] == [new.id, old.id]
    assert store.get(old.id).extracted_text == "old scan"
    assert store.get("missing") is None


def test_history_search(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    invoice = store.add(_record("Invoice from ACME", 1.0))
    letter = store.add(_record("Dear Sir", 2.0, conversion=ConversionType.CAMERA_TO_PDF))
    assert [r.id for r in store.search("acme")] == [invoice.id]
    assert [r.id for r in store.search("camera")] == [letter.id]
    assert len(store.search("SCANNER")) == 2
    assert len(store.search("  ")) == 2


def test_history_delete_and_clear(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    record = store.add(_record("a", 1.0))
    store.add(_record("b", 2.0))
    assert store.delete(record.id)
    assert not store.delete(record.id)
    assert len(store.load()) == 1
    store.clear()
    assert store.load() == []


def test_history_storage_stats(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    store.add(_record("a", 1.0, image="x" * 1500))
    store.add(_record("b", 2.0))
    assert store.storage_stats() == (2, 1500)


def test_history_skips_malformed_entries(tmp_path):
    path = tmp_path / "history.json"
    good = _record("kept", 1.0).to_dict()
    path.write_text(json.dumps([good, {"id": "broken"}]), encoding="utf-8")
    assert [r.extracted_text for r in HistoryStore(str(path)).load()] == ["kept"]


def test_history_rejects_non_list(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        HistoryStore(str(path)).load()


def test_default_history_path_env(monkeypatch, tmp_path):
    monkeypatch.setenv(HISTORY_ENV, str(tmp_path / "custom.json"))
    assert default_history_path() == str(tmp_path / "custom.json")
    assert HistoryStore().path == str(tmp_path / "custom.json")
    monkeypatch.delenv(HISTORY_ENV)
    assert default_history_path().endswith("history.json")


@pytest.mark.parametrize("size, expected", [
    (0, "0 bytes"),
    (999, "999 bytes"),
    (1000, "1 KB"),
    (1500, "1.5 KB"),
    (2_000_000, "2 MB"),
    (3_300_000_000, "3.3 GB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
