import json
import logging

import pytest

from history_ledger import HistoryLedger
from key_value_store import JsonFileStore, MemoryStore


def test_memory_store_get_set():
    store = MemoryStore()
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"


def test_json_file_store_missing_file(tmp_path):
    store = JsonFileStore(tmp_path / "nada.json")
    assert store.get("calculatorHistory") is None


def test_json_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "sub" / "history.json"
    JsonFileStore(path).set("a", "1")
    JsonFileStore(path).set("b", "2")

    store = JsonFileStore(path)
    assert store.get("a") == "1"
    assert store.get("b") == "2"
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}
    assert not path.with_name("history.json.tmp").exists()


def test_json_file_store_corrupt_file(tmp_path, caplog):
    path = tmp_path / "history.json"
    path.write_text("{roto", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="calculadora.store"):
        assert JsonFileStore(path).get("a") is None
    assert "corrupto" in caplog.text


def test_json_file_store_non_object_root(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileStore(path).get("a") is None


def test_json_file_store_non_string_value(tmp_path):
    path = tmp_path / "history.json"
    path.write_text('{"a": 5}', encoding="utf-8")
    assert JsonFileStore(path).get("a") is None


def test_ledger_round_trip_on_disk(tmp_path):
    path = tmp_path / "history.json"
    ledger = HistoryLedger(JsonFileStore(path))
    ledger.append("7 × 6", "42")
    ledger.append("1 ÷ 8", "0.125")

    reloaded = HistoryLedger(JsonFileStore(path))
    reloaded.load_from_storage()
    assert reloaded.entries == ledger.entries


def test_unreadable_path_gives_empty_ledger(tmp_path, caplog):
    path = tmp_path / "history.json"
    path.mkdir()

    ledger = HistoryLedger(JsonFileStore(path))
    with caplog.at_level(logging.WARNING, logger="calculadora.store"):
        ledger.load_from_storage()

    assert ledger.entries == ()
    assert "No se pudo leer" in caplog.text


def test_failed_write_removes_temp_file(tmp_path, monkeypatch):
    path = tmp_path / "history.json"
    store = JsonFileStore(path)

    def _fail(_src, _dst):
        raise OSError("disco lleno")

    monkeypatch.setattr("key_value_store.os.replace", _fail)
    with pytest.raises(OSError):
        store.set("a", "1")

    assert not path.exists()
    assert not path.with_name("history.json.tmp").exists()
