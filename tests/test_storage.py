"""Tests for key-value stores and the versioned blob codec."""

import json
from datetime import date
from decimal import Decimal

import pytest

from money_notes.errors import CorruptBlobError, PersistenceError
from money_notes.models.bill import PendingBill
from money_notes.storage import (
    BLOB_VERSION,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    decode_items,
    encode_items,
    load_items,
    save_items,
)
from tests.factories import make_draft


def _pending(local_id: str = "local_1_aa") -> PendingBill:
    return PendingBill(local_id=local_id, **make_draft(amount="42.50").model_dump())


class TestInMemoryStore:

    def test_read_missing_key(self):
        assert InMemoryKeyValueStore().read_string("nothing") is None

    def test_write_then_read(self):
        store = InMemoryKeyValueStore()
        store.write_string("k", "v")
        assert store.read_string("k") == "v"
        assert store.write_count == 1

    def test_failing_writes(self):
        """Test failure injection used by the ledger tests."""
        store = InMemoryKeyValueStore({"k": "old"})
        store.fail_writes = True
        with pytest.raises(PersistenceError):
            store.write_string("k", "new")
        assert store.read_string("k") == "old"


class TestBlobCodec:

    def test_blob_carries_version_tag(self):
        raw = encode_items([_pending()], PendingBill)
        data = json.loads(raw)
        assert data["version"] == BLOB_VERSION
        assert data["items"][0]["local_id"] == "local_1_aa"
        assert data["items"][0]["amount"] == "42.50"

    def test_decode_restores_models(self):
        raw = encode_items([_pending()], PendingBill)
        (restored,) = decode_items(raw, PendingBill)
        assert restored.local_id == "local_1_aa"
        assert restored.amount == Decimal("42.50")
        assert restored.bill_date == date(2024, 3, 1)
        assert restored.synced is False

    def test_unknown_version_is_rejected(self):
        raw = json.dumps({"version": BLOB_VERSION + 1, "items": []})
        with pytest.raises(CorruptBlobError, match="unsupported version"):
            decode_items(raw, PendingBill)

    def test_garbage_is_rejected(self):
        with pytest.raises(CorruptBlobError):
            decode_items("not json at all", PendingBill)

    def test_bad_entity_is_rejected(self):
        raw = json.dumps({"version": BLOB_VERSION, "items": [{"local_id": "local_1"}]})
        with pytest.raises(CorruptBlobError):
            decode_items(raw, PendingBill)

    def test_load_missing_key_is_empty(self):
        assert load_items(InMemoryKeyValueStore(), "local_bills", PendingBill) == []

    def test_save_propagates_persistence_error(self):
        store = InMemoryKeyValueStore()
        store.fail_writes = True
        with pytest.raises(PersistenceError):
            save_items(store, "local_bills", [_pending()], PendingBill)


class TestJsonFileStore:

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        assert store.read_string("local_bills") is None

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        JsonFileKeyValueStore(path).write_string("current_ledger_id", "ledger-1")

        reopened = JsonFileKeyValueStore(path)
        assert reopened.read_string("current_ledger_id") == "ledger-1"

    def test_writes_keep_other_keys(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        store.write_string("a", "1")
        store.write_string("b", "2")
        assert json.loads((tmp_path / "storage.json").read_text(encoding="utf-8")) == {
            "a": "1",
            "b": "2",
        }

    def test_corrupt_file_is_reported(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(CorruptBlobError):
            JsonFileKeyValueStore(path).read_string("a")

    def test_non_string_values_are_reported(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"a": 1}), encoding="utf-8")
        with pytest.raises(CorruptBlobError):
            JsonFileKeyValueStore(path).read_string("a")
