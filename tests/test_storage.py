"""Tests for the key-value storage backends."""

import pytest

from finance_tracker.services.storage import (
    CorruptStateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
)


@pytest.fixture(params=["memory", "json_file"])
def backend(request, tmp_path) -> KeyValueStore:
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(tmp_path / "data")


class TestKeyValueContract:
    """Behaviour every backend must share."""

    def test_missing_key_returns_none(self, backend):
        """Test missing key returns None."""
        assert backend.get("transactions") is None

    def test_set_then_get(self, backend):
        """Test set then get."""
        backend.set("budgets", '{"Food": "100"}')
        assert backend.get("budgets") == '{"Food": "100"}'

    def test_set_overwrites(self, backend):
        """Test set overwrites."""
        backend.set("budgets", "{}")
        backend.set("budgets", '{"Food": "1"}')
        assert backend.get("budgets") == '{"Food": "1"}'

    def test_delete(self, backend):
        """Test delete."""
        backend.set("budgets", "{}")
        assert backend.delete("budgets") is True
        assert backend.delete("budgets") is False
        assert backend.get("budgets") is None

    def test_set_many_and_keys(self, backend):
        """Test set many and keys."""
        backend.set_many({"transactions": "[]", "budgets": "{}"})
        assert backend.keys() == ["budgets", "transactions"]


class TestJsonFileStore:

    def test_one_file_per_key(self, tmp_path):
        """Test one file per key."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("transactions", "[]")
        assert (tmp_path / "transactions.json").read_text(encoding="utf-8") == "[]"

    def test_data_dir_is_created_on_first_write(self, tmp_path):
        """Test data dir is created on first write."""
        data_dir = tmp_path / "nested" / "data"
        store = JsonFileKeyValueStore(data_dir)
        assert store.keys() == []

        store.set("budgets", "{}")
        assert data_dir.is_dir()

    def test_no_temp_files_left_behind(self, tmp_path):
        """Test no temp files left behind."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("budgets", "{}")
        store.set("budgets", '{"Food": "5"}')
        assert sorted(p.name for p in tmp_path.iterdir()) == ["budgets.json"]

    def test_unicode_round_trip(self, tmp_path):
        """Test unicode round trip."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("transactions", '[{"title": "Café ☕"}]')
        assert JsonFileKeyValueStore(tmp_path).get("transactions") == '[{"title": "Café ☕"}]'

    def test_undecodable_file_is_corrupt(self, tmp_path):
        """Test undecodable file is corrupt."""
        (tmp_path / "transactions.json").write_bytes(b"\xff\xfe\x00garbage")
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(CorruptStateError) as exc_info:
            store.get("transactions")
        assert exc_info.value.key == "transactions"

    @pytest.mark.parametrize("key", ["../escape", ".hidden", "a/b", ""])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        """Test rejects unsafe keys."""
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(ValueError):
            store.set(key, "{}")

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test write failure raises storage error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileKeyValueStore(blocker / "data")
        with pytest.raises(StorageError):
            store.set("budgets", "{}")
