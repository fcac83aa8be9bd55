"""Tests for the key-value storage backends and the backend factory."""

import pytest

from src.adapters.memory_storage import MemoryStorage, NullStorage
from src.adapters.storage_factory import create_storage
from src.data.db import SQLiteStorage
from src.ports.storage_port import StorageError


class TestSQLiteStorage:
    def test_get_missing_key(self, sqlite_storage):
        assert sqlite_storage.get("nothing-here") is None

    def test_set_then_get(self, sqlite_storage):
        sqlite_storage.set("k", '{"a": 1}')
        assert sqlite_storage.get("k") == '{"a": 1}'

    def test_set_replaces_value(self, sqlite_storage):
        sqlite_storage.set("k", "first")
        sqlite_storage.set("k", "second")
        assert sqlite_storage.get("k") == "second"

    def test_delete(self, sqlite_storage):
        sqlite_storage.set("k", "v")
        sqlite_storage.delete("k")
        assert sqlite_storage.get("k") is None

    def test_delete_missing_key_is_fine(self, sqlite_storage):
        sqlite_storage.delete("never-set")

    def test_survives_new_instance(self, tmp_db_path):
        SQLiteStorage(db_path=tmp_db_path).set("k", "v")
        assert SQLiteStorage(db_path=tmp_db_path).get("k") == "v"

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "quests.db"
        SQLiteStorage(db_path=str(path)).set("k", "v")
        assert path.exists()

    def test_unusable_path_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        storage = SQLiteStorage(db_path=str(blocker / "quests.db"))
        with pytest.raises(StorageError):
            storage.get("k")

    def test_corrupt_database_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "corrupt.db"
        path.write_bytes(b"this is definitely not sqlite" * 100)
        with pytest.raises(StorageError):
            SQLiteStorage(db_path=str(path)).get("k")


class TestMemoryStorage:
    def test_round_trip(self):
        storage = MemoryStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"
        assert "k" in storage

    def test_delete(self):
        storage = MemoryStorage({"k": "v"})
        storage.delete("k")
        storage.delete("k")
        assert storage.get("k") is None


class TestNullStorage:
    def test_drops_writes(self):
        storage = NullStorage()
        storage.set("k", "v")
        assert storage.get("k") is None
        storage.delete("k")


class TestCreateStorage:
    def test_sqlite(self):
        assert isinstance(create_storage("sqlite"), SQLiteStorage)

    def test_memory(self):
        assert isinstance(create_storage("memory"), MemoryStorage)

    def test_none(self):
        assert isinstance(create_storage("none"), NullStorage)

    def test_case_insensitive(self):
        assert isinstance(create_storage("MEMORY"), MemoryStorage)

    def test_uses_configured_backend(self):
        # conftest sets STORAGE_BACKEND=memory
        assert isinstance(create_storage(), MemoryStorage)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown STORAGE_BACKEND"):
            create_storage("redis")
