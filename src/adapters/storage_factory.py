"""Storage backend factory — creates the right backend based on config."""

from __future__ import annotations

from src.config import settings
from src.ports.storage_port import KeyValueStorage


def create_storage(backend: str | None = None) -> KeyValueStorage:
    """Return the storage backend matching STORAGE_BACKEND setting.

    Args:
        backend: Overrides the configured backend name.
    """
    name = (backend or settings.STORAGE_BACKEND).lower()

    if name == "sqlite":
        from src.data.db import SQLiteStorage

        return SQLiteStorage(db_path=settings.DATABASE_PATH)

    if name == "memory":
        from src.adapters.memory_storage import MemoryStorage

        return MemoryStorage()

    if name == "none":
        from src.adapters.memory_storage import NullStorage

        return NullStorage()

    raise ValueError(f"Unknown STORAGE_BACKEND: {name!r}")
