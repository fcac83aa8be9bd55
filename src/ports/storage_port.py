"""Storage port — abstract interface for the local key-value store.

The persistence layer depends on this protocol, never on a specific backend.
"""

from __future__ import annotations

from typing import Protocol


class StorageError(Exception):
    """Raised when any storage backend operation fails."""


class KeyValueStorage(Protocol):
    """Abstract string-to-string store, one value per key."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
