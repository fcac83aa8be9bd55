"""In-process storage backends: a dict-backed store and an "unavailable" store."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Dict-backed storage. State lasts for the lifetime of the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class NullStorage:
    """Stand-in for a host with no usable storage.

    Reads find nothing and writes are dropped, so the app still runs but
    forgets everything on restart.
    """

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        logger.debug("Storage unavailable, dropping write to %r", key)

    def delete(self, key: str) -> None:
        pass
