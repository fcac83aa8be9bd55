"""
Quest Planner — Local Key-Value Database.

The device-local store behind the app: one SQLite table mapping a storage key
to a serialized value. The app only ever writes a single key, but the table
is generic so it can hold anything string-shaped.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from src.ports.storage_port import StorageError

logger = logging.getLogger(__name__)


class SQLiteStorage:
    """SQLite-backed key-value storage.

    Every failure (unwritable directory, locked or corrupt database file) is
    surfaced as StorageError so callers have a single exception to handle.
    """

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from src.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        self._ready = False

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        """Create the parent directory and kv_store table on first use."""
        if self._ready:
            return
        try:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key        TEXT PRIMARY KEY,
                        value      TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Cannot open storage at {self._db_path}: {exc}") from exc
        self._ready = True
        logger.debug("kv_store table initialized at %s", self._db_path)

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        self._ensure_schema()
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read key {key!r}: {exc}") from exc
        if row is None:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        self._ensure_schema()
        now = datetime.now(timezone.utc).isoformat()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, now),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write key {key!r}: {exc}") from exc
        logger.debug("Stored %d chars under %r", len(value), key)

    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        self._ensure_schema()
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to delete key {key!r}: {exc}") from exc
        if cursor.rowcount > 0:
            logger.info("Storage key %r removed", key)
