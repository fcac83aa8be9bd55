"""Shared test fixtures and configuration.

Sets environment variables before any src imports so settings pick up
test-friendly values, and provides storage and service fixtures.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_PATH", "data/test-quests.db")
os.environ.setdefault("STORAGE_KEY", "growth-planner-v1")
os.environ.setdefault("POINTS_PER_QUEST", "10")
os.environ.setdefault("CHAT_REPLY_DELAY_SECONDS", "0")

import random
from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_quests.db")


@pytest.fixture
def sqlite_storage(tmp_db_path):
    """Return a SQLiteStorage instance backed by a temp file."""
    from src.data.db import SQLiteStorage
    return SQLiteStorage(db_path=tmp_db_path)


@pytest.fixture
def memory_storage():
    from src.adapters.memory_storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def persistence(memory_storage):
    """Return a StatePersistence over an in-memory store."""
    from src.data.persistence import StatePersistence
    return StatePersistence(memory_storage, key="growth-planner-v1")


@pytest.fixture
def clock():
    """A settable clock: call clock.now = ... to move time."""

    class _Clock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def service(persistence, clock):
    """Return a QuestService with deterministic time, randomness and no chat delay."""
    from src.core.quest_service import QuestService
    return QuestService(
        persistence=persistence,
        clock=clock,
        rng=random.Random(42),
        reply_delay=0,
    )
