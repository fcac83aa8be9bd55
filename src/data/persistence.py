"""
Quest Planner — State Persistence.

Reads and writes the whole AppState as one JSON blob under one storage key.
Anything that goes wrong (missing key, unreadable storage, malformed JSON,
a snapshot that no longer matches the model) degrades to "no saved state".
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from src.core.scoring import compute_score
from src.data.models import AppState
from src.ports.storage_port import StorageError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)


class StatePersistence:
    """Single-key snapshot store on top of a KeyValueStorage backend."""

    def __init__(self, storage: KeyValueStorage, key: str | None = None) -> None:
        if key is None:
            from src.config import settings
            key = settings.STORAGE_KEY

        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> AppState | None:
        """Return the saved state, or None if there is nothing usable."""
        try:
            raw = self._storage.get(self._key)
        except StorageError as exc:
            logger.warning("Storage unavailable, starting fresh: %s", exc)
            return None

        if not raw:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Saved state under %r is not valid JSON: %s", self._key, exc)
            return None

        if not isinstance(data, dict):
            logger.warning("Saved state under %r is not an object, ignoring", self._key)
            return None

        try:
            state = AppState.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "Saved state under %r does not match the model (%d errors), ignoring",
                self._key, exc.error_count(),
            )
            return None

        # Snapshots written before the score was stored get it recomputed
        if "score" not in data:
            state.score = compute_score(state.plans)

        logger.debug("Loaded state: %d day plans, score %d", len(state.plans), state.score)
        return state

    def save(self, state: AppState) -> None:
        """Replace the saved snapshot. Failures are logged and dropped."""
        payload = state.model_dump_json(by_alias=True)
        try:
            self._storage.set(self._key, payload)
        except StorageError as exc:
            logger.warning("Could not save state: %s", exc)

    def clear(self) -> None:
        """Remove the saved snapshot."""
        try:
            self._storage.delete(self._key)
        except StorageError as exc:
            logger.warning("Could not clear saved state: %s", exc)
