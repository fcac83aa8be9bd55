"""
Quest Planner — Centralized configuration.

Loads all settings from .env and coerces them into typed values.
Every key has a default, so an empty environment is a valid setup.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Storage backend: "sqlite" | "memory" | "none"
    STORAGE_BACKEND: str = "sqlite"
    DATABASE_PATH: str = "data/quests.db"
    STORAGE_KEY: str = "growth-planner-v1"

    # Gamification
    POINTS_PER_QUEST: int = 10

    # Chat panel: cosmetic "thinking" pause before the reply appears
    CHAT_REPLY_DELAY_SECONDS: float = 0.8

    @field_validator("STORAGE_BACKEND", mode="before")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        return str(v).strip().lower() or "sqlite"

    @field_validator("POINTS_PER_QUEST", mode="before")
    @classmethod
    def parse_points(cls, v: str | int) -> int:
        return max(0, int(v))

    @field_validator("CHAT_REPLY_DELAY_SECONDS", mode="before")
    @classmethod
    def parse_delay(cls, v: str | float) -> float:
        return max(0.0, float(v))


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        STORAGE_BACKEND=os.getenv("STORAGE_BACKEND", "sqlite"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/quests.db"),
        STORAGE_KEY=os.getenv("STORAGE_KEY", "growth-planner-v1"),
        POINTS_PER_QUEST=os.getenv("POINTS_PER_QUEST", "10"),
        CHAT_REPLY_DELAY_SECONDS=os.getenv("CHAT_REPLY_DELAY_SECONDS", "0.8"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
