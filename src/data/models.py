"""
Quest Planner — Data Models.

The whole app state is one snapshot: the chosen categories, a 7-day plan of
quests, the score and the display theme. The snapshot is persisted as a single
JSON blob, so these models double as the storage contract (camelCase keys).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

PLAN_DAYS = 7
MAX_QUESTS_PER_DAY = 5


class Category(str, Enum):
    """The fixed set of growth domains a user can pick from."""

    EXERCISE = "exercise"
    LEARNING = "learning"
    HABIT = "habit"
    FAITH = "faith"
    SOCIAL = "social"
    FINANCE = "finance"
    SLEEP = "sleep"
    DIET = "diet"
    MENTAL = "mental"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[Category, str] = {
    Category.EXERCISE: "Exercise",
    Category.LEARNING: "Learning",
    Category.HABIT: "Habits",
    Category.FAITH: "Faith",
    Category.SOCIAL: "Social & Helping Others",
    Category.FINANCE: "Money & Saving",
    Category.SLEEP: "Sleep",
    Category.DIET: "Diet",
    Category.MENTAL: "Mental",
}

DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#000000"


def _default_points() -> int:
    """Point value for quests saved without one."""
    from src.config import settings
    return settings.POINTS_PER_QUEST


class _Snapshot(BaseModel):
    """Base for everything stored in the persisted blob."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Quest(_Snapshot):
    """A single checklist item.

    JSON example:
    {"id": "k3j9x0qa", "title": "Jog for 10 minutes", "done": false,
     "enabled": true, "category": "Exercise", "points": 10, "note": ""}
    """

    id: str
    title: str
    done: bool = False
    enabled: bool = True
    category: str | None = None  # display label, decorative only
    points: int = Field(default_factory=_default_points, ge=0)
    note: str = ""

    @model_validator(mode="after")
    def _disabled_is_never_done(self) -> Quest:
        if not self.enabled:
            self.done = False
        return self


class DayPlan(_Snapshot):
    """One day (1..7) of the weekly cycle. Quest order is display order."""

    day: int = Field(ge=1, le=PLAN_DAYS)
    quests: list[Quest] = Field(default_factory=list, max_length=MAX_QUESTS_PER_DAY)

    def find_quest(self, quest_id: str) -> Quest | None:
        for quest in self.quests:
            if quest.id == quest_id:
                return quest
        return None


class Theme(_Snapshot):
    background_color: str = DEFAULT_BACKGROUND_COLOR
    text_color: str = DEFAULT_TEXT_COLOR


class AppState(_Snapshot):
    """The entire persisted snapshot.

    `plans` is either empty (no plan yet) or exactly 7 days, where
    plans[i].day == i + 1.
    """

    selected_categories: list[Category] = Field(default_factory=list)
    plans: list[DayPlan] = Field(default_factory=list)
    created_at: datetime | None = None
    theme: Theme | None = None
    score: int = Field(default=0, ge=0)

    @field_validator("plans")
    @classmethod
    def _full_week_or_nothing(cls, v: list[DayPlan]) -> list[DayPlan]:
        if v and len(v) != PLAN_DAYS:
            raise ValueError(f"expected {PLAN_DAYS} day plans, got {len(v)}")
        for index, plan in enumerate(v):
            if plan.day != index + 1:
                raise ValueError(f"day plan at position {index} is day {plan.day}")
        return v

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def has_plan(self) -> bool:
        return bool(self.plans)


@dataclass
class ChatMessage:
    """One line in the chat panel. Lives in memory only."""

    role: str   # "user" | "assistant"
    text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
