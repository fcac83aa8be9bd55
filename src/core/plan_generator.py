"""
Quest Planner — Weekly Plan Generator.

Turns the user's chosen categories into a 7-day starter plan. Each category
contributes two quests a day from its template pool, rotating one step per
day so consecutive days differ. Days are capped at MAX_QUESTS_PER_DAY; with
three or more categories the later ones simply fall off the end.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Sequence

from src.data.models import (
    MAX_QUESTS_PER_DAY,
    PLAN_DAYS,
    Category,
    DayPlan,
    Quest,
)

logger = logging.getLogger(__name__)

# Used when the user asks for a plan without picking anything
DEFAULT_CATEGORIES: tuple[Category, ...] = (Category.EXERCISE, Category.LEARNING)

TEMPLATE_QUESTS: dict[Category, tuple[str, ...]] = {
    Category.EXERCISE: (
        "10-minute stretch (neck, shoulders, lower back)",
        "Easy 10-minute jog",
        "10 push-ups, 10 sit-ups, 10 back extensions",
    ),
    Category.LEARNING: (
        "15 minutes of vocabulary",
        "Read for 20 minutes",
        "Review lecture notes for 10 minutes",
    ),
    Category.HABIT: (
        "Tidy your desk for 5 minutes",
        "Fold the laundry",
        "Write 3 to-dos for tomorrow",
    ),
    Category.FAITH: (
        "Write 3 lines of gratitude",
        "5 minutes of quiet prayer or meditation",
        "Do one good deed",
    ),
    Category.SOCIAL: (
        "Greet someone and add a kind word",
        "Message a friend or family member to catch up",
        "Say thank you three times",
    ),
    Category.FINANCE: (
        "Log today's spending (3 minutes)",
        "Check for unnecessary expenses",
        "Consider saving or investing a small amount",
    ),
    Category.SLEEP: (
        "No screens for 10 minutes before bed",
        "Record bedtime and wake-up time",
        "Drink a glass of water",
    ),
    Category.DIET: (
        "Aim for 1.5 L of water today",
        "Add a salad or a protein dish",
        "Skip one snack",
    ),
    Category.MENTAL: (
        "Take 3 deep breaths",
        "3-minute meditation",
        "5-minute walk",
    ),
}


def new_quest_id() -> str:
    """Short random token, unique enough within one user's plan."""
    return uuid.uuid4().hex[:8]


def build_week_plan(
    categories: Sequence[Category],
    points: int | None = None,
    id_factory: Callable[[], str] = new_quest_id,
) -> list[DayPlan]:
    """Build the 7-day plan for the given categories.

    Args:
        categories: Selected categories, in selection order. Must be non-empty;
            callers substitute DEFAULT_CATEGORIES for an empty selection.
        points: Point value stamped on every quest (defaults to
            POINTS_PER_QUEST).
        id_factory: Source of quest ids.

    Returns:
        Exactly 7 DayPlans, day 1 first.
    """
    if not categories:
        raise ValueError("build_week_plan needs at least one category")

    if points is None:
        from src.config import settings
        points = settings.POINTS_PER_QUEST

    days: list[DayPlan] = []
    for day in range(1, PLAN_DAYS + 1):
        quests: list[Quest] = []
        for idx, category in enumerate(categories):
            pool = TEMPLATE_QUESTS[category]
            base = (day + idx) % len(pool)
            for title in (pool[base], pool[(base + 1) % len(pool)]):
                quests.append(Quest(
                    id=id_factory(),
                    title=title,
                    category=category.label,
                    points=points,
                ))
        days.append(DayPlan(day=day, quests=quests[:MAX_QUESTS_PER_DAY]))

    logger.info(
        "Built %d-day plan for %s",
        len(days), ", ".join(c.value for c in categories),
    )
    return days
