"""Score and rank rules — pure business logic.

The score is a running total of quest points. Completing a quest adds its
points, un-completing subtracts them, and the total never drops below zero.
Ranks are fixed tiers keyed by inclusive score thresholds.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from src.data.models import DayPlan


@dataclass(frozen=True)
class RankTier:
    level: int       # 1..6
    name: str
    threshold: int   # minimum score, inclusive


RANK_TIERS: tuple[RankTier, ...] = (
    RankTier(1, "Beginner", 0),
    RankTier(2, "Apprentice", 50),
    RankTier(3, "Adventurer", 100),
    RankTier(4, "Veteran", 200),
    RankTier(5, "Hero", 500),
    RankTier(6, "Legend", 1000),
)


def compute_score(plans: Iterable[DayPlan]) -> int:
    """Sum the points of every done, enabled quest across all days."""
    return sum(
        quest.points
        for plan in plans
        for quest in plan.quests
        if quest.enabled and quest.done
    )


def apply_completion_toggle(score: int, points: int, now_done: bool) -> int:
    """Return the score after a quest flips to done (or back), floored at 0."""
    delta = points if now_done else -points
    return max(0, score + delta)


def rank_for_score(score: int) -> RankTier:
    """Return the highest tier whose threshold is <= score."""
    current = RANK_TIERS[0]
    for tier in RANK_TIERS:
        if score >= tier.threshold:
            current = tier
        else:
            break
    return current


def next_rank(score: int) -> RankTier | None:
    """The tier after the current one, or None at the top."""
    level = rank_for_score(score).level
    if level >= len(RANK_TIERS):
        return None
    return RANK_TIERS[level]


def points_to_next_rank(score: int) -> int:
    """Points still needed to reach the next tier (0 at the top tier)."""
    upcoming = next_rank(score)
    if upcoming is None:
        return 0
    return upcoming.threshold - max(0, score)
