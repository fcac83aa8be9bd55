"""
Quest Planner — UI-Agnostic Quest Service.

The single owner of the app state. Every user action (pick categories, create
the weekly plan, check off or switch off a quest, change the theme, reset)
goes through this service, which mutates the state in place, notifies
subscribers and mirrors the result to storage.

Targets that don't exist (unknown day, unknown quest id, a disabled quest)
are ignored silently: nothing here raises on bad input from the view.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable

from src.core import scoring
from src.core.plan_generator import DEFAULT_CATEGORIES, build_week_plan
from src.core.responder import respond
from src.data.models import PLAN_DAYS, AppState, Category, ChatMessage, DayPlan, Quest, Theme

if TYPE_CHECKING:
    from src.core.scoring import RankTier
    from src.data.persistence import StatePersistence

logger = logging.getLogger(__name__)

StateListener = Callable[[AppState | None], None]
ChatListener = Callable[[list[ChatMessage]], None]
SelectionListener = Callable[[list[Category]], None]

_SECONDS_PER_DAY = 24 * 60 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_category(key: Category | str) -> Category | None:
    try:
        return Category(key)
    except ValueError:
        logger.warning("Ignoring unknown category %r", key)
        return None


def _dedupe(categories: Iterable[Category | str]) -> list[Category]:
    result: list[Category] = []
    for key in categories:
        category = _coerce_category(key)
        if category is not None and category not in result:
            result.append(category)
    return result


class QuestService:
    """Owns the AppState and exposes every operation the view can invoke."""

    def __init__(
        self,
        persistence: StatePersistence | None = None,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
        reply_delay: float | None = None,
    ) -> None:
        if persistence is None:
            from src.adapters.storage_factory import create_storage
            from src.data.persistence import StatePersistence
            persistence = StatePersistence(create_storage())

        if reply_delay is None:
            from src.config import settings
            reply_delay = settings.CHAT_REPLY_DELAY_SECONDS

        self._persistence = persistence
        self._clock = clock
        self._rng = rng or random.Random()
        self._reply_delay = reply_delay

        self._state: AppState | None = persistence.load()
        self._pending: list[Category] = []
        self._chat: list[ChatMessage] = []
        self._state_listeners: list[StateListener] = []
        self._chat_listeners: list[ChatListener] = []
        self._selection_listeners: list[SelectionListener] = []
        self._chat_generation = 0

        # A saved selection without a plan pre-fills the category picker
        if self._state is not None and not self._state.plans:
            self._pending = list(self._state.selected_categories)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener. Returns a function that unregisters it."""
        self._state_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._state_listeners:
                self._state_listeners.remove(listener)

        return unsubscribe

    def subscribe_chat(self, listener: ChatListener) -> Callable[[], None]:
        """Register a chat history listener. Returns a function that unregisters it."""
        self._chat_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._chat_listeners:
                self._chat_listeners.remove(listener)

        return unsubscribe

    def subscribe_selection(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a pending-selection listener. Returns a function that unregisters it."""
        self._selection_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._selection_listeners:
                self._selection_listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        for listener in list(self._state_listeners):
            listener(self.state)

    def _publish_selection(self) -> None:
        for listener in list(self._selection_listeners):
            listener(self.pending_selection)

    def _publish_chat(self) -> None:
        for listener in list(self._chat_listeners):
            listener(self.chat_history)

    def _commit(self) -> None:
        """Publish the current state and mirror it to storage."""
        self._publish()
        if self._state is not None:
            self._persistence.save(self._state)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> AppState | None:
        """A copy of the current state; mutate it only through the service."""
        if self._state is None:
            return None
        return self._state.model_copy(deep=True)

    @property
    def has_plan(self) -> bool:
        return self._state is not None and self._state.has_plan

    @property
    def pending_selection(self) -> list[Category]:
        return list(self._pending)

    @property
    def theme(self) -> Theme:
        if self._state is None or self._state.theme is None:
            return Theme()
        return self._state.theme.model_copy()

    @property
    def score(self) -> int:
        return self._state.score if self._state is not None else 0

    @property
    def rank(self) -> RankTier:
        return scoring.rank_for_score(self.score)

    @property
    def points_to_next_rank(self) -> int:
        return scoring.points_to_next_rank(self.score)

    @property
    def chat_history(self) -> list[ChatMessage]:
        return list(self._chat)

    def today_index(self, now: datetime | None = None) -> int:
        """Index (0..6) of today's plan, counted in whole days since creation."""
        if self._state is None or self._state.created_at is None:
            return 0
        now = now or self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        elapsed = (now - self._state.created_at).total_seconds()
        return max(0, min(PLAN_DAYS - 1, int(elapsed // _SECONDS_PER_DAY)))

    @property
    def today_plan(self) -> DayPlan | None:
        plan = self._day(self.today_index())
        return plan.model_copy(deep=True) if plan is not None else None

    def day_progress(self, day_index: int) -> tuple[int, int]:
        """Return (done, enabled) quest counts for one day."""
        plan = self._day(day_index)
        if plan is None:
            return 0, 0
        enabled = [q for q in plan.quests if q.enabled]
        return sum(1 for q in enabled if q.done), len(enabled)

    def week_progress(self) -> tuple[int, int]:
        """Return (done, enabled) quest counts across the whole week."""
        done_total = enabled_total = 0
        for day_index in range(PLAN_DAYS):
            done, enabled = self.day_progress(day_index)
            done_total += done
            enabled_total += enabled
        return done_total, enabled_total

    def pick_random_quest(self) -> Quest | None:
        """A random enabled quest from today's plan, for the home screen."""
        plan = self._day(self.today_index())
        if plan is None:
            return None
        enabled = [q for q in plan.quests if q.enabled]
        if not enabled:
            return None
        return self._rng.choice(enabled).model_copy()

    def _day(self, day_index: int) -> DayPlan | None:
        if self._state is None or not 0 <= day_index < len(self._state.plans):
            return None
        return self._state.plans[day_index]

    def _find(self, day_index: int, quest_id: str) -> Quest | None:
        plan = self._day(day_index)
        if plan is None:
            logger.debug("No day %s in plan, ignoring", day_index)
            return None
        quest = plan.find_quest(quest_id)
        if quest is None:
            logger.debug("Quest %s not found on day index %d, ignoring", quest_id, day_index)
        return quest

    # ------------------------------------------------------------------
    # Category selection (before a plan exists)
    # ------------------------------------------------------------------

    def select_category(self, key: Category | str) -> bool:
        if self.has_plan:
            return False
        category = _coerce_category(key)
        if category is None or category in self._pending:
            return False
        self._pending.append(category)
        self._publish_selection()
        return True

    def deselect_category(self, key: Category | str) -> bool:
        if self.has_plan:
            return False
        category = _coerce_category(key)
        if category is None or category not in self._pending:
            return False
        self._pending.remove(category)
        self._publish_selection()
        return True

    def clear_selection(self) -> None:
        if self.has_plan or not self._pending:
            return
        self._pending.clear()
        self._publish_selection()

    # ------------------------------------------------------------------
    # Plan lifecycle
    # ------------------------------------------------------------------

    def create_plan(self, categories: Iterable[Category | str] | None = None) -> bool:
        """Generate the weekly plan. Returns False if a plan already exists.

        Uses `categories` if given, else the pending selection, else the
        default exercise + learning pair.
        """
        if self.has_plan:
            logger.warning("create_plan called while a plan exists, ignoring")
            return False

        chosen = _dedupe(categories if categories is not None else self._pending)
        if not chosen:
            chosen = list(DEFAULT_CATEGORIES)

        theme = self._state.theme if self._state is not None else None
        self._state = AppState(
            selected_categories=chosen,
            plans=build_week_plan(chosen),
            created_at=self._clock(),
            theme=theme,
            score=0,
        )
        self._pending = list(chosen)
        logger.info("Plan created for %s", ", ".join(c.value for c in chosen))
        self._commit()
        return True

    def reset_all(self) -> None:
        """Forget everything: selection, plan, score, chat, and saved state."""
        self._state = None
        self._pending.clear()
        self._chat.clear()
        self._chat_generation += 1
        self._persistence.clear()
        logger.info("All state reset")
        self._publish()
        self._publish_selection()
        self._publish_chat()

    # ------------------------------------------------------------------
    # Quest toggles
    # ------------------------------------------------------------------

    def _set_done(self, quest: Quest, done: bool) -> None:
        quest.done = done
        self._state.score = scoring.apply_completion_toggle(
            self._state.score, quest.points, now_done=done,
        )

    def toggle_quest_done(self, day_index: int, quest_id: str) -> bool:
        """Check or uncheck an enabled quest. Returns False if nothing changed."""
        quest = self._find(day_index, quest_id)
        if quest is None or not quest.enabled:
            return False

        self._set_done(quest, not quest.done)
        logger.info(
            "Quest '%s' (day %d) marked %s, score %d",
            quest.title, day_index + 1, "done" if quest.done else "not done", self._state.score,
        )
        self._commit()
        return True

    def toggle_quest_enabled(self, day_index: int, quest_id: str) -> bool:
        """Switch a quest on or off. Switching off also un-checks it."""
        quest = self._find(day_index, quest_id)
        if quest is None:
            return False

        if quest.enabled and quest.done:
            self._set_done(quest, False)
        quest.enabled = not quest.enabled
        logger.info(
            "Quest '%s' (day %d) switched %s",
            quest.title, day_index + 1, "on" if quest.enabled else "off",
        )
        self._commit()
        return True

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def set_theme(
        self,
        background_color: str | None = None,
        text_color: str | None = None,
    ) -> Theme:
        """Merge the given colors into the current theme and save it."""
        theme = self.theme
        if background_color is not None:
            theme.background_color = background_color
        if text_color is not None:
            theme.text_color = text_color

        if self._state is None:
            self._state = AppState(selected_categories=list(self._pending))
        self._state.theme = theme
        logger.info("Theme set: background %s, text %s", theme.background_color, theme.text_color)
        self._commit()
        return theme.model_copy()

    # ------------------------------------------------------------------
    # Chat panel
    # ------------------------------------------------------------------

    async def send_chat_message(self, text: str) -> ChatMessage | None:
        """Post a user message, pause briefly, then post the canned reply."""
        text = text.strip()
        if not text:
            return None

        self._chat.append(ChatMessage(role="user", text=text))
        self._publish_chat()
        generation = self._chat_generation

        await asyncio.sleep(self._reply_delay)

        if generation != self._chat_generation:
            logger.debug("Chat was reset while a reply was pending, dropping it")
            return None

        reply = ChatMessage(role="assistant", text=respond(text, self._chat, rng=self._rng))
        self._chat.append(reply)
        self._publish_chat()
        return reply
