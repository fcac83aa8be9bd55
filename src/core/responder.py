"""
Quest Planner — Mock Chat Responder.

A canned-response "assistant" for the chat panel. No model, no network: the
reply comes from the first matching keyword rule, with a randomized list of
tips as the fallback.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Sequence

from src.data.models import ChatMessage

logger = logging.getLogger(__name__)

ECHO_PREFIX_LENGTH = 30
MIN_TIPS = 3
MAX_TIPS = 5

USAGE_MESSAGE = (
    "Here's how to use Quest Planner: pick the areas you want to grow in, "
    "create your 7-day starter plan, then check off quests on the Quests tab. "
    "Each completed quest earns points toward your next rank. "
    "Switch off any quest that doesn't fit your day. "
    "Ask me about exercise, vocabulary or rainy-day ideas anytime!"
)

GREETING_MESSAGE = (
    "Hi there! Ready for today's quests? "
    "Tell me what you'd like to work on, or type \"help\" to see what I can do."
)

WEATHER_MESSAGE = (
    "Bad weather? Here are some indoor ideas:\n"
    "- 10 minutes of stretching or yoga\n"
    "- Bodyweight circuit: squats, push-ups, planks\n"
    "- Read a chapter of a book\n"
    "- Tidy one drawer or shelf\n"
    "- A 3-minute breathing meditation"
)

VOCABULARY_MESSAGE = (
    "Try this 15-minute vocabulary routine:\n"
    "1. Review yesterday's words (3 min)\n"
    "2. Learn 10 new words with example sentences (7 min)\n"
    "3. Say each one out loud in your own sentence (3 min)\n"
    "4. Quick self-quiz without looking (2 min)"
)

EXERCISE_MESSAGE = (
    "Here's a simple 15-minute workout:\n"
    "1. Warm up: neck, shoulder and hip circles (3 min)\n"
    "2. 10 squats, 10 push-ups, 10 sit-ups, repeat twice (8 min)\n"
    "3. 30-second plank (1 min)\n"
    "4. Cool down with a light stretch (3 min)"
)

TIP_POOL: tuple[str, ...] = (
    "start with the smallest quest on your list",
    "do one quest right after breakfast",
    "pair a new habit with something you already do",
    "keep a glass of water on your desk",
    "take a 5-minute walk when you feel stuck",
    "write down one thing you're grateful for",
    "set out tomorrow's clothes tonight",
    "turn off notifications for 20 minutes",
    "celebrate every checked-off quest",
)

_HELP_RE = re.compile(r"\b(help|usage|how to use|how do i use|what can you do)\b")
_GREETING_RE = re.compile(r"\b(hi|hello|hey|good morning|good evening|yo)\b")
_WEATHER_RE = re.compile(r"\b(weather|rain|rainy|raining|snow|snowing|storm|cold outside)\b")
_VOCABULARY_RE = re.compile(r"\b(vocab|vocabulary|words?|study|studying)\b")
_EXERCISE_RE = re.compile(r"\b(exercise|workout|work out|training|muscle|fitness|run|running)\b")


def _last_user_text(history: Sequence[ChatMessage], fallback: str) -> str:
    for message in reversed(history):
        if message.role == "user" and message.text.strip():
            return message.text.strip()
    return fallback


def _truncate(text: str, limit: int = ECHO_PREFIX_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


def _random_tips(text: str, rng: random.Random) -> str:
    count = max(MIN_TIPS, min(MAX_TIPS, MIN_TIPS + len(text) // 20))
    tips = list(TIP_POOL)
    rng.shuffle(tips)
    picked = tips[:count]
    body = ", ".join(picked[:-1]) + f", and {picked[-1]}"
    return f"Here are a few ideas: {body[0].upper()}{body[1:]}."


def respond(
    text: str,
    history: Sequence[ChatMessage] = (),
    rng: random.Random | None = None,
) -> str:
    """Return the canned reply for a chat message.

    Args:
        text: The user's message.
        history: Earlier messages, oldest first. May already include `text`.
        rng: Randomness for the fallback tips (a fresh Random if None).
    """
    normalized = text.strip().lower()

    if _HELP_RE.search(normalized):
        logger.debug("Responder rule: help")
        return USAGE_MESSAGE
    if _GREETING_RE.search(normalized):
        logger.debug("Responder rule: greeting")
        return GREETING_MESSAGE
    if _WEATHER_RE.search(normalized):
        logger.debug("Responder rule: weather")
        return WEATHER_MESSAGE
    if _VOCABULARY_RE.search(normalized):
        logger.debug("Responder rule: vocabulary")
        return VOCABULARY_MESSAGE
    if _EXERCISE_RE.search(normalized):
        logger.debug("Responder rule: exercise")
        return EXERCISE_MESSAGE
    if normalized.endswith(("?", "？")):
        logger.debug("Responder rule: question")
        quoted = _truncate(_last_user_text(history, text.strip()))
        return (
            f"Good question: \"{quoted}\". "
            "I can't look that up, but breaking it into a 5-minute quest is a great start."
        )

    logger.debug("Responder rule: fallback tips")
    return _random_tips(normalized, rng or random.Random())
