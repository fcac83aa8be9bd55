"""Tests for src.core.responder — canned chat replies."""

import random

import pytest

from src.core.responder import (
    EXERCISE_MESSAGE,
    GREETING_MESSAGE,
    TIP_POOL,
    USAGE_MESSAGE,
    VOCABULARY_MESSAGE,
    WEATHER_MESSAGE,
    respond,
)
from src.data.models import ChatMessage


class TestKeywordRules:
    def test_help_is_deterministic(self):
        replies = {respond("help") for _ in range(5)}
        assert replies == {USAGE_MESSAGE}

    @pytest.mark.parametrize("text", ["Hello!", "hi there", "Good morning"])
    def test_greeting(self, text):
        assert respond(text) == GREETING_MESSAGE

    def test_weather(self):
        assert respond("It's raining today") == WEATHER_MESSAGE

    def test_vocabulary(self):
        assert respond("I want to learn new words") == VOCABULARY_MESSAGE

    def test_exercise(self):
        assert respond("Give me a workout") == EXERCISE_MESSAGE

    def test_case_insensitive(self):
        assert respond("HELP") == USAGE_MESSAGE


class TestRuleOrder:
    def test_help_beats_greeting(self):
        assert respond("hi, can you help me") == USAGE_MESSAGE

    def test_greeting_beats_weather(self):
        assert respond("hello, nice weather") == GREETING_MESSAGE

    def test_weather_beats_question(self):
        assert respond("Will it rain tomorrow?") == WEATHER_MESSAGE

    def test_vocabulary_beats_exercise(self):
        assert respond("study or exercise first") == VOCABULARY_MESSAGE


class TestQuestion:
    def test_echoes_last_user_message(self):
        history = [
            ChatMessage(role="user", text="What should I cook tonight?"),
            ChatMessage(role="assistant", text="..."),
        ]
        reply = respond("Why is that?", history)
        assert '"What should I cook tonight?"' in reply

    def test_falls_back_to_input_without_history(self):
        reply = respond("Is tea better than coffee?")
        assert '"Is tea better than coffee?"' in reply

    def test_long_message_truncated(self):
        text = "Can you tell me what the meaning of all of this really is?"
        reply = respond(text, [ChatMessage(role="user", text=text)])
        assert f'"{text[:30]}…"' in reply
        assert text not in reply

    def test_full_width_question_mark(self):
        reply = respond("Is this ok？")
        assert "Is this ok" in reply


class TestFallback:
    def _tips_in(self, reply):
        return [tip for tip in TIP_POOL if tip in reply.lower()]

    def test_short_input_gives_three_tips(self):
        reply = respond("ok", rng=random.Random(1))
        assert reply.startswith("Here are a few ideas: ")
        assert reply.endswith(".")
        assert len(self._tips_in(reply)) == 3

    def test_tip_count_scales_with_length(self):
        reply = respond("x" * 45, rng=random.Random(1))
        assert len(self._tips_in(reply)) == 5

    def test_tip_count_capped_at_five(self):
        reply = respond("y" * 500, rng=random.Random(1))
        assert len(self._tips_in(reply)) == 5

    def test_seeded_rng_is_repeatable(self):
        assert respond("thanks", rng=random.Random(7)) == respond("thanks", rng=random.Random(7))
