"""Unit tests for the fidelity-checked segmentation call."""

import logging

import pytest

from docstruct.core.exceptions import ConfigValueError
from docstruct.structify.prompts import STRUCTIFY_PROMPT
from docstruct.structify.segmentation import (
    edit_distance,
    get_paragraphs,
    normalize_whitespace,
    paragraphs_call_key,
    parse_paragraphs,
)
from fakes import FakeChatProvider, ScriptedChatProvider


class TestParseParagraphs:

    def test_blank_lines_delimit_paragraphs(self):
        content = "First line\nsecond line\n\nThird\n\n\n\nFourth"

        assert parse_paragraphs(content) == ["First line second line", "Third", "Fourth"]

    def test_lines_are_trimmed(self):
        content = "   padded   \n\tline two \n   \n  last  \n"

        assert parse_paragraphs(content) == ["padded line two", "last"]

    def test_empty_response_has_no_paragraphs(self):
        assert parse_paragraphs("\n \n\n") == []


class TestFidelity:

    def test_normalize_whitespace(self):
        assert normalize_whitespace("  a\n\nb \t c ") == "a b c"

    def test_edit_distance(self):
        assert edit_distance("kitten", "sitting") == 3
        assert edit_distance("same", "same") == 0


class TestGetParagraphs:

    @pytest.mark.asyncio
    async def test_faithful_response_accepted_first_try(self, cache):
        chat = FakeChatProvider(paragraph_words=2)

        result = await get_paragraphs(cache, chat, "a b c d e")

        assert result == ["a b", "c d", "e"]
        assert len(chat.calls) == 1
        assert chat.calls[0] == (STRUCTIFY_PROMPT, "a b c d e")

    @pytest.mark.asyncio
    async def test_cache_hit_skips_model(self, cache):
        chat = FakeChatProvider(paragraph_words=2)

        first = await get_paragraphs(cache, chat, "a b c d e")
        second = await get_paragraphs(cache, chat, "a b c d e")

        assert first == second
        assert len(chat.calls) == 1

    @pytest.mark.asyncio
    async def test_retries_until_within_threshold(self, cache):
        text = "alpha beta gamma"
        chat = ScriptedChatProvider([
            "alpha beta\n\ngamma ZZZZZZZZZ",
            "alpha beta\n\ngamma",
            "never used",
        ])

        result = await get_paragraphs(cache, chat, text, max_distance=2, max_retries=3)

        assert result == ["alpha beta", "gamma"]
        assert len(chat.calls) == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_least_divergent_attempt(self, cache, caplog):
        text = "alpha beta gamma"
        chat = ScriptedChatProvider([
            "alpha beta\n\ngamma ZZZZZZZZZ",
            "alpha beta\n\ngamma ZZZZ",
            "alpha\n\nbeta gamma ZZZZZZ",
        ])

        with caplog.at_level(logging.WARNING):
            result = await get_paragraphs(cache, chat, text, max_distance=2, max_retries=3)

        assert result == ["alpha beta", "gamma ZZZZ"]
        assert len(chat.calls) == 3
        assert "best result with distance: 5" in caplog.text

    @pytest.mark.asyncio
    async def test_fallback_after_ten_attempts_at_distance_100(self, cache):
        text = " ".join(f"word{i}" for i in range(40))
        drifted = text + " " + "Q" * 99
        chat = ScriptedChatProvider([drifted] * 10)

        result = await get_paragraphs(cache, chat, text, max_distance=64, max_retries=10)

        assert edit_distance(drifted, text) == 100
        assert len(chat.calls) == 10
        assert result == [drifted]

    @pytest.mark.asyncio
    async def test_fallback_result_is_cached(self, cache):
        text = "alpha beta gamma"
        chat = ScriptedChatProvider(["alpha beta gamma ZZZZZZ"] * 2)

        await get_paragraphs(cache, chat, text, max_distance=2, max_retries=2)

        cached = cache.get_data_sync(paragraphs_call_key(chat, text))
        assert cached == ["alpha beta gamma ZZZZZZ"]

    @pytest.mark.asyncio
    async def test_other_provider_config_misses_cache(self, cache):
        first = FakeChatProvider(paragraph_words=2, fingerprint="model-a")
        second = FakeChatProvider(paragraph_words=2, fingerprint="model-b")

        await get_paragraphs(cache, first, "a b c")
        await get_paragraphs(cache, second, "a b c")

        assert len(first.calls) == 1
        assert len(second.calls) == 1

    @pytest.mark.asyncio
    async def test_zero_retries_rejected(self, cache):
        with pytest.raises(ConfigValueError):
            await get_paragraphs(cache, FakeChatProvider(), "a b", max_retries=0)
