"""Unit tests for KeywordExtractor and its parsing helpers."""

import pytest

from services.errors import ExtractionError
from services.keyword_extractor import (
    STOP_WORDS,
    KeywordExtractor,
    merge_unique,
    parse_ai_keywords,
    tokenize,
)


class TestTokenize:
    """Tests for the statistical token filter."""

    def test_drops_short_tokens_and_stop_words(self):
        tokens = tokenize("A calm morning in the forest")
        assert tokens == ["calm", "morning", "forest"]

    def test_lower_cases_and_splits_on_punctuation(self):
        tokens = tokenize("Sunset, BEACH; waves!")
        assert tokens == ["sunset", "beach", "waves"]

    def test_keeps_duplicates_in_order(self):
        assert tokenize("rain rain again rain") == ["rain", "rain", "rain"]

    def test_stop_words_are_lower_case(self):
        assert all(word == word.lower() for word in STOP_WORDS)


class TestParseAIKeywords:
    """Tests for splitting AI responses into keywords."""

    def test_plain_lines(self):
        assert parse_ai_keywords("forest\n  morning light  \n\n") == ["forest", "morning light"]

    def test_bullets_and_numbering(self):
        text = "- forest\n* sunrise\n1. morning mist\n2) birds\n• trees"
        assert parse_ai_keywords(text) == ["forest", "sunrise", "morning mist", "birds", "trees"]

    def test_code_fence_and_bold(self):
        text = "```text\n**forest**\n`dew`\n```"
        assert parse_ai_keywords(text) == ["forest", "dew"]


class TestMergeUnique:
    def test_first_seen_order_case_sensitive(self):
        merged = merge_unique(["Forest", "calm"], ["calm", "forest", "morning"])
        assert merged == ["Forest", "calm", "forest", "morning"]

    def test_limit(self):
        assert merge_unique(["a", "b", "c"], limit=2) == ["a", "b"]


class TestKeywordExtractor:
    """Tests for KeywordExtractor.extract()."""

    @pytest.mark.asyncio
    async def test_ai_keywords_come_first(self, mock_ai_service):
        extractor = KeywordExtractor(mock_ai_service)

        keywords = await extractor.extract("a calm morning in the forest")

        assert keywords == ["forest", "morning light", "calm", "morning"]
        mock_ai_service.generate_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_text_returns_empty_without_ai_call(self, mock_ai_service):
        extractor = KeywordExtractor(mock_ai_service)

        assert await extractor.extract("") == []
        assert await extractor.extract("   ") == []
        mock_ai_service.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ai_failure_degrades_to_tokens(self, failing_ai_service):
        extractor = KeywordExtractor(failing_ai_service)

        keywords = await extractor.extract("a calm morning in the forest")

        assert keywords == ["calm", "morning", "forest"]

    @pytest.mark.asyncio
    async def test_ai_failure_and_no_tokens_raises(self, failing_ai_service):
        extractor = KeywordExtractor(failing_ai_service)

        with pytest.raises(ExtractionError):
            await extractor.extract("it is in the")

    @pytest.mark.asyncio
    async def test_ai_success_with_no_tokens_is_not_an_error(self, mock_ai_service):
        mock_ai_service.generate_text.return_value = "sky"
        extractor = KeywordExtractor(mock_ai_service)

        assert await extractor.extract("it is in the") == ["sky"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "text",
        [
            "forest " * 50,
            "one two three four five six seven eight nine ten eleven twelve thirteen fourteen",
            "Rain rain RAIN rAiN storms thunder lightning clouds wind trees leaves branches roots",
        ],
    )
    async def test_result_is_bounded_and_unique(self, mock_ai_service, text):
        mock_ai_service.generate_text.return_value = "\n".join(f"kw{i}" for i in range(8)) + "\nkw1\nforest"
        extractor = KeywordExtractor(mock_ai_service, max_keywords=10)

        keywords = await extractor.extract(text)

        assert len(keywords) <= 10
        assert len(keywords) == len(set(keywords))

    @pytest.mark.asyncio
    async def test_custom_max_keywords(self, mock_ai_service):
        extractor = KeywordExtractor(mock_ai_service, max_keywords=2)

        keywords = await extractor.extract("mountains rivers valleys glaciers")

        assert keywords == ["forest", "morning light"]
