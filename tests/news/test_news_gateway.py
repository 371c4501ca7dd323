"""
Tests for the News Layer.

============================================================
PURPOSE
============================================================
- Keyword sentiment labelling
- Base source caching, failure handling and quotas
- NewsAPI article normalization
- Gateway fallback, AI sentiment refinement and health reporting

TEST PRINCIPLES:
- No network: live sources are replaced by fakes
- Time is driven by MockClock

============================================================
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock

from core.clock import MockClock
from genai import BaseTextGenerator, ProviderCallError
from news import (
    BaseNewsSource,
    FetchError,
    KeywordSentimentLabeler,
    MockNewsSource,
    NewsApiSource,
    NewsGateway,
    NewsItem,
    NewsRequest,
    SentimentLabel,
    SourceMetadata,
    SourceStatus,
    build_sentiment_prompt,
)


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeSource(BaseNewsSource):
    """In-memory source returning canned raw articles."""

    def __init__(self, raw: Optional[list] = None, daily_limit: Optional[int] = None, **kwargs):
        super().__init__(api_key="test-key", **kwargs)
        self.daily_limit = daily_limit
        self.fetch_raw = AsyncMock(return_value=raw if raw is not None else [])

    @property
    def metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name="fake",
            display_name="Fake",
            requires_api_key=True,
            rate_limit_per_day=self.daily_limit,
        )

    async def _fetch_raw(self, request: NewsRequest) -> list[dict[str, Any]]:
        return await self.fetch_raw(request)

    def _normalize(self, raw_data, request, index) -> Optional[NewsItem]:
        if not raw_data.get("title"):
            return None
        return NewsItem(
            id=f"{request.symbol}-news-{index}",
            title=raw_data["title"],
            description="",
            url="",
            source="Fake",
            published_at=self.clock.now(),
        )


class FakeGenerator(BaseTextGenerator):
    """Text generator returning a fixed answer."""

    def __init__(self, answer: str = "", enabled: bool = True, error: Optional[Exception] = None):
        super().__init__()
        self.answer = answer
        self._enabled = enabled
        self.error = error
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _generate(self, prompt, temperature, max_output_tokens) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.answer


def make_item(index: int, sentiment: SentimentLabel = SentimentLabel.NEUTRAL) -> NewsItem:
    return NewsItem(
        id=f"AAPL-news-{index}",
        title=f"Headline {index}",
        description=f"Body {index}",
        url=f"https://example.com/{index}",
        source="Wire",
        published_at=NOW - timedelta(hours=index),
        sentiment=sentiment,
    )


@pytest.fixture
def clock():
    return MockClock(NOW)


# ============================================================
# LABELLER
# ============================================================

class TestKeywordSentimentLabeler:
    """Tests for KeywordSentimentLabeler."""

    def test_positive_wins(self):
        labeler = KeywordSentimentLabeler()
        assert labeler.label("Record profit and strong growth") == SentimentLabel.POSITIVE

    def test_negative_wins(self):
        labeler = KeywordSentimentLabeler()
        assert labeler.label("Regulator opens investigation", "fraud lawsuit filed") == SentimentLabel.NEGATIVE

    def test_tie_is_neutral(self):
        labeler = KeywordSentimentLabeler()
        assert labeler.label("Growth despite lawsuit") == SentimentLabel.NEUTRAL

    def test_no_cues_is_neutral(self):
        assert KeywordSentimentLabeler().label("Company holds annual meeting") == SentimentLabel.NEUTRAL

    def test_custom_word_lists(self):
        labeler = KeywordSentimentLabeler(positive_words=["rocket"], negative_words=["crater"])
        assert labeler.label("Shares rocket") == SentimentLabel.POSITIVE
        assert labeler.label("Record profit") == SentimentLabel.NEUTRAL


# ============================================================
# BASE SOURCE
# ============================================================

class TestBaseNewsSource:
    """Tests for BaseNewsSource behaviour via a fake subclass."""

    @pytest.mark.asyncio
    async def test_results_are_cached_per_symbol(self, clock):
        source = FakeSource(raw=[{"title": "A"}], clock=clock, cache_ttl=900)

        first = await source.fetch_news(NewsRequest("Apple Inc.", "aapl"))
        second = await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert first == second
        assert source.fetch_raw.await_count == 1
        assert source.get_stats()["cache_hits"] == 1

    @pytest.mark.asyncio
    async def test_cache_expires_after_ttl(self, clock):
        source = FakeSource(raw=[{"title": "A"}], clock=clock, cache_ttl=900)

        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))
        clock.advance(seconds=900)
        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert source.fetch_raw.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_returns_empty_and_degrades(self, clock):
        source = FakeSource(clock=clock)
        source.fetch_raw.side_effect = FetchError("down", source_name="fake", status_code=500)

        result = await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert result == []
        assert source.get_health().status == SourceStatus.DEGRADED
        assert source.get_stats()["errors"] == 1

    @pytest.mark.asyncio
    async def test_empty_results_are_not_cached(self, clock):
        source = FakeSource(raw=[], clock=clock)

        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))
        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert source.fetch_raw.await_count == 2

    @pytest.mark.asyncio
    async def test_unusable_articles_are_dropped(self, clock):
        source = FakeSource(raw=[{"title": "A"}, {"title": ""}, {"title": "C"}], clock=clock)

        result = await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert [item.title for item in result] == ["A", "C"]

    @pytest.mark.asyncio
    async def test_daily_quota_stops_calls(self, clock):
        source = FakeSource(raw=[], clock=clock, daily_limit=1)

        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))
        result = await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert result == []
        assert source.fetch_raw.await_count == 1
        assert source.get_health().status == SourceStatus.RATE_LIMITED

        clock.advance(days=1)
        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))
        assert source.fetch_raw.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_request_returns_empty(self, clock):
        source = FakeSource(raw=[{"title": "A"}], clock=clock)

        assert await source.fetch_news(NewsRequest("Apple Inc.", "  ")) == []
        source.fetch_raw.assert_not_called()

    @pytest.mark.asyncio
    async def test_clear_cache_for_symbol(self, clock):
        source = FakeSource(raw=[{"title": "A"}], clock=clock)

        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))
        source.clear_cache("aapl")
        await source.fetch_news(NewsRequest("Apple Inc.", "AAPL"))

        assert source.fetch_raw.await_count == 2


# ============================================================
# NEWSAPI NORMALIZATION
# ============================================================

class TestNewsApiSource:
    """Tests for NewsApiSource without network access."""

    def test_disabled_without_key(self):
        assert NewsApiSource(api_key="").enabled is False

    def test_query(self):
        assert NewsApiSource.build_query("Tesla Inc.", "TSLA") == '"Tesla Inc." OR "TSLA"'

    def test_normalize_full_article(self, clock):
        source = NewsApiSource(api_key="k", clock=clock)
        request = NewsRequest("Tesla Inc.", "tsla")
        raw = {
            "title": "Tesla faces labor violation claims",
            "description": "Workers allege unsafe conditions.",
            "url": "https://example.com/a",
            "source": {"name": "Reuters"},
            "publishedAt": "2025-05-30T08:00:00Z",
        }

        item = source._normalize(raw, request, 3)

        assert item.id == "TSLA-news-3"
        assert item.source == "Reuters"
        assert item.published_at == datetime(2025, 5, 30, 8, 0, tzinfo=timezone.utc)
        assert item.sentiment == SentimentLabel.NEGATIVE

    def test_normalize_fills_defaults(self, clock):
        source = NewsApiSource(api_key="k", clock=clock)
        item = source._normalize({"publishedAt": "not a date"}, NewsRequest("X", "X"), 0)

        assert item.title == "Untitled"
        assert item.description == ""
        assert item.source == "Unknown"
        assert item.published_at == NOW
        assert item.sentiment == SentimentLabel.NEUTRAL


# ============================================================
# MOCK SOURCE
# ============================================================

class TestMockNewsSource:
    """Tests for MockNewsSource."""

    def test_three_positive_articles(self, clock):
        items = MockNewsSource(clock).get_articles()

        assert [item.id for item in items] == ["mock-1", "mock-2", "mock-3"]
        assert all(item.sentiment == SentimentLabel.POSITIVE for item in items)
        assert items[0].published_at == NOW
        assert items[2].published_at == NOW - timedelta(days=2)

    def test_limit(self, clock):
        assert len(MockNewsSource(clock).get_articles(2)) == 2


# ============================================================
# GATEWAY
# ============================================================

class TestNewsGateway:
    """Tests for NewsGateway."""

    @pytest.mark.asyncio
    async def test_no_source_uses_fallback(self, clock):
        gateway = NewsGateway(source=None, clock=clock)

        items = await gateway.fetch_news("Apple Inc.", "AAPL")

        assert [item.id for item in items] == ["mock-1", "mock-2", "mock-3"]
        assert gateway.get_stats()["fallbacks"] == 1

    @pytest.mark.asyncio
    async def test_live_items_preferred(self, clock):
        source = FakeSource(raw=[{"title": "Live"}], clock=clock)
        gateway = NewsGateway(source=source, clock=clock)

        items = await gateway.fetch_news("Apple Inc.", "AAPL")

        assert [item.title for item in items] == ["Live"]

    @pytest.mark.asyncio
    async def test_empty_live_result_falls_back(self, clock):
        source = FakeSource(raw=[], clock=clock)
        gateway = NewsGateway(source=source, clock=clock)

        items = await gateway.fetch_news("Apple Inc.", "AAPL")

        assert len(items) == 3

    @pytest.mark.asyncio
    async def test_refine_relabels_in_order(self, clock):
        generator = FakeGenerator('Sure: ["negative", "POSITIVE"]')
        gateway = NewsGateway(generator=generator, clock=clock)
        items = [make_item(0), make_item(1), make_item(2, SentimentLabel.POSITIVE)]

        refined = await gateway.refine_sentiment(items, "Apple Inc.")

        assert [item.sentiment for item in refined] == [
            SentimentLabel.NEGATIVE,
            SentimentLabel.POSITIVE,
            SentimentLabel.POSITIVE,
        ]
        assert "Apple Inc." in generator.prompts[0]

    @pytest.mark.asyncio
    async def test_refine_ignores_unknown_labels(self, clock):
        gateway = NewsGateway(generator=FakeGenerator('["great", 7]'), clock=clock)
        items = [make_item(0, SentimentLabel.NEGATIVE), make_item(1)]

        refined = await gateway.refine_sentiment(items, "Apple Inc.")

        assert refined == items

    @pytest.mark.asyncio
    async def test_refine_failure_keeps_items(self, clock):
        generator = FakeGenerator(error=ProviderCallError("boom", source_name="fake"))
        gateway = NewsGateway(generator=generator, clock=clock)
        items = [make_item(0)]

        assert await gateway.refine_sentiment(items, "Apple Inc.") is items
        assert gateway.get_stats()["refinement_failures"] == 1

    @pytest.mark.asyncio
    async def test_refine_unexpected_error_keeps_items(self, clock):
        decode_error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        gateway = NewsGateway(generator=FakeGenerator(error=decode_error), clock=clock)
        items = [make_item(0)]

        assert await gateway.refine_sentiment(items, "Apple Inc.") is items
        assert gateway.get_stats()["refinement_failures"] == 1

    @pytest.mark.asyncio
    async def test_refine_non_text_answer_keeps_items(self, clock):
        gateway = NewsGateway(generator=FakeGenerator(123), clock=clock)
        items = [make_item(0)]

        assert await gateway.refine_sentiment(items, "Apple Inc.") is items
        assert gateway.get_stats()["refinement_failures"] == 1

    @pytest.mark.asyncio
    async def test_stats_report_source_health(self, clock):
        source = FakeSource(clock=clock, daily_limit=50)
        source.fetch_raw.side_effect = FetchError("down", source_name="fake", status_code=500)
        gateway = NewsGateway(source=source, clock=clock)

        await gateway.fetch_news("Apple Inc.", "AAPL")
        stats = gateway.get_stats()

        assert stats["source_health"]["status"] == "degraded"
        assert stats["source_health"]["requests_today"] == 1
        assert stats["source_health"]["daily_limit"] == 50
        assert stats["source_metadata"]["name"] == "fake"
        assert stats["source_metadata"]["requires_api_key"] is True

    def test_stats_without_source(self, clock):
        stats = NewsGateway(source=None, clock=clock).get_stats()
        assert stats["source_health"] is None
        assert stats["source_metadata"] is None

    @pytest.mark.asyncio
    async def test_refine_disabled_makes_no_call(self, clock):
        generator = FakeGenerator('["negative"]', enabled=False)
        gateway = NewsGateway(generator=generator, clock=clock)
        items = [make_item(0)]

        assert await gateway.refine_sentiment(items, "Apple Inc.") is items
        assert generator.prompts == []

    def test_sentiment_prompt_lists_articles(self):
        prompt = build_sentiment_prompt([make_item(0), make_item(1)], "Apple Inc.")

        assert '1. "Headline 0": Body 0' in prompt
        assert '2. "Headline 1": Body 1' in prompt
        assert "JSON array" in prompt
