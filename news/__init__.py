"""
News Layer - Company news with graceful degradation.

This package provides:
- NewsAPI: Live company news (API key required)
- Mock: Deterministic fallback article set
- Keyword sentiment labelling of raw articles
- NewsGateway: fetch + optional AI sentiment refinement

Usage:
    from news import NewsGateway, NewsApiSource

    gateway = NewsGateway(source=NewsApiSource(api_key="optional"))
    items = await gateway.fetch_news("Tesla Inc.", "TSLA", limit=10)

Fallback policy:
- No key configured -> mock set (not logged as an error)
- Fetch failed / empty -> mock set (failure logged by the source)
"""

from .base import BaseNewsSource
from .exceptions import (
    FetchError,
    NewsSourceError,
    ParseError,
    RateLimitError,
)
from .gateway import NewsGateway, build_sentiment_prompt
from .labeler import KeywordSentimentLabeler
from .models import (
    NewsItem,
    NewsRequest,
    SentimentLabel,
    SourceHealth,
    SourceMetadata,
    SourceStatus,
)
from .providers import MockNewsSource, NewsApiSource


__all__ = [
    # Base
    "BaseNewsSource",

    # Providers
    "MockNewsSource",
    "NewsApiSource",

    # Gateway
    "NewsGateway",
    "build_sentiment_prompt",
    "KeywordSentimentLabeler",

    # Models
    "NewsItem",
    "NewsRequest",
    "SentimentLabel",
    "SourceHealth",
    "SourceMetadata",
    "SourceStatus",

    # Exceptions
    "NewsSourceError",
    "FetchError",
    "ParseError",
    "RateLimitError",
]
