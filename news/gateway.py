"""
News Gateway - Single entry point for company news.

Wraps a live source with a deterministic fallback so the scoring
pipeline is never blocked by the news dependency:

1. Live source (cached per symbol) when configured and non-empty
2. Mock article set otherwise

Also hosts best-effort AI sentiment refinement of fetched items.
"""

import logging
from typing import Any, Optional

from core.clock import ClockProtocol, SystemClock
from genai import BaseTextGenerator, GenerationError, extract_json_array

from .base import BaseNewsSource
from .models import NewsItem, NewsRequest, SentimentLabel
from .providers.mock import MockNewsSource


logger = logging.getLogger(__name__)


def build_sentiment_prompt(items: list[NewsItem], company_name: str) -> str:
    """Prompt asking for one sentiment label per article, in order."""
    articles_text = "\n".join(
        f'{i + 1}. "{item.title}": {item.description}'
        for i, item in enumerate(items)
    )
    return f"""
Analyze the sentiment of these news articles about {company_name}.
For each article, determine if the sentiment is "positive", "negative", or "neutral"
based on the impact on the company's reputation, ESG factors, and financial outlook.

Articles:
{articles_text}

Return ONLY a JSON array with the sentiment for each article in order:
["positive", "negative", "neutral", ...]
""".strip()


class NewsGateway:
    """
    Company news with fallback and optional AI relabelling.

    Usage:
        gateway = NewsGateway(source=NewsApiSource(api_key=...), generator=GeminiClient(...))
        items = await gateway.fetch_news("Apple Inc.", "aapl", limit=10)
        items = await gateway.refine_sentiment(items, "Apple Inc.")
    """

    def __init__(
        self,
        source: Optional[BaseNewsSource] = None,
        fallback: Optional[MockNewsSource] = None,
        generator: Optional[BaseTextGenerator] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        clock = clock or SystemClock()
        self.source = source
        self.fallback = fallback or MockNewsSource(clock)
        self.generator = generator

        self._stats = {
            "fetches": 0,
            "fallbacks": 0,
            "refinements": 0,
            "refinement_failures": 0,
        }

    @property
    def refinement_enabled(self) -> bool:
        return self.generator is not None and self.generator.enabled

    async def fetch_news(
        self,
        company_name: str,
        symbol: str,
        limit: int = 10,
    ) -> list[NewsItem]:
        """
        Fetch recent news for a company.

        Never raises and never returns an empty list.
        """
        self._stats["fetches"] += 1
        request = NewsRequest(company_name=company_name, symbol=symbol, limit=limit)

        if self.source is None or not self.source.enabled:
            logger.info(f"[NewsGateway] No news provider configured, using mock news for {request.symbol}")
            return self._use_fallback(limit)

        items = await self.source.fetch_news(request)
        if items:
            return items

        logger.info(f"[NewsGateway] No live news for {request.symbol}, using mock news")
        return self._use_fallback(limit)

    async def refine_sentiment(
        self,
        items: list[NewsItem],
        company_name: str,
    ) -> list[NewsItem]:
        """
        Relabel items using the text generator.

        Best effort: returns ``items`` unchanged when disabled, empty,
        or on any failure. Labels the model omits or garbles keep the
        item's existing label.
        """
        if not items or not self.refinement_enabled:
            return items

        prompt = build_sentiment_prompt(items, company_name)
        try:
            text = await self.generator.generate(prompt)
        except GenerationError as e:
            self._stats["refinement_failures"] += 1
            logger.error(f"[NewsGateway] Sentiment refinement failed for {company_name}: {e}")
            return items
        except Exception as e:
            self._stats["refinement_failures"] += 1
            logger.error(f"[NewsGateway] Unexpected error refining sentiment for {company_name}: {e}", exc_info=True)
            return items

        labels = extract_json_array(text)
        if labels is None:
            self._stats["refinement_failures"] += 1
            logger.warning(f"[NewsGateway] No sentiment array in model output for {company_name}")
            return items

        self._stats["refinements"] += 1
        refined = []
        for index, item in enumerate(items):
            label = SentimentLabel.parse(labels[index]) if index < len(labels) else None
            refined.append(item.with_sentiment(label) if label else item)
        return refined

    def get_stats(self) -> dict[str, Any]:
        return {
            **self._stats,
            "source": self.source.get_stats() if self.source else None,
            "source_health": self.source.get_health().to_dict() if self.source else None,
            "source_metadata": self.source.metadata.to_dict() if self.source else None,
            "refinement_enabled": self.refinement_enabled,
        }

    async def close(self) -> None:
        if self.source is not None:
            await self.source.close()

    def _use_fallback(self, limit: int) -> list[NewsItem]:
        self._stats["fallbacks"] += 1
        return self.fallback.get_articles(limit)
