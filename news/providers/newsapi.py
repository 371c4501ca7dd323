"""
NewsAPI Source - Company news from newsapi.org ``/everything``.

Free developer tier: 100 requests/day, API key required.
Articles arrive without sentiment; each one gets a provisional
label from the keyword labeller.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.clock import ClockProtocol

from ..base import BaseNewsSource
from ..exceptions import FetchError, ParseError, RateLimitError
from ..labeler import KeywordSentimentLabeler
from ..models import NewsItem, NewsRequest, SourceMetadata


logger = logging.getLogger(__name__)


class NewsApiSource(BaseNewsSource):
    """
    NewsAPI company news source.

    Query: ``"<company name>" OR "<SYMBOL>"``, newest first, English only.
    """

    BASE_URL = "https://newsapi.org/v2"
    DAILY_LIMIT = 100

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        timeout: Optional[float] = None,
        clock: Optional[ClockProtocol] = None,
        labeler: Optional[KeywordSentimentLabeler] = None,
    ) -> None:
        super().__init__(api_key, cache_ttl, timeout, clock)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.labeler = labeler or KeywordSentimentLabeler()
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name="newsapi",
            display_name="NewsAPI",
            requires_api_key=True,
            rate_limit_per_day=self.DAILY_LIMIT,
            cache_ttl_seconds=self.cache_ttl,
            base_url=self.base_url,
            tags=["news", "company"],
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    @staticmethod
    def build_query(company_name: str, symbol: str) -> str:
        return f'"{company_name}" OR "{symbol}"'

    async def _fetch_raw(
        self,
        request: NewsRequest,
    ) -> list[dict[str, Any]]:
        session = await self._get_session()
        url = f"{self.base_url}/everything"
        params = {
            "q": self.build_query(request.company_name, request.symbol),
            "sortBy": "publishedAt",
            "language": "en",
            "pageSize": str(request.limit),
            "apiKey": self.api_key,
        }

        try:
            async with session.get(url, params=params) as response:
                if response.status == 429:
                    raise RateLimitError(
                        "NewsAPI rate limit exceeded",
                        source_name=self.metadata.name,
                    )

                if response.status != 200:
                    text = await response.text()
                    raise FetchError(
                        f"NewsAPI error: {response.status}",
                        source_name=self.metadata.name,
                        status_code=response.status,
                        url=url,
                        details={"response": text[:500]},
                    )

                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise ParseError(
                        f"NewsAPI returned a non-JSON body: {e}",
                        source_name=self.metadata.name,
                    )

        except aiohttp.ClientError as e:
            raise FetchError(
                f"Network error: {e}",
                source_name=self.metadata.name,
                url=url,
            )
        except asyncio.TimeoutError:
            raise FetchError(
                f"NewsAPI request timed out after {self.timeout}s",
                source_name=self.metadata.name,
                url=url,
            )

        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            return []
        return articles[:request.limit]

    def _normalize(
        self,
        raw_data: dict[str, Any],
        request: NewsRequest,
        index: int,
    ) -> Optional[NewsItem]:
        if not isinstance(raw_data, dict):
            logger.debug(f"[newsapi] Skipping non-object article at index {index}")
            return None

        source = raw_data.get("source") or {}

        return NewsItem(
            id=f"{request.symbol}-news-{index}",
            title=raw_data.get("title") or "Untitled",
            description=raw_data.get("description") or "",
            url=raw_data.get("url") or "",
            source=(source.get("name") if isinstance(source, dict) else None) or "Unknown",
            published_at=self._parse_published(raw_data.get("publishedAt")),
            sentiment=self.labeler.label(
                raw_data.get("title") or "",
                raw_data.get("description") or "",
            ),
        )

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
