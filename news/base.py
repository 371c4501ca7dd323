"""
Base News Source - Abstract interface for all company news adapters.

All sources follow the same contract: non-blocking, cached, and
gracefully degrading. A failed fetch is logged and returns an empty
list; the gateway decides what to show instead.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from core.clock import ClockProtocol, SystemClock, from_iso8601

from .exceptions import NewsSourceError, RateLimitError
from .models import (
    NewsItem,
    NewsRequest,
    SourceHealth,
    SourceMetadata,
    SourceStatus,
)


logger = logging.getLogger(__name__)


class BaseNewsSource(ABC):
    """
    Abstract base class for news sources.

    Subclasses supply ``metadata``, ``_fetch_raw`` and ``_normalize``.
    ``fetch_news`` never raises: it validates the request, serves the
    per-symbol cache, enforces the daily quota and makes exactly one
    upstream call, logging and returning [] on any failure.
    """

    DEFAULT_CACHE_TTL = 900  # 15 minutes
    DEFAULT_TIMEOUT = 10

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        timeout: Optional[float] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.cache_ttl = cache_ttl or self.DEFAULT_CACHE_TTL
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.clock = clock or SystemClock()

        # symbol -> (items, fetched_at timestamp)
        self._cache: dict[str, tuple[list[NewsItem], float]] = {}

        self._health = SourceHealth(
            status=SourceStatus.UNKNOWN,
            last_check=self.clock.now(),
        )

        self._requests_today: int = 0
        self._day = self.clock.today()

        self._stats = {
            "total_requests": 0,
            "cache_hits": 0,
            "cache_misses": 0,
            "errors": 0,
            "rate_limits_hit": 0,
            "successful_fetches": 0,
        }

    @property
    @abstractmethod
    def metadata(self) -> SourceMetadata:
        """Static description of the source."""
        pass

    @property
    def enabled(self) -> bool:
        """Whether the source can be called at all."""
        return not self.metadata.requires_api_key or bool(self.api_key)

    @abstractmethod
    async def _fetch_raw(
        self,
        request: NewsRequest,
    ) -> list[dict[str, Any]]:
        """
        Fetch raw articles from the source.

        Should raise NewsSourceError subclasses on failure.
        """
        pass

    @abstractmethod
    def _normalize(
        self,
        raw_data: dict[str, Any],
        request: NewsRequest,
        index: int,
    ) -> Optional[NewsItem]:
        """Normalize one raw article. Returns None if it is unusable."""
        pass

    # ─────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────

    async def fetch_news(self, request: NewsRequest) -> list[NewsItem]:
        """
        Fetch normalized news for a company.

        NEVER raises - returns empty list on failure or when disabled.
        """
        try:
            request.validate()
        except ValueError as e:
            logger.warning(f"[{self.metadata.name}] Invalid request: {e}")
            return []

        if not self.enabled:
            self._health.status = SourceStatus.DISABLED
            return []

        self._stats["total_requests"] += 1

        if request.use_cache:
            cached = self._get_from_cache(request.symbol)
            if cached is not None:
                self._stats["cache_hits"] += 1
                return cached

        self._stats["cache_misses"] += 1

        if not self._check_rate_limit():
            logger.warning(f"[{self.metadata.name}] Daily request budget exhausted")
            self._stats["rate_limits_hit"] += 1
            self._health.status = SourceStatus.RATE_LIMITED
            return []

        result = await self._fetch_once(request)

        if result:
            self._cache[request.symbol] = (result, self.clock.timestamp())
            self._stats["successful_fetches"] += 1

        return result

    def get_health(self) -> SourceHealth:
        """Health snapshot with the current quota usage."""
        self._health.last_check = self.clock.now()
        self._health.requests_today = self._requests_today
        self._health.daily_limit = self.metadata.rate_limit_per_day
        return self._health

    def get_stats(self) -> dict[str, Any]:
        """Counters for requests, cache hits and failures."""
        total = self._stats["total_requests"]
        cache_rate = self._stats["cache_hits"] / total * 100 if total > 0 else 0

        return {
            **self._stats,
            "cache_hit_rate_pct": round(cache_rate, 2),
            "cached_symbols": len(self._cache),
            "source_name": self.metadata.name,
        }

    def clear_cache(self, symbol: Optional[str] = None) -> None:
        """Drop cached news for one symbol, or all of it."""
        if symbol:
            self._cache.pop(symbol.strip().upper(), None)
        else:
            self._cache.clear()

    async def close(self) -> None:
        """Release network resources held by the source."""
        pass

    # ─────────────────────────────────────────────────────────────
    # Internal methods
    # ─────────────────────────────────────────────────────────────

    async def _fetch_once(self, request: NewsRequest) -> list[NewsItem]:
        start = self.clock.timestamp()
        self._record_request()

        try:
            raw_data = await self._fetch_raw(request)
        except RateLimitError as e:
            logger.warning(f"[{self.metadata.name}] Rate limit hit: {e}")
            self._health.status = SourceStatus.RATE_LIMITED
            self._stats["rate_limits_hit"] += 1
            return []
        except NewsSourceError as e:
            self._record_failure(e)
            logger.warning(f"[{self.metadata.name}] Fetch failed for {request.symbol}: {e}")
            return []
        except Exception as e:
            self._record_failure(e)
            logger.error(f"[{self.metadata.name}] Unexpected error for {request.symbol}: {e}")
            return []

        results: list[NewsItem] = []
        for index, item in enumerate(raw_data):
            normalized = self._normalize(item, request, index)
            if normalized:
                results.append(normalized)

        self._health.latency_ms = (self.clock.timestamp() - start) * 1000
        self._health.status = SourceStatus.HEALTHY
        self._health.consecutive_failures = 0
        return results

    def _record_failure(self, error: Exception) -> None:
        self._stats["errors"] += 1
        self._health.consecutive_failures += 1
        self._health.error_count += 1
        self._health.last_error = str(error)
        self._health.last_error_time = self.clock.now()

        if self._health.consecutive_failures >= 3:
            self._health.status = SourceStatus.UNAVAILABLE
        else:
            self._health.status = SourceStatus.DEGRADED

    def _get_from_cache(self, symbol: str) -> Optional[list[NewsItem]]:
        """Get cached items if still within TTL."""
        if symbol not in self._cache:
            return None

        items, fetched_at = self._cache[symbol]
        if not self.clock.is_expired(fetched_at, self.cache_ttl):
            return items

        del self._cache[symbol]
        return None

    def _check_rate_limit(self) -> bool:
        """Check the daily request budget."""
        today = self.clock.today()
        if today > self._day:
            self._requests_today = 0
            self._day = today

        limit = self.metadata.rate_limit_per_day
        return not limit or self._requests_today < limit

    def _record_request(self) -> None:
        self._requests_today += 1

    def _parse_published(self, value: Any) -> datetime:
        """Parse an ISO timestamp, falling back to the clock's now."""
        if isinstance(value, str) and value:
            try:
                return from_iso8601(value)
            except ValueError:
                pass
        return self.clock.now()
