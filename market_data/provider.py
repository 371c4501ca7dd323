"""
Stock Data Provider - Company info, quotes and price history.

Backed by Alpha Vantage when an API key is configured. Every public
method degrades to curated or synthetic data instead of failing:
unknown symbols get a degenerate profile, not an error.

Cache TTLs:
- quotes: 60s
- history: 5 min
- company info: 1 hour
"""

import asyncio
import logging
import random
from datetime import date, timedelta
from typing import Any, Optional, TypeVar

import aiohttp

from core.clock import ClockProtocol, SystemClock
from scoring_engine.models import CompanyProfile, canonical_symbol

from .exceptions import MarketDataError, MarketDataFetchError, QuoteUnavailableError
from .mock_data import (
    MOCK_COMPANY_PROFILES,
    MOCK_PRICES,
    generate_mock_history,
    synthetic_price,
)
from .models import OHLCVPoint, Quote, TimePeriod


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class StockDataProvider:
    """
    Alpha Vantage client with offline fallbacks.

    Usage:
        provider = StockDataProvider(api_key=os.getenv("STOCK_API_KEY"))
        profile = await provider.get_company_info("tsla")
        quote = await provider.get_quote("TSLA")
        bars = await provider.get_historical_data("TSLA", "6M")
    """

    BASE_URL = "https://www.alphavantage.co/query"
    DEFAULT_TIMEOUT = 10

    QUOTE_TTL = 60
    HISTORY_TTL = 300
    INFO_TTL = 3600

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        clock: Optional[ClockProtocol] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.clock = clock or SystemClock()
        self._rng = rng or random.Random()
        self._session: Optional[aiohttp.ClientSession] = None

        self._quote_cache: dict[str, tuple[Quote, float]] = {}
        self._history_cache: dict[str, tuple[list[OHLCVPoint], float]] = {}
        self._info_cache: dict[str, tuple[CompanyProfile, float]] = {}

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    # ─────────────────────────────────────────────────────────────
    # Company info
    # ─────────────────────────────────────────────────────────────

    async def get_company_info(self, symbol: str) -> CompanyProfile:
        """Company profile; never None, never raises."""
        symbol = canonical_symbol(symbol)

        cached = self._from_cache(self._info_cache, symbol, self.INFO_TTL)
        if cached is not None:
            return cached

        fallback = MOCK_COMPANY_PROFILES.get(symbol) or CompanyProfile.degenerate(symbol)
        if not self.enabled:
            return fallback

        try:
            data = await self._query({"function": "OVERVIEW", "symbol": symbol})
            if not data.get("Symbol"):
                raise QuoteUnavailableError(f"No company overview for {symbol}", source_name="alphavantage")
        except MarketDataError as e:
            logger.warning(f"[StockDataProvider] Company info for {symbol} unavailable, using fallback: {e}")
            return fallback

        mock = MOCK_COMPANY_PROFILES.get(symbol)
        profile = CompanyProfile(
            symbol=data["Symbol"],
            name=data.get("Name") or symbol,
            description=data.get("Description") or "",
            sector=data.get("Sector") or "Unknown",
            industry=data.get("Industry") or "Unknown",
            logo=mock.logo if mock else None,
            market_cap=_to_float(data.get("MarketCapitalization")),
            pe_ratio=_to_float(data.get("PERatio")),
            dividend_yield=_to_float(data.get("DividendYield")),
        )
        self._info_cache[symbol] = (profile, self.clock.timestamp())
        return profile

    async def search_companies(self, query: str) -> list[dict[str, str]]:
        """Symbol/name matches for a free-text query."""
        query = query.strip()
        if not query:
            return []

        if not self.enabled:
            q = query.lower()
            return [
                {"symbol": symbol, "name": profile.name}
                for symbol, profile in MOCK_COMPANY_PROFILES.items()
                if q in symbol.lower() or q in profile.name.lower()
            ]

        try:
            data = await self._query({"function": "SYMBOL_SEARCH", "keywords": query})
        except MarketDataError as e:
            logger.error(f"[StockDataProvider] Search for {query!r} failed: {e}")
            return []

        matches = data.get("bestMatches") or []
        return [
            {"symbol": m.get("1. symbol", ""), "name": m.get("2. name", "")}
            for m in matches[:10]
            if isinstance(m, dict)
        ]

    # ─────────────────────────────────────────────────────────────
    # Quotes
    # ─────────────────────────────────────────────────────────────

    async def get_quote(self, symbol: str) -> Quote:
        """Latest quote; mock quote when the API is unavailable."""
        symbol = canonical_symbol(symbol)

        cached = self._from_cache(self._quote_cache, symbol, self.QUOTE_TTL)
        if cached is not None:
            return cached

        if not self.enabled:
            return self._mock_quote(symbol, MOCK_PRICES.get(symbol) or synthetic_price(symbol))

        fallback_price = MOCK_PRICES.get(symbol, 100.0)
        try:
            data = await self._query({"function": "GLOBAL_QUOTE", "symbol": symbol})
            raw = data.get("Global Quote") or {}
            price = _to_float(raw.get("05. price"))
            if price is None:
                raise QuoteUnavailableError(f"No quote for {symbol}", source_name="alphavantage")
        except MarketDataError as e:
            logger.warning(f"[StockDataProvider] Quote for {symbol} unavailable, using mock: {e}")
            return self._mock_quote(symbol, fallback_price)

        change = _to_float(str(raw.get("10. change percent", "")).replace("%", ""))
        quote = Quote(
            symbol=symbol,
            price=price,
            change_percent=change if change is not None else 0.0,
            last_updated=self.clock.now(),
        )
        self._quote_cache[symbol] = (quote, self.clock.timestamp())
        return quote

    # ─────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────

    async def get_historical_data(self, symbol: str, period: Any = TimePeriod.ONE_MONTH) -> list[OHLCVPoint]:
        """Bars for the period, oldest first; synthetic when unavailable."""
        symbol = canonical_symbol(symbol)
        period = TimePeriod.parse(period)
        key = f"{symbol}-{period.value}"

        cached = self._from_cache(self._history_cache, key, self.HISTORY_TTL)
        if cached is not None:
            return cached

        quote = await self.get_quote(symbol)
        today = self.clock.today()

        if not self.enabled:
            logger.info(f"[StockDataProvider] No API key, generating mock history for {symbol}")
            return generate_mock_history(symbol, quote.price, period, today)

        try:
            points = await self._fetch_series(symbol, period, today)
        except MarketDataError as e:
            logger.warning(f"[StockDataProvider] History for {symbol} unavailable, using mock: {e}")
            return generate_mock_history(symbol, quote.price, period, today)

        if not points:
            return generate_mock_history(symbol, quote.price, period, today)

        self._history_cache[key] = (points, self.clock.timestamp())
        return points

    async def _fetch_series(self, symbol: str, period: TimePeriod, today: date) -> list[OHLCVPoint]:
        if period.is_long_term:
            function, series_key = "TIME_SERIES_WEEKLY_ADJUSTED", "Weekly Adjusted Time Series"
        else:
            function, series_key = "TIME_SERIES_DAILY_ADJUSTED", "Time Series (Daily)"

        data = await self._query({
            "function": function,
            "symbol": symbol,
            "outputsize": "full" if period is TimePeriod.FIVE_YEARS else "compact",
        })
        series = data.get(series_key)
        if not isinstance(series, dict):
            raise QuoteUnavailableError(f"No {series_key} for {symbol}", source_name="alphavantage")

        cutoff = (today - timedelta(days=period.days)).isoformat()
        points = []
        for day, values in series.items():
            if day < cutoff or not isinstance(values, dict):
                continue
            volume = _to_float(values.get("6. volume") or values.get("5. volume")) or 0
            points.append(OHLCVPoint(
                date=day,
                open=_to_float(values.get("1. open")) or 0.0,
                high=_to_float(values.get("2. high")) or 0.0,
                low=_to_float(values.get("3. low")) or 0.0,
                close=_to_float(values.get("4. close")) or 0.0,
                volume=int(volume),
            ))
        return sorted(points, key=lambda p: p.date)

    # ─────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────

    def _mock_quote(self, symbol: str, price: float) -> Quote:
        return Quote(
            symbol=symbol,
            price=price,
            change_percent=(self._rng.random() - 0.5) * 4,
            last_updated=self.clock.now(),
        )

    def _from_cache(self, cache: dict[str, tuple[T, float]], key: str, ttl: float) -> Optional[T]:
        entry = cache.get(key)
        if entry is None:
            return None
        value, fetched_at = entry
        if not self.clock.is_expired(fetched_at, ttl):
            return value
        del cache[key]
        return None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def _query(self, params: dict[str, str]) -> dict[str, Any]:
        session = await self._get_session()
        try:
            async with session.get(self.base_url, params={**params, "apikey": self.api_key}) as response:
                if response.status != 200:
                    raise MarketDataFetchError(
                        f"Alpha Vantage error: {response.status}",
                        source_name="alphavantage",
                        status_code=response.status,
                    )
                data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise MarketDataFetchError(f"Network error: {e}", source_name="alphavantage")
        except asyncio.TimeoutError:
            raise MarketDataFetchError(
                f"Alpha Vantage request timed out after {self.timeout}s",
                source_name="alphavantage",
            )
        except ValueError as e:
            raise MarketDataFetchError(f"Unreadable response: {e}", source_name="alphavantage")

        if not isinstance(data, dict):
            raise MarketDataFetchError("Unexpected response shape", source_name="alphavantage")
        if "Note" in data or "Information" in data:
            # Alpha Vantage signals throttling in-band with HTTP 200
            raise MarketDataFetchError(
                str(data.get("Note") or data.get("Information")),
                source_name="alphavantage",
            )
        return data

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
