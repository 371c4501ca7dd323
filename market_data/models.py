"""
Market Data Models - Quotes and price history.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.clock import to_iso8601


class TimePeriod(Enum):
    """Chart window."""
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]

    @property
    def is_long_term(self) -> bool:
        """Long windows use weekly bars."""
        return self in (TimePeriod.ONE_YEAR, TimePeriod.FIVE_YEARS)

    @classmethod
    def parse(cls, value: Any, default: Optional["TimePeriod"] = None) -> "TimePeriod":
        """Map a raw period id to a member; unknown means ``default`` (1M)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return default or cls.ONE_MONTH


_PERIOD_DAYS: dict[TimePeriod, int] = {
    TimePeriod.ONE_DAY: 1,
    TimePeriod.ONE_WEEK: 7,
    TimePeriod.ONE_MONTH: 30,
    TimePeriod.SIX_MONTHS: 180,
    TimePeriod.ONE_YEAR: 365,
    TimePeriod.FIVE_YEARS: 1825,
}


@dataclass(frozen=True)
class Quote:
    """Latest price for a symbol."""
    symbol: str
    price: float
    change_percent: float
    last_updated: datetime
    currency: str = "USD"

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "price": self.price,
            "currency": self.currency,
            "changePercent": self.change_percent,
            "lastUpdated": to_iso8601(self.last_updated),
        }


@dataclass(frozen=True)
class OHLCVPoint:
    """One price bar. ``date`` is ``YYYY-MM-DD``."""
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
