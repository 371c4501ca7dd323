"""
Core Module - Clock.

============================================================
RESPONSIBILITY
============================================================
Single time source for every TTL decision in the backend.

- Score cache expiry (120s)
- News cache expiry and daily request quotas
- Market data cache expiry
- Timestamps on mock news and synthetic price history

============================================================
DESIGN PRINCIPLES
============================================================
- UTC only, always timezone-aware
- Passed in by the owner of a cache, never looked up globally
- Expiry is "age >= ttl", checked lazily on read

============================================================
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional
import time


def _as_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract time source."""

    @abstractmethod
    def now(self) -> datetime:
        """Current aware UTC datetime."""
        pass

    def timestamp(self) -> float:
        """Current Unix timestamp."""
        return self.now().timestamp()

    def today(self) -> date:
        return self.now().date()

    def seconds_since(self, ts: float) -> float:
        """Age of a timestamp previously taken from this clock."""
        return self.timestamp() - ts

    def is_expired(self, ts: float, ttl_seconds: float) -> bool:
        """True once ``ttl_seconds`` or more have passed since ``ts``."""
        return self.seconds_since(ts) >= ttl_seconds


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> float:
        return time.time()


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Manually driven clock for cache and quota tests.

    Usage:
        clock = MockClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        cache = ScoreCache(ttl_seconds=120, clock=clock)
        clock.advance(seconds=120)   # every entry is now expired
    """

    def __init__(self, initial_time: Optional[datetime] = None) -> None:
        self._time = _as_utc(initial_time or datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._time

    def set_time(self, new_time: datetime) -> None:
        self._time = _as_utc(new_time)

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """Move forward; ``kwargs`` go to timedelta (minutes, hours, days)."""
        self._time += timedelta(seconds=seconds, **kwargs)


# ============================================================
# TIMESTAMP UTILITIES
# ============================================================

def to_iso8601(dt: datetime) -> str:
    return _as_utc(dt).isoformat()


def from_iso8601(iso_string: str) -> datetime:
    """Parse ISO 8601 (``Z`` suffix allowed) into an aware UTC datetime."""
    if iso_string.endswith("Z"):
        iso_string = iso_string[:-1] + "+00:00"
    return _as_utc(datetime.fromisoformat(iso_string))


__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "to_iso8601",
    "from_iso8601",
]
