"""
Scoring Engine - Score Cache.

============================================================
RESPONSIBILITY
============================================================
Keyed TTL cache of computed impact scores.

- Key: "<SYMBOL>-<category id>"
- Lazy expiry: an expired entry is dropped when read, no sweeper
- Entries are immutable and replaced wholesale, never patched
- Manual invalidation per symbol or globally

============================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from core.clock import ClockProtocol, SystemClock

from .models import ImpactCategory, ImpactScoreResult, canonical_symbol


logger = logging.getLogger(__name__)


DEFAULT_TTL_SECONDS = 120


def cache_key(symbol: str, category: ImpactCategory) -> str:
    return f"{canonical_symbol(symbol)}-{ImpactCategory.parse(category).value}"


def _key_symbol(key: str) -> str:
    # Category ids never contain "-", symbols may (e.g. BRK-B)
    return key.rsplit("-", 1)[0]


@dataclass(frozen=True)
class ScoreCacheEntry:
    """A cached result and the clock timestamp it was computed at."""
    result: ImpactScoreResult
    computed_at: float


class ScoreCache:
    """
    TTL cache for impact scores.

    Process-lifetime state, owned by one ScoringService. The clock
    is injected so expiry is testable.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.clock = clock or SystemClock()
        self._entries: dict[str, ScoreCacheEntry] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "writes": 0,
            "invalidations": 0,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, symbol: str, category: ImpactCategory) -> Optional[ImpactScoreResult]:
        """Return the cached result, or None on miss or expiry."""
        key = cache_key(symbol, category)
        entry = self._entries.get(key)

        if entry is None:
            self._stats["misses"] += 1
            return None

        if self.clock.is_expired(entry.computed_at, self.ttl_seconds):
            del self._entries[key]
            self._stats["expired"] += 1
            self._stats["misses"] += 1
            logger.debug(f"[ScoreCache] Expired {key}")
            return None

        self._stats["hits"] += 1
        return entry.result

    def put(self, symbol: str, category: ImpactCategory, result: ImpactScoreResult) -> None:
        key = cache_key(symbol, category)
        self._entries[key] = ScoreCacheEntry(result=result, computed_at=self.clock.timestamp())
        self._stats["writes"] += 1

    def invalidate(self, symbol: Optional[str] = None) -> int:
        """
        Drop entries for one symbol (any category), or everything.

        Returns the number of entries removed.
        """
        self._stats["invalidations"] += 1

        if not symbol:
            removed = len(self._entries)
            self._entries.clear()
            logger.info("[ScoreCache] Cleared entire score cache")
            return removed

        target = canonical_symbol(symbol)
        doomed = [key for key in self.keys() if _key_symbol(key) == target]
        for key in doomed:
            del self._entries[key]
        logger.info(f"[ScoreCache] Cleared {len(doomed)} entries for {target}")
        return len(doomed)

    def keys(self) -> list[str]:
        return list(self._entries)

    def get_stats(self) -> dict[str, Any]:
        return {**self._stats, "size": len(self._entries), "ttl_seconds": self.ttl_seconds}
