"""
News Data Models - Normalized company news structures.

News items are produced by the news gateway and consumed read-only
by the scorers. They are frozen; relabelling returns a new item.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.clock import to_iso8601


class SentimentLabel(Enum):
    """Provisional sentiment of a news item."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def parse(cls, value: Any) -> Optional["SentimentLabel"]:
        """Map a raw label to a member; None when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class SourceStatus(Enum):
    """Health status of a news source."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NewsItem:
    """
    A single news article about a company.

    ``source`` is the publication name; ``published_at`` is UTC.
    """
    id: str
    title: str
    description: str
    url: str
    source: str
    published_at: datetime
    sentiment: SentimentLabel = SentimentLabel.NEUTRAL

    @property
    def text(self) -> str:
        """Title and description, as matched by keyword scorers."""
        return f"{self.title} {self.description}"

    def with_sentiment(self, sentiment: SentimentLabel) -> "NewsItem":
        return replace(self, sentiment=sentiment)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "source": self.source,
            "publishedAt": to_iso8601(self.published_at),
            "sentiment": self.sentiment.value,
        }


@dataclass
class NewsRequest:
    """Request parameters for fetching company news."""
    company_name: str
    symbol: str
    limit: int = 10
    use_cache: bool = True

    def __post_init__(self) -> None:
        self.symbol = self.symbol.strip().upper()

    def validate(self) -> None:
        """Validate request parameters."""
        if not self.symbol:
            raise ValueError("symbol must not be empty")
        if self.limit < 1 or self.limit > 100:
            raise ValueError("limit must be between 1 and 100")


@dataclass
class SourceHealth:
    """Health status of a news source."""
    status: SourceStatus
    last_check: datetime
    latency_ms: Optional[float] = None
    error_count: int = 0
    last_error: Optional[str] = None
    last_error_time: Optional[datetime] = None
    consecutive_failures: int = 0
    requests_today: int = 0
    daily_limit: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "last_check": self.last_check.isoformat(),
            "latency_ms": self.latency_ms,
            "error_count": self.error_count,
            "last_error": self.last_error,
            "consecutive_failures": self.consecutive_failures,
            "requests_today": self.requests_today,
            "daily_limit": self.daily_limit,
        }


@dataclass
class SourceMetadata:
    """Metadata about a news source."""
    name: str
    display_name: str
    requires_api_key: bool = False
    rate_limit_per_day: Optional[int] = None
    cache_ttl_seconds: int = 900
    base_url: str = ""
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "requires_api_key": self.requires_api_key,
            "rate_limit_per_day": self.rate_limit_per_day,
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "base_url": self.base_url,
            "tags": self.tags,
        }
