"""
Mock News Source - Deterministic fallback article set.

Served whenever the live provider is unconfigured, failing, or
returns nothing, so scoring always has news to work with.
"""

from datetime import timedelta
from typing import Optional

from core.clock import ClockProtocol, SystemClock

from ..models import NewsItem, SentimentLabel


# (id, title, description, url, source, age in days)
MOCK_ARTICLES: tuple[tuple[str, str, str, str, str, int], ...] = (
    (
        "mock-1",
        "Company announces new sustainability initiative",
        "The company has committed to reducing carbon emissions by 50% by 2030 "
        "through renewable energy investments.",
        "https://example.com/sustainability",
        "Business Wire",
        0,
    ),
    (
        "mock-2",
        "Quarterly earnings exceed expectations",
        "Strong revenue growth driven by new product launches and market expansion.",
        "https://example.com/earnings",
        "Reuters",
        1,
    ),
    (
        "mock-3",
        "Workplace diversity report shows improvement",
        "Annual diversity report reveals increased representation across all "
        "levels of the organization.",
        "https://example.com/diversity",
        "PR Newswire",
        2,
    ),
)


class MockNewsSource:
    """Fixed, all-positive article set timestamped relative to the clock."""

    def __init__(self, clock: Optional[ClockProtocol] = None) -> None:
        self.clock = clock or SystemClock()

    @property
    def name(self) -> str:
        return "mock"

    def get_articles(self, limit: Optional[int] = None) -> list[NewsItem]:
        now = self.clock.now()
        items = [
            NewsItem(
                id=item_id,
                title=title,
                description=description,
                url=url,
                source=source,
                published_at=now - timedelta(days=age_days),
                sentiment=SentimentLabel.POSITIVE,
            )
            for item_id, title, description, url, source, age_days in MOCK_ARTICLES
        ]
        return items[:limit] if limit else items
