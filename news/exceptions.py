"""
News Source Exceptions.

Raised by ``_fetch_raw`` implementations and caught in
``BaseNewsSource.fetch_news``; ``NewsGateway`` callers never see them.
"""

from typing import Any, Optional

from core.errors import HttpStatusError, ProviderError


class NewsSourceError(ProviderError):
    """Base exception for all news source errors."""
    pass


class RateLimitError(NewsSourceError):
    """HTTP 429 or an exhausted daily quota."""

    extra_fields = ("retry_after_seconds",)

    def __init__(
        self,
        message: str,
        source_name: str = "",
        retry_after_seconds: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, details)
        self.retry_after_seconds = retry_after_seconds


class FetchError(NewsSourceError, HttpStatusError):
    """Network failure or non-200 answer."""

    extra_fields = ("status_code", "url")

    def __init__(
        self,
        message: str,
        source_name: str = "",
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, status_code, details)
        self.url = url


class ParseError(NewsSourceError):
    """Body was not the JSON envelope we expected."""
    pass
