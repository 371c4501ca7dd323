"""
Core Module - Provider Error Base.

Every external provider (news, generative AI, market data) raises
a subclass of ProviderError internally. None of them reach callers
of the scoring service: each package catches its own family at its
public boundary and falls back.
"""

from datetime import datetime, timezone
from typing import Any, Optional


class ProviderError(Exception):
    """
    Base for provider failures.

    Subclasses list extra attribute names in ``extra_fields``;
    they are appended to ``to_dict()`` for structured logging.
    """

    extra_fields: tuple[str, ...] = ()

    def __init__(
        self,
        message: str,
        source_name: str = "",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.source_name = source_name
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "error_type": type(self).__name__,
            "message": self.message,
            "source_name": self.source_name,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }
        for name in self.extra_fields:
            data[name] = getattr(self, name, None)
        return data


class HttpStatusError(ProviderError):
    """A provider call failed at the transport or HTTP level."""

    extra_fields = ("status_code",)

    def __init__(
        self,
        message: str,
        source_name: str = "",
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, details)
        self.status_code = status_code
