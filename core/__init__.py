"""
Core Module Package.

Shared infrastructure used by every other package.

Components:
- clock: Injectable time abstraction
- config: Environment-driven application settings
- errors: Base class for provider failures
"""

from .clock import ClockProtocol, MockClock, SystemClock, from_iso8601, to_iso8601
from .config import AppSettings
from .errors import HttpStatusError, ProviderError


__all__ = [
    "AppSettings",
    "ClockProtocol",
    "HttpStatusError",
    "MockClock",
    "ProviderError",
    "SystemClock",
    "from_iso8601",
    "to_iso8601",
]
