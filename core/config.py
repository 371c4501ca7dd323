"""
Core Module - Application Settings.

============================================================
PURPOSE
============================================================
All runtime configuration for the impact scoring backend.

- Provider credentials (empty string = provider unavailable)
- Provider endpoints
- Cache TTLs
- Logging level

Values are read from the process environment, after loading
a local ``.env`` file if one exists.

============================================================
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppSettings:
    """
    Application settings.

    Missing credentials are not errors: the matching provider
    reports itself disabled and callers use fallback data.
    """

    # News provider
    news_api_key: str = ""
    """NewsAPI key."""

    news_api_base_url: str = "https://newsapi.org/v2"
    """NewsAPI base URL."""

    news_cache_ttl_seconds: int = 900
    """TTL of the per-symbol news cache."""

    # Generative AI provider
    gemini_api_key: str = ""
    """Gemini API key."""

    gemini_model: str = "gemini-1.5-flash-latest"
    """Gemini model used for scoring and sentiment refinement."""

    # Stock data provider
    stock_api_key: str = ""
    """Alpha Vantage API key."""

    stock_api_base_url: str = "https://www.alphavantage.co/query"
    """Alpha Vantage query endpoint."""

    # Scoring
    score_cache_ttl_seconds: int = 120
    """TTL of computed impact scores."""

    single_flight: bool = True
    """Share one in-flight computation between concurrent identical requests."""

    # Transport
    http_timeout_seconds: float = 10.0
    """Total timeout applied to every outbound HTTP request."""

    # Logging
    log_level: str = "INFO"
    """Logging level."""

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AppSettings":
        """Load settings from environment variables (and ``.env``)."""
        load_dotenv(dotenv_path)
        return cls(
            news_api_key=os.getenv("NEWS_API_KEY", ""),
            news_api_base_url=os.getenv("NEWS_API_BASE_URL", "https://newsapi.org/v2"),
            news_cache_ttl_seconds=int(os.getenv("NEWS_CACHE_TTL_SECONDS", "900")),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest"),
            stock_api_key=os.getenv("STOCK_API_KEY", ""),
            stock_api_base_url=os.getenv("STOCK_API_BASE_URL", "https://www.alphavantage.co/query"),
            score_cache_ttl_seconds=int(os.getenv("SCORE_CACHE_TTL_SECONDS", "120")),
            single_flight=_env_bool("SINGLE_FLIGHT", "true"),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def news_enabled(self) -> bool:
        return bool(self.news_api_key)

    @property
    def ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def stock_enabled(self) -> bool:
        return bool(self.stock_api_key)

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.score_cache_ttl_seconds <= 0:
            errors.append("score_cache_ttl_seconds must be positive")

        if self.news_cache_ttl_seconds <= 0:
            errors.append("news_cache_ttl_seconds must be positive")

        if self.http_timeout_seconds <= 0:
            errors.append("http_timeout_seconds must be positive")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"unknown log_level: {self.log_level}")

        return errors
