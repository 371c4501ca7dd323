"""News source providers."""

from .mock import MockNewsSource
from .newsapi import NewsApiSource

__all__ = [
    "MockNewsSource",
    "NewsApiSource",
]
