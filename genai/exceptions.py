"""
Generative AI Exceptions.

Raised by ``BaseTextGenerator.generate``. Callers (AI scorer, news
sentiment refinement) catch ``GenerationError`` and fall back to
heuristics; nothing here reaches the scoring service's caller.
"""

from core.errors import HttpStatusError, ProviderError


class GenerationError(ProviderError):
    """Base exception for all text generation errors."""
    pass


class ProviderUnavailableError(GenerationError):
    """No credential configured; the provider is disabled."""
    pass


class ProviderCallError(GenerationError, HttpStatusError):
    """Network or HTTP failure on a live provider call."""
    pass


class MalformedResponseError(GenerationError):
    """Provider answered, but the response envelope was unreadable."""
    pass
