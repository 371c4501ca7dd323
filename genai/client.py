"""
Generative AI Client - Text generation providers.

The scoring pipeline only needs "prompt in, text out". Everything
provider-specific (endpoint, payload shape, auth) lives here so the
scorer and the news gateway depend on ``BaseTextGenerator`` alone.

SAFETY: Generated text is untrusted. Callers extract and validate
JSON themselves and treat every failure as "use fallback".
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp

from .exceptions import (
    MalformedResponseError,
    ProviderCallError,
    ProviderUnavailableError,
)


logger = logging.getLogger(__name__)


class BaseTextGenerator(ABC):
    """
    Abstract text generation provider.

    Subclasses must implement:
    - name
    - enabled
    - _generate()
    """

    def __init__(self) -> None:
        self._stats = {
            "total_requests": 0,
            "errors": 0,
        }

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and errors."""
        pass

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the provider has what it needs to be called."""
        pass

    @abstractmethod
    async def _generate(
        self,
        prompt: str,
        temperature: Optional[float],
        max_output_tokens: Optional[int],
    ) -> str:
        pass

    async def generate(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Raises:
            ProviderUnavailableError: provider is not configured
            ProviderCallError: the call failed
            MalformedResponseError: the response envelope was unreadable
        """
        if not self.enabled:
            raise ProviderUnavailableError(
                f"{self.name} is not configured",
                source_name=self.name,
            )

        self._stats["total_requests"] += 1
        try:
            text = await self._generate(prompt, temperature, max_output_tokens)
        except (ProviderCallError, MalformedResponseError):
            self._stats["errors"] += 1
            raise

        if not isinstance(text, str):
            self._stats["errors"] += 1
            raise MalformedResponseError(
                f"{self.name} returned {type(text).__name__} instead of text",
                source_name=self.name,
            )
        return text

    def get_stats(self) -> dict[str, Any]:
        return {**self._stats, "provider": self.name, "enabled": self.enabled}

    async def close(self) -> None:
        """Cleanup resources. Override if needed."""
        pass


class GeminiClient(BaseTextGenerator):
    """
    Google Gemini ``generateContent`` client.

    Disabled (never calls out) when no API key is configured.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_MODEL = "gemini-1.5-flash-latest"
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__()
        self.api_key = api_key or ""
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._session = session

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{self.BASE_URL}/{self.model}:generateContent"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def _build_payload(
        self,
        prompt: str,
        temperature: Optional[float],
        max_output_tokens: Optional[int],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if max_output_tokens is not None:
            generation_config["maxOutputTokens"] = max_output_tokens
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    @staticmethod
    def _extract_text(data: Any) -> str:
        """Pull ``candidates[0].content.parts[0].text``; empty string if absent."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return ""
        if text is None:
            return ""
        if not isinstance(text, str):
            raise MalformedResponseError(
                f"Gemini text part is {type(text).__name__}, not a string",
                source_name="gemini",
            )
        return text

    async def _generate(
        self,
        prompt: str,
        temperature: Optional[float],
        max_output_tokens: Optional[int],
    ) -> str:
        session = await self._get_session()
        payload = self._build_payload(prompt, temperature, max_output_tokens)
        logger.debug(f"[{self.name}] Requesting generation from {self.model} ({len(prompt)} chars)")

        try:
            async with session.post(
                self.url,
                json=payload,
                params={"key": self.api_key},
            ) as response:
                if response.status != 200:
                    text = await response.text(errors="replace")
                    raise ProviderCallError(
                        f"Gemini API error: {response.status}",
                        source_name=self.name,
                        status_code=response.status,
                        details={"response": text[:500]},
                    )

                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise MalformedResponseError(
                        f"Gemini returned a non-JSON body: {e}",
                        source_name=self.name,
                    )

                return self._extract_text(data)

        except aiohttp.ClientError as e:
            raise ProviderCallError(
                f"Network error: {e}",
                source_name=self.name,
            )
        except asyncio.TimeoutError as e:
            raise ProviderCallError(
                f"Gemini request timed out after {self.timeout}s",
                source_name=self.name,
            ) from e

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
