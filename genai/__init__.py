"""
Generative AI Layer - Text generation providers and JSON extraction.

Usage:
    from genai import GeminiClient, extract_json_object

    client = GeminiClient(api_key="...")
    text = await client.generate(prompt, temperature=0.7)
    payload = extract_json_object(text)
"""

from .client import BaseTextGenerator, GeminiClient
from .exceptions import (
    GenerationError,
    MalformedResponseError,
    ProviderCallError,
    ProviderUnavailableError,
)
from .parsing import extract_json_array, extract_json_object


__all__ = [
    "BaseTextGenerator",
    "GeminiClient",
    "GenerationError",
    "MalformedResponseError",
    "ProviderCallError",
    "ProviderUnavailableError",
    "extract_json_array",
    "extract_json_object",
]
