"""
Extraction of JSON payloads embedded in free-form model output.

Models wrap answers in prose or markdown fences. We scan for the
first balanced ``{...}`` or ``[...]`` span, skipping brackets that
appear inside string literals, and hand only that span to ``json``.
"""

import json
import logging
from typing import Any, Optional


logger = logging.getLogger(__name__)


def _balanced_span(text: str, opener: str, closer: str) -> Optional[str]:
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unterminated from this opener; later openers are nested inside it
        return None
    return None


def _load_span(text: Any, opener: str, closer: str, expected: type) -> Optional[Any]:
    if not isinstance(text, str) or not text:
        return None
    span = _balanced_span(text, opener, closer)
    if span is None:
        return None
    try:
        value = json.loads(span)
    except ValueError as e:
        logger.debug(f"Embedded JSON did not parse: {e}")
        return None
    return value if isinstance(value, expected) else None


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Return the first balanced ``{...}`` span of ``text`` as a dict, or None."""
    return _load_span(text, "{", "}", dict)


def extract_json_array(text: str) -> Optional[list[Any]]:
    """Return the first balanced ``[...]`` span of ``text`` as a list, or None."""
    return _load_span(text, "[", "]", list)
