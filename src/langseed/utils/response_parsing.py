"""JSON extraction from raw LLM text.

Models often wrap JSON in markdown code fences even when told not to, so the
fences are stripped before decoding.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from langseed.errors import EmptyResponseError, ResponseParseError

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```json\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")


def clean_json_response(response: str) -> str:
    """Remove markdown code fences and surrounding whitespace.

    Example:
        >>> clean_json_response('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    cleaned = response.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_json_response(response: Optional[str]) -> Dict[str, Any]:
    """Decode a raw response into a JSON object.

    Args:
        response: Raw text returned by the generator

    Returns:
        Decoded JSON object

    Raises:
        EmptyResponseError: If the response is None or blank
        ResponseParseError: If the text is not valid JSON or not an object
    """
    if response is None or not response.strip():
        raise EmptyResponseError("Empty response from API")

    cleaned = clean_json_response(response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        raise ResponseParseError(
            f"Failed to parse JSON response: {cleaned[:200]}", raw_response=response
        ) from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Expected a JSON object, got {type(data).__name__}", raw_response=response
        )
    return data
