"""Exception hierarchy for the generation engine.

Callers distinguish four terminal situations:
- LLMError: the text generator was unreachable or failed
- EmptyResponseError: the generator answered with nothing
- ResponseParseError: the answer was not the expected structure
- GenerationExhaustedError: every attempt used unknown vocabulary
"""

from typing import List, Optional


class LangseedError(Exception):
    """Base class for all engine errors."""


class UnsupportedLanguageError(LangseedError, ValueError):
    """Raised for language codes outside the supported set."""


class LLMError(LangseedError):
    """Transport or model failure from the text-generation collaborator."""


class EmptyResponseError(LangseedError):
    """The generator returned no text."""


class ResponseParseError(LangseedError):
    """The response could not be parsed into the expected structure."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


class GenerationExhaustedError(LangseedError):
    """No acceptable content was produced within the attempt budget."""

    def __init__(self, message: str, illegal: List[str], attempts: int):
        super().__init__(message)
        self.illegal = list(illegal)
        self.attempts = attempts
