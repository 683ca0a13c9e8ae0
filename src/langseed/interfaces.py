"""Collaborator interfaces the engine talks to.

Storage, analytics and text generation live outside the engine; these
protocols are the only surface it relies on.
"""

from typing import Iterable, Optional, Protocol

from langseed.utils.llm_client import LLMResponse
from langseed.validators.schema import Concept, Question


class TextGenerator(Protocol):
    """Produces raw text for a prompt (see LLMClient)."""

    def generate(self, prompt: str) -> LLMResponse: ...


class VocabularySource(Protocol):
    """Known words of a learner scope."""

    def known_words(self, scope: str, language: str) -> Iterable[str]: ...


class PersistenceSink(Protocol):
    """Receives accepted artifacts."""

    def save_concept(self, scope: str, concept: Concept) -> None: ...

    def save_question(self, scope: str, question: Question) -> None: ...


class AnalyticsSink(Protocol):
    """Receives one record per generator call (see UsageTracker)."""

    def log_query(
        self,
        user_id: Optional[str],
        query_type: str,
        model: str,
        input_tokens: Optional[int] = None,
        output_tokens: Optional[int] = None,
    ): ...
