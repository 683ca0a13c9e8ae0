"""Shared fixtures: a scripted text generator and an in-memory sink."""

import json
from typing import Dict, Iterable, List, Optional, Union

import pytest

from langseed.utils.llm_client import LLMResponse
from langseed.utils.usage_tracker import UsageTracker
from langseed.validators.schema import Concept, Question
from langseed.validators.vocabulary_validator import VocabularySet


class StubLLMClient:
    """Returns scripted responses in order and records every prompt.

    Scripted items may be a dict (sent as JSON), a raw string, None (empty
    response) or an exception instance (raised from generate()).
    """

    def __init__(self, responses: Iterable[Union[dict, str, None, Exception]], model: str = "stub-model"):
        self.responses = list(responses)
        self.model = model
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("StubLLMClient ran out of scripted responses")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        text = json.dumps(item, ensure_ascii=False) if isinstance(item, dict) else item
        return LLMResponse(text=text, model=self.model, input_tokens=10, output_tokens=5)

    @property
    def call_count(self) -> int:
        return len(self.prompts)


class InMemorySink:
    """Persistence sink collecting saved artifacts."""

    def __init__(self, fail_on: Optional[Iterable[str]] = None):
        self.concepts: Dict[str, List[Concept]] = {}
        self.questions: Dict[str, List[Question]] = {}
        self.fail_on = set(fail_on or [])

    def save_concept(self, scope: str, concept: Concept) -> None:
        if concept.word in self.fail_on:
            raise RuntimeError(f"cannot save {concept.word}")
        self.concepts.setdefault(scope, []).append(concept)

    def save_question(self, scope: str, question: Question) -> None:
        self.questions.setdefault(scope, []).append(question)


class DictVocabularySource:
    """Vocabulary source backed by a dict keyed by (scope, language)."""

    def __init__(self, words: Dict[tuple, List[str]]):
        self.words = words

    def known_words(self, scope: str, language: str) -> List[str]:
        return self.words.get((scope, language), [])


@pytest.fixture
def zh_vocab():
    """Known Chinese words: 我, 你, 好."""
    return VocabularySet("zh", ["我", "你", "好"])


@pytest.fixture
def en_vocab():
    return VocabularySet("en", ["the", "sun", "is", "hot", "a", "big", "star", "in", "sky"])


@pytest.fixture
def usage_tracker():
    return UsageTracker()


@pytest.fixture
def sink():
    return InMemorySink()


@pytest.fixture
def stub_llm():
    """Factory: stub_llm([response, ...]) -> StubLLMClient."""
    return StubLLMClient


@pytest.fixture
def vocabulary_source():
    """Factory: vocabulary_source({(scope, language): [words]})."""
    return DictVocabularySource


@pytest.fixture
def make_sink():
    """Factory: make_sink(fail_on=[words]) -> InMemorySink."""
    return InMemorySink
