"""Unit tests for the shared retry loop."""

import pytest
from pydantic import BaseModel

from langseed.errors import GenerationExhaustedError, LLMError, ResponseParseError
from langseed.generators.base import (
    BaseGenerator,
    CheckResult,
    GenerationOutcome,
    RetryState,
)
from langseed.validators.vocabulary_validator import VocabularySet, find_violations


class EchoResponse(BaseModel):
    text: str


class EchoGenerator(BaseGenerator):
    """Minimal generator checking one text field."""

    def run(self, vocabulary, user_id=None):
        def build_prompt(state):
            return f"attempt {state.attempt} avoid {','.join(state.accumulated_illegal)}"

        def check(response):
            illegal = find_violations(response.text, vocabulary)
            return CheckResult(None if illegal else response, illegal)

        return self.generate_with_retry("echo", EchoResponse, build_prompt, check, user_id=user_id)


class TestRetryState:
    """Tests for RetryState."""

    def test_ordered_union(self):
        """Test merging keeps first-seen order without duplicates."""
        state = RetryState().with_illegal(["b", "a"]).with_illegal(["a", "c", "b"])
        assert state.accumulated_illegal == ["b", "a", "c"]

    def test_next_attempt_is_copy(self):
        state = RetryState()
        assert state.next_attempt().attempt == 1
        assert state.attempt == 0


class TestGenerateWithRetry:
    """Tests for BaseGenerator.generate_with_retry()."""

    def test_invalid_budget(self, stub_llm):
        with pytest.raises(ValueError):
            EchoGenerator(stub_llm([]), max_retries=0)

    def test_accepts_after_retry(self, stub_llm, en_vocab, usage_tracker):
        """Test accumulated violations reach the next prompt and usage is logged per call."""
        llm = stub_llm([{"text": "the moon"}, {"text": "the sun"}])
        generator = EchoGenerator(llm, usage_tracker=usage_tracker)

        result = generator.run(en_vocab, user_id="u")

        assert result.value.text == "the sun"
        assert result.outcome == GenerationOutcome.ACCEPTED
        assert result.attempts == 2
        assert llm.prompts[1] == "attempt 2 avoid moon"
        assert usage_tracker.get_user_usage("u").query_count == 2

    def test_exhaustion_reports_union(self, stub_llm, en_vocab):
        """Test the error carries every violation seen across attempts."""
        llm = stub_llm([{"text": "the moon"}, {"text": "cold moon"}, {"text": "dark"}])

        with pytest.raises(GenerationExhaustedError) as exc_info:
            EchoGenerator(llm).run(en_vocab)

        assert exc_info.value.illegal == ["moon", "cold", "dark"]
        assert exc_info.value.attempts == 3

    def test_parse_error_consumes_budget(self, stub_llm, en_vocab):
        """Test a malformed reply counts as an attempt."""
        llm = stub_llm(["not json", {"text": "the moon"}, {"text": "sun"}])
        generator = EchoGenerator(llm, max_retries=2)

        with pytest.raises(GenerationExhaustedError) as exc_info:
            generator.run(en_vocab)

        assert exc_info.value.illegal == ["moon"]
        assert llm.call_count == 2

    def test_all_parse_errors_reraised(self, stub_llm, en_vocab):
        """Test only malformed replies surface the parse error."""
        llm = stub_llm(["nope", {"wrong": "shape"}])

        with pytest.raises(ResponseParseError):
            EchoGenerator(llm, max_retries=2).run(en_vocab)

    def test_llm_error_not_retried(self, stub_llm, en_vocab):
        llm = stub_llm([LLMError("down"), {"text": "the sun"}])

        with pytest.raises(LLMError):
            EchoGenerator(llm).run(en_vocab)

        assert llm.call_count == 1

    def test_vocabulary_case_insensitive(self, stub_llm):
        """Test English checks ignore case."""
        llm = stub_llm([{"text": "The Sun!"}])
        result = EchoGenerator(llm).run(VocabularySet("en", ["the", "sun"]))
        assert result.attempts == 1
