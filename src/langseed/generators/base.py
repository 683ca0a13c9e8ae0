"""Base generator with the vocabulary-constrained retry loop.

Every generator follows the same cycle:
1. Build a prompt (with retry feedback once violations have been seen)
2. Call the LLM client and log usage to the analytics sink
3. Extract JSON and parse it into a pydantic response model
4. Check learner-facing fields against the known vocabulary
5. Accept, or merge the violations into the accumulator and try again

LLMError and EmptyResponseError end the call immediately. A parse failure
ends only the current attempt but still consumes the budget.
"""

import logging
from abc import ABC
from enum import Enum
from typing import Callable, Generic, List, NamedTuple, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from langseed import constants
from langseed.errors import GenerationExhaustedError, ResponseParseError
from langseed.interfaces import AnalyticsSink, TextGenerator
from langseed.utils.response_parsing import parse_json_response

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class GenerationOutcome(str, Enum):
    """How an accepted result was reached."""

    ACCEPTED = "accepted"
    PARTIAL = "partial"  # Some items of a multi-item field were dropped


class RetryState(BaseModel):
    """Accumulator threaded through the retry loop."""

    attempt: int = 0
    accumulated_illegal: List[str] = Field(default_factory=list)

    def next_attempt(self) -> "RetryState":
        return self.model_copy(update={"attempt": self.attempt + 1})

    def with_illegal(self, illegal: List[str]) -> "RetryState":
        """Ordered union of the accumulated and new violations."""
        merged = list(dict.fromkeys([*self.accumulated_illegal, *illegal]))
        return self.model_copy(update={"accumulated_illegal": merged})


class GenerationAttempt(BaseModel):
    """Record of one attempt, kept for debug logging only."""

    attempt: int
    prompt: str
    raw_response: Optional[str] = None
    illegal: List[str] = Field(default_factory=list)
    parse_error: Optional[str] = None


class GenerationResult(BaseModel, Generic[T]):
    """Accepted generator output."""

    value: T
    outcome: GenerationOutcome = GenerationOutcome.ACCEPTED
    attempts: int = 1


class CheckResult(NamedTuple):
    """Vocabulary check of one parsed response.

    `value` is the (possibly trimmed) accepted response, or None when the
    response has to be regenerated because of `illegal`.
    """

    value: Optional[BaseModel]
    illegal: List[str]
    partial: bool = False


class BaseGenerator(ABC):
    """Shared plumbing for LLM-backed generators.

    Subclasses set `query_type` per call and provide a prompt builder and a
    vocabulary check to `generate_with_retry()`.
    """

    def __init__(
        self,
        llm_client: TextGenerator,
        usage_tracker: Optional[AnalyticsSink] = None,
        max_retries: Optional[int] = None,
        known_words_sample_size: Optional[int] = None,
    ):
        """Initialize generator.

        Args:
            llm_client: Text generator (LLMClient or compatible)
            usage_tracker: Optional analytics sink receiving one record per call
            max_retries: Attempt budget per call (default: GENERATION_MAX_RETRIES)
            known_words_sample_size: Known words shown in prompts (default: KNOWN_WORDS_SAMPLE_SIZE)
        """
        self.llm_client = llm_client
        self.usage_tracker = usage_tracker
        self.max_retries = (
            max_retries if max_retries is not None else constants.GENERATION_MAX_RETRIES
        )
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.known_words_sample_size = (
            known_words_sample_size
            if known_words_sample_size is not None
            else constants.KNOWN_WORDS_SAMPLE_SIZE
        )

        logger.info(f"{self.__class__.__name__} initialized: max_retries={self.max_retries}")

    def call_llm(self, prompt: str, query_type: str, user_id: Optional[str] = None) -> Optional[str]:
        """Generate raw text and log usage.

        Raises:
            LLMError: Propagated from the client
        """
        response = self.llm_client.generate(prompt)
        if self.usage_tracker is not None:
            self.usage_tracker.log_query(
                user_id=user_id,
                query_type=query_type,
                model=response.model,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
            )
        return response.text

    def parse_response(self, raw: Optional[str], response_model: Type[T]) -> T:
        """Decode raw text into `response_model`.

        Raises:
            EmptyResponseError: If the response is empty
            ResponseParseError: If the JSON is invalid or does not fit the model
        """
        data = parse_json_response(raw)
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(
                f"Invalid {response_model.__name__} format: {e.error_count()} validation errors",
                raw_response=raw,
            ) from e

    def generate_with_retry(
        self,
        query_type: str,
        response_model: Type[T],
        build_prompt: Callable[[RetryState], str],
        check: Callable[[T], CheckResult],
        user_id: Optional[str] = None,
    ) -> GenerationResult:
        """Run the draft / validate / retry loop.

        Args:
            query_type: Analytics label for this call (e.g. "analyze_word")
            response_model: Pydantic model the JSON must fit
            build_prompt: Builds the prompt for the current retry state
            check: Vocabulary check for a parsed response
            user_id: Optional learner id forwarded to analytics

        Returns:
            GenerationResult with the accepted value

        Raises:
            LLMError: Text generator failed (not retried here)
            EmptyResponseError: Text generator returned nothing
            ResponseParseError: Every attempt returned malformed output
            GenerationExhaustedError: Budget spent without clean output
        """
        state = RetryState()
        last_parse_error: Optional[ResponseParseError] = None
        parse_failures = 0

        while state.attempt < self.max_retries:
            state = state.next_attempt()
            prompt = build_prompt(state)
            raw = self.call_llm(prompt, query_type, user_id)

            try:
                parsed = self.parse_response(raw, response_model)
            except ResponseParseError as e:
                parse_failures += 1
                last_parse_error = e
                self._log_attempt(
                    GenerationAttempt(
                        attempt=state.attempt, prompt=prompt, raw_response=raw, parse_error=str(e)
                    ),
                    query_type,
                )
                logger.warning(
                    f"{query_type}: attempt {state.attempt}/{self.max_retries} returned malformed output: {e}",
                    extra={"query_type": query_type, "attempt": state.attempt},
                )
                continue

            result = check(parsed)
            self._log_attempt(
                GenerationAttempt(
                    attempt=state.attempt, prompt=prompt, raw_response=raw, illegal=result.illegal
                ),
                query_type,
            )

            if result.value is not None:
                outcome = GenerationOutcome.PARTIAL if result.partial else GenerationOutcome.ACCEPTED
                logger.info(
                    f"{query_type}: {outcome.value} on attempt {state.attempt}",
                    extra={"query_type": query_type, "attempt": state.attempt},
                )
                return GenerationResult(value=result.value, outcome=outcome, attempts=state.attempt)

            state = state.with_illegal(result.illegal)
            logger.info(
                f"{query_type}: attempt {state.attempt}/{self.max_retries} used unknown vocabulary: "
                f"{result.illegal}",
                extra={"query_type": query_type, "attempt": state.attempt},
            )

        if last_parse_error is not None and parse_failures == state.attempt:
            raise last_parse_error

        logger.warning(
            f"{query_type}: exhausted {state.attempt} attempts, "
            f"could not avoid: {state.accumulated_illegal}",
            extra={"query_type": query_type, "attempt": state.attempt},
        )
        raise GenerationExhaustedError(
            f"Failed after {state.attempt} attempts. "
            f"Could not avoid words: {', '.join(state.accumulated_illegal)}",
            illegal=state.accumulated_illegal,
            attempts=state.attempt,
        )

    def _log_attempt(self, attempt: GenerationAttempt, query_type: str) -> None:
        logger.debug(
            f"{query_type} attempt {attempt.attempt}: illegal={attempt.illegal}, "
            f"parse_error={attempt.parse_error}, raw={(attempt.raw_response or '')[:200]}"
        )
