"""Evaluate learner-written sentences with vocabulary-safe feedback."""

import logging
from typing import Optional

from langseed.generators.base import BaseGenerator, CheckResult, RetryState
from langseed.prompts.retry_prompts import build_retry_feedback
from langseed.prompts.sentence_evaluation_prompts import build_evaluation_prompt
from langseed.validators.schema import Concept, SentenceEvaluationResponse
from langseed.validators.vocabulary_validator import CheckUnit, VocabularySet, find_violations

logger = logging.getLogger(__name__)


class SentenceEvaluator(BaseGenerator):
    """Judge whether a learner's sentence uses a concept word correctly."""

    def evaluate(
        self,
        concept: Concept,
        sentence: str,
        vocabulary: VocabularySet,
        user_id: Optional[str] = None,
    ) -> SentenceEvaluationResponse:
        """Evaluate `sentence` written with `concept.word`.

        Feedback must pass the word check. An improved sentence that does not
        pass is dropped (None) rather than triggering a retry.

        Raises:
            LLMError, EmptyResponseError, ResponseParseError, GenerationExhaustedError
        """
        language = concept.language.value
        allowed = vocabulary.with_words([concept.word])
        known_sample = vocabulary.sample(self.known_words_sample_size)

        def build_prompt(state: RetryState) -> str:
            return build_evaluation_prompt(
                concept.word,
                concept.meaning,
                sentence,
                language,
                known_sample,
                retry_feedback=build_retry_feedback(state.accumulated_illegal, language),
            )

        def check(evaluation: SentenceEvaluationResponse) -> CheckResult:
            illegal = find_violations(evaluation.feedback, allowed, CheckUnit.WORDS)
            if illegal:
                return CheckResult(None, illegal)
            if evaluation.improved and find_violations(evaluation.improved, allowed, CheckUnit.WORDS):
                evaluation = evaluation.model_copy(update={"improved": None})
            return CheckResult(evaluation, [])

        result = self.generate_with_retry(
            "evaluate_sentence", SentenceEvaluationResponse, build_prompt, check, user_id=user_id
        )
        return result.value
