"""Practice question generation (yes/no and fill-in-the-blank).

Chinese and Japanese questions are checked per character so a question may
freely recombine characters the learner can already read; Swedish and
English questions are checked per word. The concept word and the
fill-in-the-blank distractors are always allowed.
"""

import logging
from typing import Optional, Sequence

from langseed.constants import BLANK_MARKER
from langseed.generators.base import BaseGenerator, CheckResult, RetryState
from langseed.prompts.question_prompts import build_fill_blank_prompt, build_yes_no_prompt
from langseed.prompts.retry_prompts import build_retry_feedback
from langseed.validators.schema import (
    Concept,
    FillBlankQuestionResponse,
    Question,
    QuestionType,
    YesNoQuestionResponse,
)
from langseed.validators.vocabulary_validator import (
    CheckUnit,
    VocabularySet,
    find_violations,
    question_check_unit,
)

logger = logging.getLogger(__name__)


class QuestionGenerator(BaseGenerator):
    """Generate practice questions for a concept within known vocabulary."""

    def generate_yes_no(
        self,
        concept: Concept,
        vocabulary: VocabularySet,
        user_id: Optional[str] = None,
    ) -> Question:
        """Generate a yes/no question testing the meaning of `concept.word`.

        The question text must pass the check; an explanation that does not
        pass is replaced by an empty string.

        Raises:
            LLMError, EmptyResponseError, ResponseParseError, GenerationExhaustedError
        """
        language = concept.language.value
        unit = question_check_unit(language)
        allowed = vocabulary.with_words([concept.word])
        known_units = self._known_units(vocabulary, unit)

        def build_prompt(state: RetryState) -> str:
            return build_yes_no_prompt(
                concept.word,
                concept.meaning,
                language,
                known_units,
                character_based=unit == CheckUnit.CHARS,
                retry_feedback=build_retry_feedback(state.accumulated_illegal, language, unit),
            )

        def check(response: YesNoQuestionResponse) -> CheckResult:
            illegal = find_violations(response.question, allowed, unit)
            if illegal:
                return CheckResult(None, illegal)
            if response.explanation and find_violations(response.explanation, allowed, unit):
                logger.info(f"Dropping explanation with unknown vocabulary for {concept.word}")
                response = response.model_copy(update={"explanation": ""})
            return CheckResult(response, [])

        result = self.generate_with_retry(
            "yes_no_question", YesNoQuestionResponse, build_prompt, check, user_id=user_id
        )
        question: YesNoQuestionResponse = result.value
        return Question(
            concept_word=concept.word,
            language=concept.language,
            question_type=QuestionType.YES_NO,
            question_text=question.question,
            answer=question.answer,
            explanation=question.explanation,
        )

    def generate_fill_blank(
        self,
        concept: Concept,
        vocabulary: VocabularySet,
        distractors: Sequence[str],
        user_id: Optional[str] = None,
    ) -> Question:
        """Generate a multiple-choice fill-in-the-blank question.

        The sentence (blank removed) and every option must pass the check.

        Args:
            concept: Concept whose word fills the blank
            vocabulary: Learner's known vocabulary snapshot
            distractors: Wrong answer words (at most 3 are offered)
            user_id: Optional learner id forwarded to analytics

        Raises:
            LLMError, EmptyResponseError, ResponseParseError, GenerationExhaustedError
        """
        language = concept.language.value
        unit = question_check_unit(language)
        distractors = [word for word in distractors if word and word != concept.word]
        allowed = vocabulary.with_words([concept.word, *distractors])
        known_units = self._known_units(vocabulary, unit)

        def build_prompt(state: RetryState) -> str:
            return build_fill_blank_prompt(
                concept.word,
                concept.meaning,
                language,
                known_units,
                character_based=unit == CheckUnit.CHARS,
                distractors=distractors,
                retry_feedback=build_retry_feedback(state.accumulated_illegal, language, unit),
            )

        def check(response: FillBlankQuestionResponse) -> CheckResult:
            sentence = response.sentence.replace(BLANK_MARKER, "")
            illegal = find_violations(sentence, allowed, unit)
            # Options are shown to the learner too
            for option in response.options:
                illegal.extend(find_violations(option, allowed, unit))
            illegal = list(dict.fromkeys(illegal))
            return CheckResult(None if illegal else response, illegal)

        result = self.generate_with_retry(
            "fill_blank_question", FillBlankQuestionResponse, build_prompt, check, user_id=user_id
        )
        question: FillBlankQuestionResponse = result.value
        return Question(
            concept_word=concept.word,
            language=concept.language,
            question_type=QuestionType.FILL_BLANK,
            question_text=question.sentence,
            options=question.options,
            correct_index=question.correct_index,
        )

    def _known_units(self, vocabulary: VocabularySet, unit: CheckUnit):
        if unit == CheckUnit.CHARS:
            return sorted(vocabulary.chars)[: self.known_words_sample_size]
        return vocabulary.sample(self.known_words_sample_size)
