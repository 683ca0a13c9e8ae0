"""Word analysis: meaning, part of speech and vocabulary-safe explanations.

Explanations may only use words from the learner's vocabulary (plus the
analyzed word itself and emoji). Explanations that fail the word check are
dropped; the analysis is accepted as long as at least one survives.
"""

import logging
from typing import List, Optional

from langseed.constants import REGENERATE_MAX_EXPLANATIONS, THINKING_PLACEHOLDER
from langseed.errors import LangseedError
from langseed.generators.base import BaseGenerator, CheckResult, RetryState
from langseed.prompts.retry_prompts import build_retry_feedback
from langseed.prompts.word_analysis_prompts import build_analyze_prompt, build_regenerate_prompt
from langseed.utils.kana import to_hiragana, validate_reading
from langseed.utils.language_utils import get_language_code
from langseed.utils.romanization import get_chinese_pinyin, get_japanese_reading
from langseed.utils.string_utils import ensure_valid_utf8
from langseed.validators.schema import Concept, ExplanationsResponse, WordAnalysisResponse
from langseed.validators.vocabulary_validator import CheckUnit, VocabularySet, find_violations

logger = logging.getLogger(__name__)


class WordAnalyzer(BaseGenerator):
    """Analyze new words and (re)generate their explanations.

    Example:
        >>> analyzer = WordAnalyzer(LLMClient())
        >>> vocab = VocabularySet("zh", ["我", "你", "好"])
        >>> concept = analyzer.analyze("吗", "zh", vocab, context_sentence="你好吗？")
        >>> concept.explanations
        ['你 好 ____ ？ 🤔']
    """

    def analyze(
        self,
        word: str,
        language: str,
        vocabulary: VocabularySet,
        context_sentence: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Concept:
        """Analyze `word` and return a Concept with clean explanations.

        Args:
            word: Word to analyze
            language: ISO 639-1 language code
            vocabulary: Learner's known vocabulary snapshot
            context_sentence: Sentence the word appeared in, if any
            user_id: Optional learner id forwarded to analytics

        Returns:
            Concept with at least one explanation that passes the word check

        Raises:
            LLMError, EmptyResponseError, ResponseParseError, GenerationExhaustedError
        """
        language = get_language_code(language)
        word = ensure_valid_utf8(word).strip()
        if not word:
            raise ValueError("word must not be empty")
        allowed = vocabulary.with_words([word])
        known_sample = vocabulary.sample(self.known_words_sample_size)

        def build_prompt(state: RetryState) -> str:
            return build_analyze_prompt(
                word,
                language,
                known_sample,
                context_sentence=context_sentence,
                retry_feedback=build_retry_feedback(state.accumulated_illegal, language),
            )

        def check(analysis: WordAnalysisResponse) -> CheckResult:
            clean: List[str] = []
            illegal: List[str] = []
            for explanation in analysis.explanations:
                violations = find_violations(explanation, allowed, CheckUnit.WORDS)
                if violations:
                    illegal.extend(violations)
                else:
                    clean.append(explanation)

            if not clean:
                return CheckResult(None, list(dict.fromkeys(illegal)))
            if len(clean) < len(analysis.explanations):
                logger.info(
                    f"Dropped {len(analysis.explanations) - len(clean)} explanations for {word}",
                    extra={"word": word, "language": language},
                )
                return CheckResult(
                    analysis.model_copy(update={"explanations": clean}), [], partial=True
                )
            return CheckResult(analysis, [])

        result = self.generate_with_retry(
            "analyze_word", WordAnalysisResponse, build_prompt, check, user_id=user_id
        )
        return self._to_concept(word, language, result.value, context_sentence)

    def regenerate_explanations(
        self,
        concept: Concept,
        vocabulary: VocabularySet,
        user_id: Optional[str] = None,
    ) -> List[str]:
        """Ask for fresh explanations of an existing concept.

        Single attempt: candidates failing the word check are discarded and at
        most three are kept. Never raises for generator or parse failures;
        the thinking placeholder is returned instead.
        """
        language = concept.language.value
        allowed = vocabulary.with_words([concept.word])
        prompt = build_regenerate_prompt(
            concept.word,
            concept.meaning,
            language,
            vocabulary.sample(self.known_words_sample_size),
            concept.explanations,
        )
        placeholder = [f"{THINKING_PLACEHOLDER} {concept.word}"]

        try:
            raw = self.call_llm(prompt, "regenerate_explanation", user_id)
            response = self.parse_response(raw, ExplanationsResponse)
        except LangseedError as e:
            logger.warning(
                f"Explanation regeneration failed for {concept.word}: {e}",
                extra={"word": concept.word, "language": language},
            )
            return placeholder

        explanations = [
            explanation
            for explanation in response.explanations
            if not find_violations(explanation, allowed, CheckUnit.WORDS)
        ][:REGENERATE_MAX_EXPLANATIONS]

        if not explanations:
            logger.info(f"No clean regenerated explanations for {concept.word}")
            return placeholder
        return explanations

    def _to_concept(
        self,
        word: str,
        language: str,
        analysis: WordAnalysisResponse,
        context_sentence: Optional[str],
    ) -> Concept:
        pinyin = None
        reading = None
        if language == "zh":
            pinyin = analysis.pinyin or get_chinese_pinyin(word)
        elif language == "ja":
            reading = analysis.reading
            reading_error = validate_reading(reading)
            if reading_error:
                logger.info(f"{reading_error} for {word}, using dictionary reading")
                reading = get_japanese_reading(word)
            reading = to_hiragana(reading)

        return Concept(
            word=word,
            language=language,
            meaning=analysis.meaning,
            part_of_speech=analysis.part_of_speech,
            explanations=analysis.explanations,
            explanation_quality=analysis.explanation_quality,
            desired_words=analysis.desired_words,
            pinyin=pinyin,
            reading=reading,
            example_sentence=context_sentence or None,
        )
