"""Batch import of new words into a learner's vocabulary.

Each word is analyzed in parallel on a bounded thread pool. When analysis
fails the word is still saved as a placeholder concept so the learner keeps
it; only persistence failures make a word count as failed.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from langseed import constants
from langseed.errors import LangseedError
from langseed.generators.word_analyzer import WordAnalyzer
from langseed.interfaces import PersistenceSink, VocabularySource
from langseed.utils.language_utils import get_language_code
from langseed.utils.logging_config import pipeline_stage_logger
from langseed.utils.string_utils import ensure_valid_utf8, extract_sentence
from langseed.validators.schema import Concept, PartOfSpeech
from langseed.validators.vocabulary_validator import VocabularySet

logger = logging.getLogger(__name__)

FALLBACK_MEANING = "?"
FALLBACK_EXPLANATION = "❓"


class ImportReport(BaseModel):
    """Words saved and words that could not be saved, in input order."""

    added: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)


def build_fallback_concept(word: str, language: str, sentence: Optional[str]) -> Concept:
    """Placeholder concept stored when analysis fails."""
    return Concept(
        word=word,
        language=language,
        meaning=FALLBACK_MEANING,
        part_of_speech=PartOfSpeech.OTHER,
        explanations=[FALLBACK_EXPLANATION],
        explanation_quality=1,
        desired_words=[],
        pinyin=FALLBACK_MEANING if language == "zh" else None,
        example_sentence=sentence or None,
    )


class WordImporter:
    """Analyze and save a batch of words.

    Example:
        >>> importer = WordImporter(WordAnalyzer(LLMClient()), sink)
        >>> report = importer.import_words("user-1", ["累", "休息"], "我很累。我要休息！", "zh", vocab)
        >>> report.added
        ['累', '休息']
    """

    def __init__(
        self,
        analyzer: WordAnalyzer,
        sink: PersistenceSink,
        vocabulary_source: Optional[VocabularySource] = None,
        max_workers: Optional[int] = None,
    ):
        """Initialize importer.

        Args:
            analyzer: Word analyzer used for every word
            sink: Receives each created concept
            vocabulary_source: Loads known words when no snapshot is passed in
            max_workers: Concurrent analyses (default: IMPORT_MAX_CONCURRENCY)
        """
        self.analyzer = analyzer
        self.sink = sink
        self.vocabulary_source = vocabulary_source
        self.max_workers = max_workers or constants.IMPORT_MAX_CONCURRENCY

    def load_vocabulary(self, scope: str, language: str) -> VocabularySet:
        """Snapshot the scope's known words from the vocabulary source."""
        if self.vocabulary_source is None:
            raise ValueError("No vocabulary source configured; pass a VocabularySet instead")
        return VocabularySet(language, self.vocabulary_source.known_words(scope, language))

    def import_words(
        self,
        scope: str,
        words: Sequence[str],
        context: Optional[str],
        language: str,
        vocabulary: Optional[VocabularySet] = None,
        user_id: Optional[str] = None,
    ) -> ImportReport:
        """Import `words` found in `context`.

        Args:
            scope: Learner scope forwarded to the sink and vocabulary source
            words: Words to import
            context: Text the words were selected from
            language: ISO 639-1 language code
            vocabulary: Known-vocabulary snapshot shared by all analyses
                (default: loaded from the vocabulary source)
            user_id: Optional learner id forwarded to analytics

        Returns:
            ImportReport with added and failed words
        """
        language = get_language_code(language)
        if vocabulary is None:
            vocabulary = self.load_vocabulary(scope, language)
        safe_context = ensure_valid_utf8(context)
        words = [ensure_valid_utf8(word).strip() for word in words]

        outcomes: Dict[int, bool] = {}
        with pipeline_stage_logger("word_import", language=language, word_count=len(words)) as stage_logger:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                future_to_index = {
                    executor.submit(
                        self._import_single_word, scope, word, safe_context, language, vocabulary, user_id
                    ): i
                    for i, word in enumerate(words)
                }

                for future in as_completed(future_to_index):
                    i = future_to_index[future]
                    try:
                        future.result()
                        outcomes[i] = True
                    except Exception as e:
                        stage_logger.error(f"Failed to import {words[i]!r}: {e}", exc_info=True)
                        outcomes[i] = False

            report = ImportReport(
                added=[word for i, word in enumerate(words) if outcomes.get(i)],
                failed=[word for i, word in enumerate(words) if not outcomes.get(i)],
            )
            stage_logger.info(
                f"Imported {len(report.added)}/{len(words)} words",
                extra={"added": len(report.added), "failed": len(report.failed)},
            )
        return report

    def _import_single_word(
        self,
        scope: str,
        word: str,
        context: str,
        language: str,
        vocabulary: VocabularySet,
        user_id: Optional[str],
    ) -> Concept:
        sentence = ensure_valid_utf8(extract_sentence(context, word, language))

        try:
            concept = self.analyzer.analyze(
                word, language, vocabulary, context_sentence=sentence, user_id=user_id
            )
        except LangseedError as e:
            logger.warning(
                f"Analysis failed for {word!r}, saving placeholder: {e}",
                extra={"word": word, "language": language},
            )
            concept = build_fallback_concept(word, language, sentence)

        self.sink.save_concept(scope, concept)
        return concept
