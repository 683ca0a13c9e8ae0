"""Vocabulary validation utilities for content generation.

This module provides language-specific validation to ensure generated
content only uses words (or characters) the learner already knows:
- VocabularySet: immutable snapshot of a learner's known words and characters
- find_unknown_words: word-level check using the language's segmenter
- find_unknown_chars: character-level check for uncombined unfamiliar characters

Latin letters in a non-Latin target language are always a violation and are
reported with the language's foreign-script marker.
"""

import logging
import re
from enum import Enum
from typing import Iterable, List

from langseed.segmenters import BaseSegmenter, get_segmenter

logger = logging.getLogger(__name__)

_LATIN_LETTER = re.compile(r"[a-zA-Z]")


class CheckUnit(str, Enum):
    """Granularity of a vocabulary check."""

    WORDS = "words"
    CHARS = "chars"


class VocabularySet:
    """Known vocabulary of one learner in one language.

    Built once per generation request and never mutated; allow-list
    additions produce a new set so concurrent requests can share a snapshot.

    Example:
        >>> vocab = VocabularySet("zh", ["我", "你好"])
        >>> sorted(vocab.chars)
        ['你', '好', '我']
    """

    def __init__(self, language: str, words: Iterable[str]):
        self.segmenter: BaseSegmenter = get_segmenter(language)
        self.language = self.segmenter.language
        self.words = frozenset(
            self.segmenter.normalize(word.strip()) for word in words if word and word.strip()
        )
        self.chars = frozenset(self.segmenter.extract_chars(self.words))

    def __contains__(self, word: str) -> bool:
        return self.segmenter.normalize(word) in self.words

    def __len__(self) -> int:
        return len(self.words)

    def __repr__(self) -> str:
        return f"VocabularySet(language={self.language!r}, words={len(self.words)})"

    def with_words(self, extra_words: Iterable[str]) -> "VocabularySet":
        """Return a new set that also allows `extra_words`."""
        return VocabularySet(self.language, [*self.words, *extra_words])

    def sample(self, limit: int) -> List[str]:
        """Deterministic bounded sample of known words for prompts."""
        return sorted(self.words)[:limit]


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _has_word_char(unit: str, segmenter: BaseSegmenter) -> bool:
    return any(segmenter.is_word_char(char) for char in unit)


def _with_foreign_marker(text: str, segmenter: BaseSegmenter, violations: List[str]) -> List[str]:
    marker = segmenter.foreign_script_marker
    if marker and _LATIN_LETTER.search(text) and marker not in violations:
        return violations + [marker]
    return violations


def find_unknown_words(text: str, known_words: Iterable[str], language: str) -> List[str]:
    """Find words in text that are not in the known words.

    Units without any word character (numbers, emoji, the blank marker) are
    ignored. Matching is case-insensitive for space-delimited languages.

    Args:
        text: Text to check
        known_words: Known words (a VocabularySet or any iterable of words)
        language: ISO 639-1 language code

    Returns:
        Unknown words in order of first appearance, followed by the
        foreign-script marker if Latin letters leaked into the text

    Example:
        >>> find_unknown_words("你 累 吗", {"你", "吗"}, "zh")
        ['累']
    """
    segmenter = get_segmenter(language)
    if isinstance(known_words, VocabularySet):
        known = known_words.words
    else:
        known = frozenset(segmenter.normalize(word) for word in known_words)

    unknown = _unique(
        unit
        for unit in segmenter.vocabulary_units(text, known)
        if unit not in known and _has_word_char(unit, segmenter)
    )
    return _with_foreign_marker(text, segmenter, unknown)


def find_unknown_chars(text: str, known_chars: Iterable[str], language: str) -> List[str]:
    """Find characters in text that are not in the known characters.

    Only characters subject to the character check count: hanzi for Chinese,
    kanji for Japanese, letters and numbers for space-delimited languages.

    Example:
        >>> find_unknown_chars("你累吗？OK", {"你", "吗"}, "zh")
        ['累', '[英文]']
    """
    segmenter = get_segmenter(language)
    if isinstance(known_chars, VocabularySet):
        known = known_chars.chars
    elif segmenter.character_based:
        known = frozenset(known_chars)
    else:
        known = frozenset(char.lower() for char in known_chars)

    if segmenter.character_based:
        candidates = (char for char in text if segmenter.is_checked_char(char))
    else:
        candidates = (char.lower() for char in text if segmenter.is_checked_char(char))

    unknown = _unique(char for char in candidates if char not in known)
    return _with_foreign_marker(text, segmenter, unknown)


def find_violations(
    text: str,
    vocabulary: VocabularySet,
    unit: CheckUnit = CheckUnit.WORDS,
) -> List[str]:
    """Run the word or character check of `vocabulary`'s language on `text`."""
    if unit == CheckUnit.CHARS:
        violations = find_unknown_chars(text, vocabulary, vocabulary.language)
    else:
        violations = find_unknown_words(text, vocabulary, vocabulary.language)

    if violations:
        logger.debug(
            f"Found {len(violations)} vocabulary violations: {violations}",
            extra={"language": vocabulary.language, "unit": unit.value},
        )
    return violations


def question_check_unit(language: str) -> CheckUnit:
    """Character-based languages check questions per character, others per word."""
    return CheckUnit.CHARS if get_segmenter(language).character_based else CheckUnit.WORDS

