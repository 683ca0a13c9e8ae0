"""Base segmenter abstract class shared by all language implementations.

Provides common functionality:
- Newline isolation before language-specific segmentation
- Token classification into word / punctuation / space
- Character extraction from a word set
- Vocabulary unit extraction used by the constraint validator
"""

import logging
import re
import unicodedata
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Set

from langseed.validators.schema import Segment, SegmentKind

logger = logging.getLogger(__name__)

_NEWLINE_SPLIT = re.compile(r"(\n)")

# Marks and format characters (variation selectors, keycaps, ZWJ) ride along
# with emoji and punctuation rather than forming words of their own
_PUNCT_CATEGORY_PREFIXES = ("P", "S", "M")
_PUNCT_CATEGORIES = {"Cf"}


def is_punctuation_char(char: str) -> bool:
    """Return True for punctuation, symbols (including emoji) and joining marks."""
    category = unicodedata.category(char)
    return category.startswith(_PUNCT_CATEGORY_PREFIXES) or category in _PUNCT_CATEGORIES


def is_punctuation(token: str) -> bool:
    """Return True if every character of a non-empty token is punctuation-class."""
    return bool(token) and all(is_punctuation_char(char) for char in token)


def in_ranges(char: str, ranges: Iterable[tuple]) -> bool:
    """Return True if `char` is a single code point inside one of `ranges`."""
    if len(char) != 1:
        return False
    codepoint = ord(char)
    return any(start <= codepoint <= end for start, end in ranges)


class BaseSegmenter(ABC):
    """Abstract base class for language segmenters.

    Subclasses must implement:
    - segment_line(): Segment text that contains no newline
    - is_word_char(): Language-specific word-character test

    Subclasses may override:
    - normalize(): Matching key for a word (identity by default)
    - is_checked_char(): Characters subject to the character-level check
    - vocabulary_units(): Units compared against known words
    """

    language: str = ""
    character_based: bool = False
    # Violation marker appended when Latin letters leak into the text
    foreign_script_marker: Optional[str] = None

    def segment(self, text: str) -> List[Segment]:
        """Segment text into words, punctuation, spaces, and newlines.

        Each "\\n" becomes its own newline segment and the text between
        newlines is segmented independently.

        Args:
            text: Text to segment

        Returns:
            Segments in source order; joining their texts reproduces `text`
        """
        segments: List[Segment] = []
        for part in _NEWLINE_SPLIT.split(text):
            if part == "\n":
                segments.append(Segment(kind=SegmentKind.NEWLINE, text="\n"))
            elif part:
                segments.extend(self.segment_line(part))
        return segments

    @abstractmethod
    def segment_line(self, line: str) -> List[Segment]:
        """Segment a newline-free piece of text."""

    @abstractmethod
    def is_word_char(self, char: str) -> bool:
        """Return True if the grapheme is a word character for this language."""

    def normalize(self, word: str) -> str:
        return word

    def is_checked_char(self, char: str) -> bool:
        return self.is_word_char(char)

    def classify_token(self, token: str) -> Segment:
        """Classify one token as space, punctuation, or word."""
        if token.strip() == "":
            return Segment(kind=SegmentKind.SPACE, text=token)
        if is_punctuation(token):
            return Segment(kind=SegmentKind.PUNCT, text=token)
        return Segment(kind=SegmentKind.WORD, text=token, key=self.normalize(token))

    def extract_chars(self, words: Iterable[str]) -> Set[str]:
        """Extract the word characters of every word in `words`.

        Example:
            >>> ChineseSegmenter().extract_chars({"你好", "吗？"})
            {'你', '好', '吗'}
        """
        return {char for word in words for char in word if self.is_word_char(char)}

    def vocabulary_units(self, text: str, known_words: Set[str]) -> List[str]:
        """Units of `text` to compare against the (normalized) known words.

        Runs of adjacent word segments are matched against the known words
        with `match_known`, so a known word the segmenter happens to split
        (jieba cuts 我们的 into 我们 / 的) is still a single known unit.
        """
        units: List[str] = []
        run: List[str] = []
        for segment in self.segment(text):
            if segment.is_word:
                run.append(segment.key)
                continue
            units.extend(self.match_known(run, known_words))
            run = []
        units.extend(self.match_known(run, known_words))
        return units

    def match_known(self, pieces: Sequence[str], known_words: Set[str]) -> List[str]:
        """Greedy longest match of adjacent pieces against the known words.

        Only whole pieces are joined, never split, so known characters are not
        combined into a word the learner does not know. Pieces that start no
        known word are returned unchanged.

        Example:
            >>> ChineseSegmenter().match_known(["我们", "的", "书"], {"我们的"})
            ['我们的', '书']
        """
        units: List[str] = []
        i = 0
        while i < len(pieces):
            for end in range(len(pieces), i + 1, -1):
                candidate = "".join(pieces[i:end])
                if candidate in known_words:
                    units.append(candidate)
                    i = end
                    break
            else:
                units.append(pieces[i])
                i += 1
        return units

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language={self.language!r})"
