"""Japanese segmentation by character-type runs.

Consecutive characters of the same type (kanji, hiragana, katakana,
punctuation, space, other) form one segment and any change of type starts a
new one. 私は学生です becomes 私 / は / 学生 / です.

Run boundaries split okurigana from their stems (食べる -> 食 / べる), so
vocabulary matching re-joins adjacent word runs and matches them greedily
against the known words before reporting leftovers.
"""

import logging
from itertools import groupby
from typing import List, Sequence, Set

from langseed.segmenters.base import BaseSegmenter, in_ranges, is_punctuation_char
from langseed.segmenters.chinese import HANZI_RANGES
from langseed.validators.schema import Segment, SegmentKind

logger = logging.getLogger(__name__)

HIRAGANA_RANGES = ((0x3040, 0x309F),)
KATAKANA_RANGES = (
    (0x30A0, 0x30FF),
    (0x31F0, 0x31FF),  # Katakana Phonetic Extensions
    (0xFF65, 0xFF9F),  # Halfwidth Katakana
)
# 々 repeats the previous kanji
ITERATION_MARK = "々"

_WORD_CLASSES = {"kanji", "hiragana", "katakana", "other"}


def is_kanji(char: str) -> bool:
    return in_ranges(char, HANZI_RANGES)


def is_hiragana(char: str) -> bool:
    return in_ranges(char, HIRAGANA_RANGES)


def is_katakana(char: str) -> bool:
    return in_ranges(char, KATAKANA_RANGES)


def char_class(char: str) -> str:
    """Return the run class of a single character."""
    if is_kanji(char) or char == ITERATION_MARK:
        return "kanji"
    if is_hiragana(char):
        return "hiragana"
    if is_katakana(char):
        return "katakana"
    if char.isspace():
        return "space"
    if is_punctuation_char(char):
        return "punct"
    return "other"


class JapaneseSegmenter(BaseSegmenter):
    """Segmenter for Japanese using character-type run lengths."""

    language = "ja"
    character_based = True
    foreign_script_marker = "[外国語]"

    def segment_line(self, line: str) -> List[Segment]:
        segments = []
        for run_class, chars in groupby(line, key=char_class):
            text = "".join(chars)
            if run_class == "space":
                segments.append(Segment(kind=SegmentKind.SPACE, text=text))
            elif run_class == "punct":
                segments.append(Segment(kind=SegmentKind.PUNCT, text=text))
            else:
                segments.append(Segment(kind=SegmentKind.WORD, text=text))
        return segments

    def is_word_char(self, char: str) -> bool:
        return is_kanji(char) or is_hiragana(char) or is_katakana(char)

    def is_checked_char(self, char: str) -> bool:
        # Kana is phonetic and always readable; only kanji can be unknown
        return is_kanji(char)

    def match_known(self, pieces: Sequence[str], known_words: Set[str]) -> List[str]:
        """Greedy longest match per character across the joined run.

        Run boundaries fall inside words (食べる), so the run is matched one
        character at a time. Unmatched stretches are returned as their
        character-type runs.
        """
        units: List[str] = []
        pending = ""
        for unit in super().match_known(list("".join(pieces)), known_words):
            if unit in known_words:
                units.extend(self._word_runs(pending))
                pending = ""
                units.append(unit)
            else:
                pending += unit
        units.extend(self._word_runs(pending))
        return units

    def _word_runs(self, text: str) -> List[str]:
        return [segment.text for segment in self.segment_line(text) if segment.is_word]
