"""Chinese segmentation using jieba's dictionary-based word cutting."""

import logging
from typing import List

import jieba

from langseed.segmenters.base import BaseSegmenter, in_ranges
from langseed.validators.schema import Segment

logger = logging.getLogger(__name__)

# CJK Unified Ideographs and Extension A
HANZI_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3400, 0x4DBF),
)


def is_hanzi(char: str) -> bool:
    return in_ranges(char, HANZI_RANGES)


class ChineseSegmenter(BaseSegmenter):
    """Segmenter for Mandarin Chinese.

    jieba yields every character of its input (whitespace included), so the
    segment texts always join back into the original line.
    """

    language = "zh"
    character_based = True
    foreign_script_marker = "[英文]"

    def segment_line(self, line: str) -> List[Segment]:
        return [self.classify_token(token) for token in jieba.cut(line) if token]

    def is_word_char(self, char: str) -> bool:
        return is_hanzi(char)
