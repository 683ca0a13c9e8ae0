"""Segmenter for space-delimited languages like English and Swedish."""

import re
import unicodedata
from typing import List

from langseed.segmenters.base import BaseSegmenter
from langseed.validators.schema import Segment

_TOKEN_SPLIT = re.compile(r"(\s+|[^\w\s]+)")


class SpaceDelimitedSegmenter(BaseSegmenter):
    """Words are separated by whitespace and punctuation; matching ignores case."""

    character_based = False

    def __init__(self, language: str):
        self.language = language

    def segment_line(self, line: str) -> List[Segment]:
        return [self.classify_token(token) for token in _TOKEN_SPLIT.split(line) if token]

    def is_word_char(self, char: str) -> bool:
        # Letters and numbers are word characters
        return len(char) == 1 and unicodedata.category(char)[0] in ("L", "N")

    def normalize(self, word: str) -> str:
        return word.lower()
