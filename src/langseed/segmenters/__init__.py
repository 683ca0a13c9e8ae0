"""Language segmenters.

One implementation per supported language variant:
- chinese.py: jieba dictionary segmentation
- japanese.py: character-type run-length segmentation
- space_delimited.py: whitespace/punctuation splitting (English, Swedish)
"""

from typing import List

from langseed.segmenters.base import BaseSegmenter
from langseed.segmenters.chinese import ChineseSegmenter
from langseed.segmenters.japanese import JapaneseSegmenter
from langseed.segmenters.space_delimited import SpaceDelimitedSegmenter
from langseed.utils.language_utils import get_language_code
from langseed.validators.schema import Segment

_SEGMENTERS = {
    "zh": ChineseSegmenter(),
    "ja": JapaneseSegmenter(),
    "sv": SpaceDelimitedSegmenter("sv"),
    "en": SpaceDelimitedSegmenter("en"),
}


def get_segmenter(language: str) -> BaseSegmenter:
    """Return the segmenter for a language code or name.

    Raises:
        UnsupportedLanguageError: If the language is not supported
    """
    return _SEGMENTERS[get_language_code(language)]


def segment(text: str, language: str) -> List[Segment]:
    """Segment text with the segmenter for `language`."""
    return get_segmenter(language).segment(text)


__all__ = [
    "BaseSegmenter",
    "ChineseSegmenter",
    "JapaneseSegmenter",
    "SpaceDelimitedSegmenter",
    "get_segmenter",
    "segment",
]
