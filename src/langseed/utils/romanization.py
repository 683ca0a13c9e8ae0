"""Pronunciation helpers for Chinese and Japanese.

Provides readings from Python libraries instead of trusting the LLM:
- Chinese: pypinyin (pinyin with tone marks)
- Japanese: pykakasi (hiragana reading)
"""

import logging

from pykakasi import kakasi
from pypinyin import Style, lazy_pinyin

logger = logging.getLogger(__name__)


def get_chinese_pinyin(text: str, tone_marks: bool = True) -> str:
    """Get pinyin for Chinese text.

    Args:
        text: Chinese text (simplified or traditional)
        tone_marks: Include tone marks (default: True)

    Returns:
        Pinyin with tone marks (e.g., "yínháng" for 银行)

    Example:
        >>> get_chinese_pinyin("银行")
        'yínháng'
        >>> get_chinese_pinyin("我们学习")
        'wǒ men xué xí'
    """
    style = Style.TONE if tone_marks else Style.NORMAL

    pinyin_list = lazy_pinyin(text, style=style, errors="ignore")

    # Single word - join without spaces; phrase - join with spaces
    if len(text) <= 2:
        return "".join(pinyin_list)
    return " ".join(pinyin_list)


def get_japanese_reading(text: str) -> str:
    """Get the hiragana reading of Japanese text.

    Uses pykakasi to convert any mix of kanji, hiragana and katakana.

    Example:
        >>> get_japanese_reading("学校")
        'がっこう'
    """
    kks = kakasi()
    result = kks.convert(text)
    reading = "".join(item["hira"] for item in result)
    logger.debug(f"Japanese reading for {text}: {reading}")
    return reading
