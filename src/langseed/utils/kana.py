"""Hiragana/katakana helpers for Japanese readings."""

import re
from typing import Optional

# Katakana sits a fixed 0x60 above the matching hiragana
_KANA_OFFSET = 0x60
_KATAKANA_START, _KATAKANA_END = 0x30A1, 0x30F6

_KANA_ONLY = re.compile(r"^[ぁ-ゟ゠-ヿ\s　ー]+$")


def to_hiragana(text: Optional[str]) -> Optional[str]:
    """Convert katakana to hiragana, leaving other characters untouched.

    Example:
        >>> to_hiragana("コンニチハ")
        'こんにちは'
    """
    if text is None:
        return None
    return "".join(
        chr(ord(char) - _KANA_OFFSET) if _KATAKANA_START <= ord(char) <= _KATAKANA_END else char
        for char in text
    )


def is_kana(text: Optional[str]) -> bool:
    """True if `text` is made only of hiragana, katakana, the long vowel mark and spaces."""
    return bool(text) and bool(_KANA_ONLY.match(text))


def validate_reading(text: Optional[str]) -> Optional[str]:
    """Return an error message for an invalid reading, or None when it is valid."""
    if not text:
        return "Reading cannot be empty"
    if not is_kana(text):
        return "Reading must be in hiragana or katakana"
    return None
