"""Unit tests for pinyin, Japanese reading and kana helpers."""

import pytest

from langseed.utils.kana import is_kana, to_hiragana, validate_reading
from langseed.utils.romanization import get_chinese_pinyin, get_japanese_reading


class TestChinesePinyin:
    """Tests for Chinese pinyin generation."""

    def test_basic_words(self):
        """Test pinyin generation for common words."""
        assert get_chinese_pinyin("银行") == "yínháng"
        assert get_chinese_pinyin("学校") == "xuéxiào"

    def test_single_characters(self):
        """Test pinyin generation for single characters."""
        assert get_chinese_pinyin("爱") == "ài"
        assert get_chinese_pinyin("累") in ("lèi", "lěi", "léi")

    def test_phrase_spaced(self):
        """Test longer phrases are space separated."""
        assert get_chinese_pinyin("我们学习") == "wǒ men xué xí"

    def test_without_tone_marks(self):
        """Test plain pinyin."""
        assert get_chinese_pinyin("学校", tone_marks=False) == "xuexiao"


class TestJapaneseReading:
    """Tests for pykakasi readings."""

    def test_kanji_word(self):
        """Test a kanji word is read in hiragana."""
        assert get_japanese_reading("学校") == "がっこう"

    def test_result_is_kana(self):
        """Test the reading of mixed text is kana only."""
        assert is_kana(get_japanese_reading("食べる"))


class TestKana:
    """Tests for kana conversion and validation."""

    def test_to_hiragana(self):
        """Test katakana to hiragana conversion keeps the long vowel mark."""
        assert to_hiragana("カタカナ") == "かたかな"
        assert to_hiragana("コーヒー") == "こーひー"

    def test_none_passthrough(self):
        """Test None is passed through."""
        assert to_hiragana(None) is None

    def test_is_kana(self):
        """Test kana detection."""
        assert is_kana("ひらがな")
        assert is_kana("カタカナ")
        assert is_kana("ひらがなとカタカナ")
        assert not is_kana("漢字")
        assert not is_kana("kana")
        assert not is_kana("")
        assert not is_kana(None)

    @pytest.mark.parametrize(
        "reading,expected",
        [
            ("ひらがな", None),
            ("カタカナ", None),
            ("漢字", "Reading must be in hiragana or katakana"),
            ("", "Reading cannot be empty"),
            (None, "Reading cannot be empty"),
        ],
    )
    def test_validate_reading(self, reading, expected):
        """Test reading validation messages."""
        assert validate_reading(reading) == expected
