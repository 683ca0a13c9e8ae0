"""Unit tests for vocabulary snapshots and constraint checks."""

import pytest

from langseed.errors import UnsupportedLanguageError
from langseed.validators.vocabulary_validator import (
    CheckUnit,
    VocabularySet,
    find_unknown_chars,
    find_unknown_words,
    find_violations,
    question_check_unit,
)


class TestVocabularySet:
    """Tests for the immutable known-vocabulary snapshot."""

    def test_chars_derived_from_words(self):
        """Test known characters include every hanzi of every word."""
        vocab = VocabularySet("zh", ["我", "你好", "吗？"])
        assert vocab.chars == frozenset({"我", "你", "好", "吗"})

    def test_space_delimited_words_normalized(self):
        """Test English words are stored lowercased and stripped."""
        vocab = VocabularySet("en", [" Sun ", "HOT", ""])
        assert vocab.words == frozenset({"sun", "hot"})
        assert "SUN" in vocab
        assert len(vocab) == 2

    def test_with_words_returns_new_set(self):
        """Test allow-list additions do not mutate the original snapshot."""
        vocab = VocabularySet("zh", ["我"])
        extended = vocab.with_words(["累"])
        assert "累" in extended
        assert "累" not in vocab
        assert extended.language == "zh"

    def test_sample_is_sorted_and_bounded(self):
        """Test deterministic bounded sampling."""
        vocab = VocabularySet("en", ["c", "a", "b", "d"])
        assert vocab.sample(3) == ["a", "b", "c"]
        assert vocab.sample(10) == ["a", "b", "c", "d"]

    def test_unsupported_language(self):
        """Test unknown language codes are rejected."""
        with pytest.raises(UnsupportedLanguageError):
            VocabularySet("xx", ["a"])


class TestFindUnknownWords:
    """Tests for the word-level check."""

    def test_all_known(self):
        """Test that known words produce no violations."""
        assert find_unknown_words("你 好 ！", {"你", "好"}, "zh") == []

    def test_unknown_words_in_first_seen_order(self):
        """Test deduplication preserves order of first offense."""
        result = find_unknown_words("累 你 饿 累", {"你"}, "zh")
        assert result == ["累", "饿"]

    def test_numbers_emoji_and_blank_ignored(self):
        """Test units without word characters never count as unknown."""
        assert find_unknown_words("你 ____ 3 🙂 ！", {"你"}, "zh") == []

    def test_english_leak_in_chinese(self):
        """Test Latin letters append the foreign-script marker."""
        result = find_unknown_words("你 好 OK", {"你", "好", "ok"}, "zh")
        assert result[-1] == "[英文]"
        assert result.count("[英文]") == 1

    def test_english_leak_when_everything_else_known(self):
        """Test the marker is reported even without other violations."""
        result = find_unknown_words("你 好 ok", {"你", "好"}, "zh")
        assert "[英文]" in result

    def test_japanese_foreign_marker(self):
        """Test romaji in Japanese uses the Japanese marker."""
        result = find_unknown_words("私 desu", {"私"}, "ja")
        assert "[外国語]" in result

    def test_case_insensitive_for_english(self):
        """Test English matching ignores case and has no foreign marker."""
        assert find_unknown_words("The Sun is HOT.", {"the", "sun", "is", "hot"}, "en") == []

    def test_unknown_english_word_reported_lowercase(self):
        """Test English violations are reported by their matching key."""
        assert find_unknown_words("The Moon", {"the"}, "en") == ["moon"]

    def test_swedish_words(self):
        """Test Swedish words with non-ASCII letters."""
        assert find_unknown_words("Jag mår bra", {"jag", "bra"}, "sv") == ["mår"]

    def test_japanese_known_word_not_split(self):
        """Test a known okurigana word is matched as a whole."""
        assert find_unknown_words("私は食べる", {"私", "は", "食べる"}, "ja") == []

    def test_japanese_unknown_run_reported(self):
        """Test unmatched runs are reported as run-length fragments."""
        assert find_unknown_words("私は学生です。", {"私", "学生", "です"}, "ja") == ["は"]

    @pytest.mark.parametrize("word", ["我们的", "吃饭了", "一个人", "很高兴"])
    def test_chinese_known_word_split_by_jieba(self, word):
        """Test a known word jieba cuts into pieces is still known."""
        assert find_unknown_words(word, {word}, "zh") == []

    def test_chinese_merged_word_next_to_unknown(self):
        """Test the merge does not hide neighbouring unknown words."""
        assert find_unknown_words("很高兴 累", {"很高兴"}, "zh") == ["累"]

    def test_chinese_pieces_not_merged_into_unknown_word(self):
        """Test joining stops at the longest known word."""
        assert find_unknown_words("我们的", {"我们"}, "zh") == ["的"]

    def test_accepts_vocabulary_set(self, zh_vocab):
        """Test a VocabularySet can be passed directly."""
        assert find_unknown_words("你 累", zh_vocab, "zh") == ["累"]


class TestFindUnknownChars:
    """Tests for the character-level check."""

    def test_recombined_known_chars_pass(self):
        """Test characters the learner knows may be freely combined."""
        assert find_unknown_chars("你好吗", {"你", "好", "吗"}, "zh") == []

    def test_unknown_char_reported(self):
        """Test an unknown character is reported individually."""
        assert find_unknown_chars("你累吗？", {"你", "吗"}, "zh") == ["累"]

    def test_english_marker_appended(self):
        """Test Latin letters add the marker after unknown chars."""
        assert find_unknown_chars("你累吗？OK", {"你", "吗"}, "zh") == ["累", "[英文]"]

    def test_japanese_checks_kanji_only(self):
        """Test kana never counts as an unknown character."""
        assert find_unknown_chars("わたしは学生です", {"学"}, "ja") == ["生"]

    def test_english_letters(self):
        """Test space-delimited languages check letters case-insensitively."""
        assert find_unknown_chars("Abz", {"a", "b"}, "en") == ["z"]


class TestFindViolations:
    """Tests for check dispatch."""

    def test_word_mode(self, zh_vocab):
        """Test word mode rejects unknown combinations of known characters."""
        assert find_violations("你好", zh_vocab, CheckUnit.WORDS) == ["你好"]

    def test_char_mode(self, zh_vocab):
        """Test character mode accepts the same text."""
        assert find_violations("你好", zh_vocab, CheckUnit.CHARS) == []

    def test_question_check_unit(self):
        """Test character-based languages check questions per character."""
        assert question_check_unit("zh") == CheckUnit.CHARS
        assert question_check_unit("ja") == CheckUnit.CHARS
        assert question_check_unit("sv") == CheckUnit.WORDS
        assert question_check_unit("en") == CheckUnit.WORDS
