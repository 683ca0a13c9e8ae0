"""Unit tests for the batch word importer."""

import threading

import pytest

from langseed.errors import GenerationExhaustedError, LLMError
from langseed.generators.word_analyzer import WordAnalyzer
from langseed.services.word_importer import ImportReport, WordImporter, build_fallback_concept
from langseed.validators.schema import PartOfSpeech
from langseed.validators.vocabulary_validator import VocabularySet


class ScriptedAnalyzer(WordAnalyzer):
    """Analyzer returning per-word scripted outcomes, safe across threads."""

    def __init__(self, outcomes):
        self.outcomes = outcomes
        self.calls = []
        self._lock = threading.Lock()

    def analyze(self, word, language, vocabulary, context_sentence=None, user_id=None):
        with self._lock:
            self.calls.append((word, context_sentence, vocabulary))
        outcome = self.outcomes[word]
        if isinstance(outcome, Exception):
            raise outcome
        return build_fallback_concept(word, language, context_sentence).model_copy(
            update={"meaning": outcome, "explanations": ["😴"], "explanation_quality": 4}
        )


class TestWordImporter:
    """Tests for WordImporter.import_words()."""

    def test_all_words_added(self, sink, zh_vocab):
        """Test analyzed words are saved with their context sentence."""
        analyzer = ScriptedAnalyzer({"累": "tired", "休息": "rest"})
        importer = WordImporter(analyzer, sink)

        report = importer.import_words("user-1", ["累", "休息"], "我很累。我要休息！", "zh", zh_vocab)

        assert report == ImportReport(added=["累", "休息"], failed=[])
        saved = {c.word: c for c in sink.concepts["user-1"]}
        assert saved["累"].meaning == "tired"
        assert saved["累"].example_sentence == "我很累"
        assert saved["休息"].example_sentence == "我要休息"

    def test_shared_snapshot(self, sink, zh_vocab):
        """Test every analysis receives the same vocabulary snapshot."""
        analyzer = ScriptedAnalyzer({"累": "tired", "饿": "hungry", "渴": "thirsty"})

        WordImporter(analyzer, sink, max_workers=2).import_words("s", ["累", "饿", "渴"], "", "zh", zh_vocab)

        assert {id(call[2]) for call in analyzer.calls} == {id(zh_vocab)}

    @pytest.mark.parametrize(
        "error", [GenerationExhaustedError("x", illegal=["他"], attempts=3), LLMError("down")]
    )
    def test_analysis_failure_saves_fallback(self, sink, zh_vocab, error):
        """Test failed analysis still adds a placeholder concept."""
        analyzer = ScriptedAnalyzer({"累": error, "饿": "hungry"})

        report = WordImporter(analyzer, sink).import_words("s", ["累", "饿"], "我累。我饿。", "zh", zh_vocab)

        assert report.added == ["累", "饿"]
        fallback = next(c for c in sink.concepts["s"] if c.word == "累")
        assert fallback.meaning == "?"
        assert fallback.explanations == ["❓"]
        assert fallback.explanation_quality == 1
        assert fallback.part_of_speech == PartOfSpeech.OTHER
        assert fallback.pinyin == "?"

    def test_persistence_failure_reported(self, make_sink, zh_vocab):
        """Test sink failures mark the word as failed without aborting the batch."""
        sink = make_sink(fail_on=["饿"])
        analyzer = ScriptedAnalyzer({"累": "tired", "饿": "hungry", "渴": "thirsty"})

        report = WordImporter(analyzer, sink).import_words("s", ["累", "饿", "渴"], None, "zh", zh_vocab)

        assert report.added == ["累", "渴"]
        assert report.failed == ["饿"]

    def test_vocabulary_loaded_from_source(self, sink, vocabulary_source):
        """Test the snapshot is built from the vocabulary source when not given."""
        source = vocabulary_source({("s", "en"): ["i", "am"]})
        analyzer = ScriptedAnalyzer({"tired": "tired"})

        report = WordImporter(analyzer, sink, vocabulary_source=source).import_words(
            "s", ["tired"], "I am tired. Go home!", "English"
        )

        assert report.added == ["tired"]
        _, sentence, vocabulary = analyzer.calls[0]
        assert sentence == "I am tired"
        assert vocabulary.words == frozenset({"i", "am"})
        assert sink.concepts["s"][0].pinyin is None

    def test_no_vocabulary_source(self, sink):
        """Test a missing snapshot without a source is a usage error."""
        importer = WordImporter(ScriptedAnalyzer({}), sink)
        with pytest.raises(ValueError):
            importer.import_words("s", ["累"], "", "zh")

    def test_with_real_analyzer(self, stub_llm, sink, usage_tracker):
        """Test end to end with the word analyzer and a scripted model."""
        llm = stub_llm(
            [
                {
                    "pinyin": "lèi",
                    "meaning": "tired",
                    "part_of_speech": "adjective",
                    "explanations": ["我 ____ 😴"],
                    "explanation_quality": 4,
                }
            ]
        )
        analyzer = WordAnalyzer(llm, usage_tracker=usage_tracker)
        vocab = VocabularySet("zh", ["我"])

        report = WordImporter(analyzer, sink).import_words("s", ["累"], "我很累。", "zh", vocab, user_id="u")

        assert report.added == ["累"]
        assert sink.concepts["s"][0].pinyin == "lèi"
        assert usage_tracker.get_user_usage("u").query_count == 1

