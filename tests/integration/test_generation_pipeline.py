"""End-to-end generation flow with a scripted text generator.

Imports a word, generates both question types for the resulting concept,
evaluates a learner sentence, and checks persistence and usage accounting.
"""

import pytest

from langseed.errors import GenerationExhaustedError
from langseed.generators import QuestionGenerator, SentenceEvaluator, WordAnalyzer
from langseed.services import WordImporter
from langseed.utils.usage_tracker import UsageTracker
from langseed.validators.schema import QuestionType


@pytest.fixture
def tracker():
    return UsageTracker()


class TestChinesePipeline:
    """Import 吗 for a learner who knows 我, 你 and 好."""

    def test_import_then_practice(self, stub_llm, sink, vocabulary_source, tracker):
        """Test a word flows from import to practice questions and evaluation."""
        source = vocabulary_source({("learner-1", "zh"): ["我", "你", "好"]})
        llm = stub_llm(
            [
                # analyze_word: the second explanation uses 累 and is dropped
                {
                    "pinyin": "ma",
                    "meaning": "question particle",
                    "part_of_speech": "particle",
                    "explanations": ["你 好 ____ ？", "你 累 吗", "🤔❓"],
                    "explanation_quality": 4,
                },
                # yes_no_question: 累 is not a known character, retried
                {"question": "你累吗？", "answer": True, "explanation": ""},
                {"question": "你好吗？", "answer": True, "explanation": "累"},
                # fill_blank_question
                {"sentence": "你好____？", "options": ["呢", "吗", "了", "吧"], "correct_index": 1},
                # evaluate_sentence
                {"correct": True, "feedback": "好 ！👍", "improved": None},
            ]
        )

        importer = WordImporter(WordAnalyzer(llm, usage_tracker=tracker), sink, vocabulary_source=source)
        report = importer.import_words("learner-1", ["吗"], "你好吗？我很好。", "zh", user_id="learner-1")

        assert report.added == ["吗"]
        concept = sink.concepts["learner-1"][0]
        assert concept.explanations == ["你 好 ____ ？", "🤔❓"]
        assert concept.example_sentence == "你好吗"

        vocabulary = importer.load_vocabulary("learner-1", "zh")
        questions = QuestionGenerator(llm, usage_tracker=tracker)

        yes_no = questions.generate_yes_no(concept, vocabulary, user_id="learner-1")
        assert yes_no.question_text == "你好吗？"
        assert yes_no.explanation == ""
        assert "FORBIDDEN characters: 累" in llm.prompts[2]

        fill_blank = questions.generate_fill_blank(concept, vocabulary, ["呢", "了", "吧"], user_id="learner-1")
        assert fill_blank.question_type == QuestionType.FILL_BLANK
        assert fill_blank.options[fill_blank.correct_index] == "吗"

        for question in (yes_no, fill_blank):
            sink.save_question("learner-1", question)
        assert len(sink.questions["learner-1"]) == 2

        evaluation = SentenceEvaluator(llm, usage_tracker=tracker).evaluate(
            concept, "你好吗", vocabulary, user_id="learner-1"
        )
        assert evaluation.correct is True

        by_type = tracker.get_usage_by_type("learner-1")
        assert by_type["analyze_word"].query_count == 1
        assert by_type["yes_no_question"].query_count == 2
        assert by_type["fill_blank_question"].query_count == 1
        assert by_type["evaluate_sentence"].query_count == 1
        assert tracker.get_total_usage().total_input_tokens == 50
        assert llm.call_count == 5


class TestEnglishPipeline:
    """Word-checked questions for a space-delimited language."""

    def test_exhausted_question_leaves_concept(self, stub_llm, sink, en_vocab, tracker):
        """Test an exhausted question call surfaces every avoided word."""
        llm = stub_llm(
            [
                {
                    "meaning": "a very hot star",
                    "part_of_speech": "noun",
                    "explanations": ["the ____ is a big hot star", "☀️"],
                },
                {"question": "Is the sun cold?", "answer": False},
                {"question": "Is the sun cold at night?", "answer": False},
                {"question": "Is the sun dark?", "answer": False},
            ]
        )
        importer = WordImporter(WordAnalyzer(llm, usage_tracker=tracker), sink)
        report = importer.import_words("s", ["sun"], "The sun is hot.", "en", en_vocab)
        concept = sink.concepts["s"][0]

        with pytest.raises(GenerationExhaustedError) as exc_info:
            QuestionGenerator(llm, usage_tracker=tracker).generate_yes_no(concept, en_vocab)

        assert report.added == ["sun"]
        assert concept.pinyin is None
        assert exc_info.value.illegal == ["cold", "at", "night", "dark"]
        assert "UNKNOWN WORDS: cold, at, night" in llm.prompts[-1]
