"""
LLM-backed generators constrained to the learner's known vocabulary.

This module contains generators for:
- Word analysis and explanation regeneration
- Yes/no and fill-in-the-blank practice questions
- Feedback on learner-written sentences
"""

from langseed.generators.base import BaseGenerator, GenerationOutcome, GenerationResult, RetryState
from langseed.generators.question_generator import QuestionGenerator
from langseed.generators.sentence_evaluator import SentenceEvaluator
from langseed.generators.word_analyzer import WordAnalyzer

__all__ = [
    "BaseGenerator",
    "GenerationOutcome",
    "GenerationResult",
    "QuestionGenerator",
    "RetryState",
    "SentenceEvaluator",
    "WordAnalyzer",
]
