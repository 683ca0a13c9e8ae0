"""Centralized LLM prompts for the generation engine.

This package contains all prompts used by the generators:
- word_analysis_prompts.py: Word analysis and explanation regeneration
- question_prompts.py: Yes/no and fill-in-the-blank questions
- sentence_evaluation_prompts.py: Feedback on learner-written sentences
- retry_prompts.py: Feedback block listing previously used unknown vocabulary
"""
