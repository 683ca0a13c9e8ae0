"""Prompt for evaluating a sentence written by the learner."""

from typing import Sequence

from langseed.utils.language_utils import get_language_name
from langseed.utils.string_utils import ensure_valid_utf8

EVALUATION_PROMPT_TEMPLATE = """You are evaluating a {language_name} sentence written by a language learner.
IMPORTANT: Write ALL feedback in {language_name} using ONLY words the learner knows.

Target word they should use: "{word}" (meaning: {meaning})
Learner's sentence: "{sentence}"

Words the learner knows (use only these in your feedback): {known_words}

Check if:
1. The sentence uses "{word}" correctly
2. The sentence is grammatically correct in {language_name}
3. The sentence makes sense

Respond ONLY with JSON (no markdown):
{{"correct": true/false, "feedback": "your {language_name} feedback here using only known words", "improved": "improved {language_name} sentence if needed, or null"}}

Be encouraging! Write your feedback ONLY in {language_name} using ONLY words from the learner's vocabulary.
{retry_feedback}"""


def build_evaluation_prompt(
    word: str,
    meaning: str,
    sentence: str,
    language: str,
    known_words: Sequence[str],
    retry_feedback: str = "",
) -> str:
    return EVALUATION_PROMPT_TEMPLATE.format(
        language_name=get_language_name(language),
        word=word,
        meaning=meaning,
        sentence=ensure_valid_utf8(sentence),
        known_words=" ".join(known_words),
        retry_feedback=retry_feedback,
    )
