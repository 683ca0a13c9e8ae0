"""Prompts for practice question generation.

Character-based languages list the allowed characters; space-delimited
languages list a sample of known words.
"""

from typing import Sequence

from langseed.constants import BLANK_MARKER
from langseed.utils.language_utils import get_language_name

YES_NO_WORDS = {
    "zh": "YES (是/对) or NO (不是/不对)",
    "ja": "YES (はい) or NO (いいえ)",
    "sv": "YES (ja) or NO (nej)",
    "en": "YES or NO",
}

YES_NO_EXAMPLES = {
    "zh": '{"question": "太阳 在 晚上 出来 吗？", "answer": false, "explanation": "太阳 在 白天 出来，不是 晚上"}',
    "ja": '{"question": "たいようは よるに でますか？", "answer": false, "explanation": "たいようは ひるに でます"}',
    "sv": '{"question": "Kommer solen på natten?", "answer": false, "explanation": "Solen kommer på dagen"}',
    "en": '{"question": "Does the sun come out at night?", "answer": false, "explanation": "The sun comes out in the day"}',
}

YES_NO_PROMPT_TEMPLATE = """Generate a Yes/No question in {language_name} to test understanding of the word "{word}" ({meaning}).
{retry_feedback}
RULES:
- The question must be answerable with {yes_no_words}
- {vocabulary_rule}
- You can also use: {word}
- Use emojis if helpful
- The question should test if the learner understands the MEANING of the word
- Make the question clear and unambiguous
- {forbid_rule}

Respond ONLY with JSON (no markdown):
{{"question": "{language_name} question here", "answer": true or false, "explanation": "brief {language_name} explanation of why"}}

Example:
{example}
"""

FILL_BLANK_PROMPT_TEMPLATE = """Generate a fill-in-the-blank sentence in {language_name} to test the word "{word}" ({meaning}).
{retry_feedback}
RULES:
- Create a sentence where "{word}" fits naturally in the blank
- {vocabulary_rule}
- Mark the blank with {blank}
- The context should make the correct answer clear
- {forbid_rule}

The correct answer is: {word}
Distractor options (wrong answers): {distractors}

Respond ONLY with JSON (no markdown):
{{"sentence": "sentence with {blank} for the word", "options": ["{word}", "option2", "option3", "option4"], "correct_index": 0}}

IMPORTANT: Shuffle the options randomly, correct_index should match where {word} ends up (0-3).
"""


def _vocabulary_rules(language: str, known_units: Sequence[str], character_based: bool):
    language_name = get_language_name(language)
    if character_based:
        return (
            f"Use ONLY these {language_name} characters: {''.join(known_units)}",
            f"DO NOT use any {language_name} character not in the allowed list above!",
        )
    return (
        f"Use ONLY {language_name} words the learner knows: {' '.join(known_units)}",
        "DO NOT use any word the learner does not know!",
    )


def build_yes_no_prompt(
    word: str,
    meaning: str,
    language: str,
    known_units: Sequence[str],
    character_based: bool,
    retry_feedback: str = "",
) -> str:
    """Build the yes/no question prompt.

    Args:
        word: Concept word under test
        meaning: English gloss of the word
        language: ISO 639-1 language code
        known_units: Known characters (character-based) or a known-word sample
        character_based: Whether known_units are characters
        retry_feedback: Block from build_retry_feedback, empty on first attempt
    """
    vocabulary_rule, forbid_rule = _vocabulary_rules(language, known_units, character_based)
    return YES_NO_PROMPT_TEMPLATE.format(
        language_name=get_language_name(language),
        word=word,
        meaning=meaning,
        retry_feedback=retry_feedback,
        yes_no_words=YES_NO_WORDS[language],
        vocabulary_rule=vocabulary_rule,
        forbid_rule=forbid_rule,
        example=YES_NO_EXAMPLES[language],
    )


def build_fill_blank_prompt(
    word: str,
    meaning: str,
    language: str,
    known_units: Sequence[str],
    character_based: bool,
    distractors: Sequence[str],
    retry_feedback: str = "",
) -> str:
    """Build the fill-in-the-blank prompt; at most 3 distractors are offered."""
    vocabulary_rule, forbid_rule = _vocabulary_rules(language, known_units, character_based)
    if character_based:
        vocabulary_rule += " (plus the blank)"
    return FILL_BLANK_PROMPT_TEMPLATE.format(
        language_name=get_language_name(language),
        word=word,
        meaning=meaning,
        retry_feedback=retry_feedback,
        vocabulary_rule=vocabulary_rule,
        forbid_rule=forbid_rule,
        blank=BLANK_MARKER,
        distractors=", ".join(list(distractors)[:3]),
    )
