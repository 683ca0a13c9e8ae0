"""Prompts for word analysis and explanation regeneration."""

from typing import Optional, Sequence

from langseed.constants import BLANK_MARKER
from langseed.utils.language_utils import get_explanation_language, get_language_name
from langseed.utils.string_utils import ensure_valid_utf8

PART_OF_SPEECH_CHOICES = (
    "noun, verb, adjective, adverb, pronoun, preposition, conjunction, particle, "
    "numeral, measure_word, interjection, other"
)

# Pronunciation field requested per language
PRONUNCIATION_FIELDS = {
    "zh": '  "pinyin": "pinyin with tone marks",\n',
    "ja": '  "reading": "reading in hiragana",\n',
}

ANALYZE_PROMPT_TEMPLATE = """Analyze this {language_name} word: "{word}"
{context_part}
Respond ONLY with a JSON object in this exact format (no markdown, no code blocks):
{{
{pronunciation_field}  "meaning": "English meaning",
  "part_of_speech": "one of: {pos_choices}",
  "explanations": ["explanation1", "explanation2", "explanation3"],
  "explanation_quality": 1-5,
  "desired_words": ["word1", "word2"]
}}

CRITICAL RULES for the explanations field:
- Provide 2-3 DIFFERENT explanations using different approaches:
  1. A short example sentence showing usage in {language_name} (use {blank} for the word's position)
  2. An emoji-based visual hint
  3. A simple contextual phrase if possible
- Each explanation should help understand the word from a DIFFERENT angle
- Write explanations in {explanation_language}
- Use ONLY {language_name} words the learner knows. Known words include: {known_words}
- You can also use: {word}
- You can use emojis freely
- You can use numbers, punctuation, and spaces
- Use {blank} to show where the word fits in example sentences
- Keep each explanation SHORT

EXPLANATION_QUALITY (1-5):
- 5: Perfect explanations using available words
- 4: Good, captures the meaning well
- 3: Adequate, could be clearer
- 2: Limited, mostly emojis
- 1: Very poor

DESIRED_WORDS: List 0-5 {language_name} words that would help write better explanations.
These must be {language_name} words, not English or other languages.
{retry_feedback}"""

REGENERATE_PROMPT_TEMPLATE = """Create NEW, DIFFERENT explanations for the {language_name} word "{word}" ({meaning}).

Previous explanations were: "{previous}"
Please create DIFFERENT explanations using different approaches.

RULES:
- Provide 2-3 DIFFERENT explanations:
  1. A short example sentence (use {blank} for where the word goes)
  2. An emoji-based visual hint
  3. A contextual phrase if possible
- Write explanations in {explanation_language}
- Use ONLY words the learner knows. Known words include: {known_words}
- You can also use: {word}
{combine_rule}- You can use emojis freely
- Keep each short and visual
- Try different angles than the previous explanations

Respond ONLY with JSON (no markdown):
{{"explanations": ["explanation1", "explanation2", "explanation3"]}}
"""

COMBINE_RULE = (
    "- IMPORTANT: Do NOT combine characters into words the learner doesn't know!\n"
    "  For example, if they know 学 and 生 separately, do NOT use 学生 unless 学生 is in their vocabulary.\n"
)


def build_analyze_prompt(
    word: str,
    language: str,
    known_words: Sequence[str],
    context_sentence: Optional[str] = None,
    retry_feedback: str = "",
) -> str:
    """Build the word analysis prompt.

    Args:
        word: Word to analyze
        language: ISO 639-1 language code
        known_words: Bounded sample of the learner's known words
        context_sentence: Sentence the word was found in, if any
        retry_feedback: Block from build_retry_feedback, empty on first attempt

    Returns:
        Formatted prompt string
    """
    safe_word = ensure_valid_utf8(word)
    safe_sentence = ensure_valid_utf8(context_sentence)
    context_part = (
        f'The word appears in this sentence: "{safe_sentence}"\n' if safe_sentence else ""
    )

    return ANALYZE_PROMPT_TEMPLATE.format(
        language_name=get_language_name(language),
        word=safe_word,
        context_part=context_part,
        pronunciation_field=PRONUNCIATION_FIELDS.get(language, ""),
        pos_choices=PART_OF_SPEECH_CHOICES,
        blank=BLANK_MARKER,
        explanation_language=get_explanation_language(language),
        known_words=" ".join(known_words),
        retry_feedback=retry_feedback,
    )


def build_regenerate_prompt(
    word: str,
    meaning: str,
    language: str,
    known_words: Sequence[str],
    previous_explanations: Sequence[str],
) -> str:
    """Build the prompt asking for fresh explanations of an existing concept."""
    return REGENERATE_PROMPT_TEMPLATE.format(
        language_name=get_language_name(language),
        word=ensure_valid_utf8(word),
        meaning=meaning,
        previous=", ".join(previous_explanations),
        blank=BLANK_MARKER,
        explanation_language=get_explanation_language(language),
        known_words=" ".join(known_words),
        combine_rule=COMBINE_RULE if language == "zh" else "",
    )
