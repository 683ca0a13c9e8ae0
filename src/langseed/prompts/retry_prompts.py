"""Retry feedback appended to a prompt after a vocabulary violation."""

from typing import Sequence

from langseed.segmenters import get_segmenter
from langseed.utils.language_utils import get_language_name
from langseed.validators.vocabulary_validator import CheckUnit

FOREIGN_SCRIPT_WARNING = "You used ENGLISH letters which is FORBIDDEN. "
UNKNOWN_WORDS_WARNING = (
    "You used these UNKNOWN WORDS: {words}. The learner does not know these words! "
)
UNKNOWN_CHARS_WARNING = "You used these FORBIDDEN characters: {chars}. "


def build_retry_feedback(
    illegal: Sequence[str],
    language: str,
    unit: CheckUnit = CheckUnit.WORDS,
) -> str:
    """Build the retry block for the next prompt.

    Args:
        illegal: Violations accumulated over previous attempts
        language: ISO 639-1 language code
        unit: Whether violations are words or single characters

    Returns:
        Empty string when there is nothing to report, else a warning block
    """
    if not illegal:
        return ""

    segmenter = get_segmenter(language)
    marker = segmenter.foreign_script_marker
    foreign_warning = FOREIGN_SCRIPT_WARNING if marker and marker in illegal else ""
    offenders = [item for item in illegal if item != marker]

    if unit == CheckUnit.CHARS:
        unit_warning = UNKNOWN_CHARS_WARNING.format(chars=" ".join(offenders)) if offenders else ""
        instruction = f"Use ONLY allowed {get_language_name(language)} characters. NO unknown characters!"
    else:
        unit_warning = UNKNOWN_WORDS_WARNING.format(words=", ".join(offenders)) if offenders else ""
        instruction = "Use ONLY words from the learner's vocabulary."
        if segmenter.character_based:
            instruction += " Do NOT combine characters into unknown words!"

    return f"\n⚠️ RETRY: {foreign_warning}{unit_warning}{instruction}\n"
