"""Language code mapping utilities."""

from langseed.errors import UnsupportedLanguageError

# Language name to ISO 639-1 code mapping
LANGUAGE_NAME_TO_CODE = {
    "mandarin": "zh",
    "chinese": "zh",
    "japanese": "ja",
    "swedish": "sv",
    "english": "en",
}

# ISO 639-1 code to language name mapping
LANGUAGE_CODE_TO_NAME = {
    "zh": "Chinese",
    "ja": "Japanese",
    "sv": "Swedish",
    "en": "English",
}

# Language learners should read explanations in
EXPLANATION_LANGUAGE = {
    "zh": "Chinese (no English)",
    "ja": "Japanese (no English or romaji)",
    "sv": "Swedish (no English)",
    "en": "simple English",
}


def get_language_code(language_name_or_code: str) -> str:
    """Convert language name to ISO 639-1 code.

    Args:
        language_name_or_code: Language name (e.g., "Mandarin") or code (e.g., "zh")

    Returns:
        ISO 639-1 language code (e.g., "zh")

    Raises:
        UnsupportedLanguageError: If language is not supported
    """
    lower_input = language_name_or_code.lower()

    if lower_input in LANGUAGE_CODE_TO_NAME:
        return lower_input

    if lower_input in LANGUAGE_NAME_TO_CODE:
        return LANGUAGE_NAME_TO_CODE[lower_input]

    raise UnsupportedLanguageError(
        f"Unsupported language: '{language_name_or_code}'. "
        f"Supported: {', '.join(LANGUAGE_CODE_TO_NAME.values())}"
    )


def get_language_name(language_code: str) -> str:
    """Convert ISO 639-1 code to language name.

    Args:
        language_code: ISO 639-1 language code (e.g., "zh")

    Returns:
        Language name (e.g., "Chinese")

    Raises:
        UnsupportedLanguageError: If language code is not supported
    """
    lower_code = language_code.lower()

    if lower_code not in LANGUAGE_CODE_TO_NAME:
        raise UnsupportedLanguageError(
            f"Unsupported language code: '{language_code}'. "
            f"Supported: {', '.join(LANGUAGE_CODE_TO_NAME.keys())}"
        )

    return LANGUAGE_CODE_TO_NAME[lower_code]


def get_explanation_language(language_code: str) -> str:
    """Describe the language explanations must be written in."""
    return EXPLANATION_LANGUAGE[get_language_code(language_code)]
