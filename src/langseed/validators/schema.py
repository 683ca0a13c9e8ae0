"""Pydantic models for segments, concepts, questions and parsed LLM output.

The *Response models mirror the JSON shapes the generator is asked for and
normalize sloppy model output (clamped quality, lowercased part of speech,
legacy single-explanation format). A pydantic ValidationError raised while
parsing one of them is a structural failure, not a vocabulary violation.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from langseed.constants import BLANK_MARKER


# ============================================================================
# Enums
# ============================================================================


class Language(str, Enum):
    """Supported target languages (ISO 639-1)."""

    ZH = "zh"
    JA = "ja"
    SV = "sv"
    EN = "en"


class PartOfSpeech(str, Enum):
    """Closed part-of-speech set for concepts."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    PARTICLE = "particle"
    NUMERAL = "numeral"
    MEASURE_WORD = "measure_word"
    INTERJECTION = "interjection"
    OTHER = "other"


class SegmentKind(str, Enum):
    """Classification of a segment of text."""

    WORD = "word"
    PUNCT = "punct"
    SPACE = "space"
    NEWLINE = "newline"


class QuestionType(str, Enum):
    """Practice question kinds produced by the generators."""

    YES_NO = "yes_no"
    FILL_BLANK = "fill_blank"


def normalize_part_of_speech(value: Any) -> PartOfSpeech:
    """Map free-form part-of-speech text onto the closed enum.

    Example:
        >>> normalize_part_of_speech("Measure Word")
        <PartOfSpeech.MEASURE_WORD: 'measure_word'>
    """
    if isinstance(value, PartOfSpeech):
        return value
    if not isinstance(value, str):
        return PartOfSpeech.OTHER
    normalized = value.strip().lower().replace(" ", "_")
    try:
        return PartOfSpeech(normalized)
    except ValueError:
        return PartOfSpeech.OTHER


def normalize_quality(value: Any) -> Optional[int]:
    """Clamp an explanation quality score into 1-5; non-integers become None."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return max(1, min(5, value))


def _string_items(value: Any, limit: int) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()][:limit]


# ============================================================================
# Core Entities
# ============================================================================


class Segment(BaseModel):
    """A classified span of text.

    `text` is always the original surface form, so joining the texts of a
    segmentation reproduces the input. `key` is the form used for vocabulary
    matching (lowercased for space-delimited languages).
    """

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    text: str
    key: str = ""

    @model_validator(mode="before")
    @classmethod
    def default_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("key"):
            data = {**data, "key": data.get("text", "")}
        return data

    @property
    def is_word(self) -> bool:
        return self.kind == SegmentKind.WORD


class Concept(BaseModel):
    """A learnable word owned by a learner's vocabulary collection.

    Validation Rules:
    - pinyin only for Chinese, reading only for Japanese
    - at most 5 explanations and 5 desired words
    - explanation_quality in 1-5 when present
    """

    word: str = Field(..., min_length=1, description="Surface form of the word")
    language: Language
    meaning: str = Field(..., description="English gloss")
    part_of_speech: PartOfSpeech = PartOfSpeech.OTHER
    explanations: List[str] = Field(default_factory=list, max_length=5)
    explanation_quality: Optional[int] = Field(None, ge=1, le=5)
    desired_words: List[str] = Field(default_factory=list, max_length=5)
    pinyin: Optional[str] = Field(None, description="Pinyin with tone marks (zh only)")
    reading: Optional[str] = Field(None, description="Kana reading (ja only)")
    example_sentence: Optional[str] = None

    @model_validator(mode="after")
    def validate_language_specific_fields(self) -> "Concept":
        if self.pinyin is not None and self.language != Language.ZH:
            raise ValueError("pinyin is only valid for Chinese concepts")
        if self.reading is not None and self.language != Language.JA:
            raise ValueError("reading is only valid for Japanese concepts")
        return self


class Question(BaseModel):
    """Practice question record handed to the persistence sink."""

    concept_word: str
    language: Language
    question_type: QuestionType
    question_text: str
    answer: Optional[bool] = None
    options: List[str] = Field(default_factory=list)
    correct_index: Optional[int] = None
    explanation: str = ""

    @model_validator(mode="after")
    def validate_type_fields(self) -> "Question":
        if self.question_type == QuestionType.YES_NO and self.answer is None:
            raise ValueError("yes/no questions require an answer")
        if self.question_type == QuestionType.FILL_BLANK:
            if self.correct_index is None or not 0 <= self.correct_index < len(self.options):
                raise ValueError("fill-blank questions require a valid correct_index")
        return self


# ============================================================================
# Parsed LLM responses
# ============================================================================


class WordAnalysisResponse(BaseModel):
    """Word analysis as returned by the generator."""

    meaning: str
    part_of_speech: PartOfSpeech
    explanations: List[str] = Field(..., min_length=1)
    explanation_quality: Optional[int] = None
    desired_words: List[str] = Field(default_factory=list)
    pinyin: Optional[str] = None
    reading: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_explanation(cls, data: Any) -> Any:
        # Older prompts asked for a single "explanation" string
        if isinstance(data, dict) and not isinstance(data.get("explanations"), list):
            legacy = data.get("explanation")
            data = dict(data)
            data["explanations"] = [legacy] if isinstance(legacy, str) and legacy else []
        return data

    @field_validator("part_of_speech", mode="before")
    @classmethod
    def coerce_part_of_speech(cls, value: Any) -> PartOfSpeech:
        if not isinstance(value, str):
            raise ValueError("part_of_speech must be a string")
        return normalize_part_of_speech(value)

    @field_validator("explanations", mode="before")
    @classmethod
    def keep_string_explanations(cls, value: Any) -> List[str]:
        return _string_items(value, 5)

    @field_validator("explanation_quality", mode="before")
    @classmethod
    def clamp_quality(cls, value: Any) -> Optional[int]:
        return normalize_quality(value)

    @field_validator("desired_words", mode="before")
    @classmethod
    def keep_string_desired_words(cls, value: Any) -> List[str]:
        return _string_items(value, 5)

    @field_validator("pinyin", "reading", mode="before")
    @classmethod
    def drop_non_string(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value.strip() else None


class ExplanationsResponse(BaseModel):
    """Explanation candidates from a regeneration call."""

    explanations: List[str] = Field(default_factory=list)

    @field_validator("explanations", mode="before")
    @classmethod
    def keep_strings(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            raise ValueError("explanations must be a list")
        return [item for item in value if isinstance(item, str) and item.strip()]


class YesNoQuestionResponse(BaseModel):
    """Yes/no question as returned by the generator."""

    question: str
    answer: bool
    explanation: str = ""

    @field_validator("answer", mode="before")
    @classmethod
    def strict_true(cls, value: Any) -> bool:
        return value is True

    @field_validator("explanation", mode="before")
    @classmethod
    def default_explanation(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class FillBlankQuestionResponse(BaseModel):
    """Fill-in-the-blank question as returned by the generator.

    Structural rules checked here:
    - correct_index must index into options
    - the blank marker appears exactly once in the sentence
    """

    sentence: str
    options: List[str] = Field(..., min_length=2)
    correct_index: StrictInt

    @model_validator(mode="after")
    def validate_structure(self) -> "FillBlankQuestionResponse":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} out of range for {len(self.options)} options"
            )
        blank_count = self.sentence.count(BLANK_MARKER)
        if blank_count != 1:
            raise ValueError(f"sentence must contain exactly one blank, found {blank_count}")
        return self


class SentenceEvaluationResponse(BaseModel):
    """Evaluation of a learner-written sentence."""

    correct: bool
    feedback: str
    improved: Optional[str] = None

    @field_validator("correct", mode="before")
    @classmethod
    def strict_true(cls, value: Any) -> bool:
        return value is True

    @field_validator("improved", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value.strip() else None
