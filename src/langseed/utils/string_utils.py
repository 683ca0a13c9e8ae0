"""String sanitation helpers applied before text reaches a segmenter."""

import re
from typing import Optional, Union

_SENTENCE_BREAKS = {
    "zh": re.compile(r"[。！？\n]+"),
    "ja": re.compile(r"[。！？\n]+"),
}
_DEFAULT_SENTENCE_BREAK = re.compile(r"[.!?\n]+")


def ensure_valid_utf8(value: Optional[Union[str, bytes]]) -> str:
    """Return text that is safe to segment.

    Bytes are decoded as UTF-8 keeping only the valid portions, lone
    surrogates are dropped from str input and None becomes "".

    Example:
        >>> ensure_valid_utf8(b"\\xe4\\xbd\\xa0\\xff\\xe5\\xa5\\xbd")
        '你好'
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    return value.encode("utf-8", errors="ignore").decode("utf-8")


def extract_sentence(text: str, word: str, language: str) -> str:
    """Pick the sentence of `text` that contains `word`.

    Falls back to the first sentence, then to the word itself when the text
    has no sentences at all.

    Example:
        >>> extract_sentence("我很累。我要休息！", "休息", "zh")
        '我要休息'
    """
    pattern = _SENTENCE_BREAKS.get(language, _DEFAULT_SENTENCE_BREAK)
    sentences = [s.strip() for s in pattern.split(text or "")]
    sentences = [s for s in sentences if s]

    for sentence in sentences:
        if word in sentence:
            return sentence
    return sentences[0] if sentences else word
