from __future__ import annotations

import re
import unicodedata
from typing import Callable, Iterable, Optional

TextPass = Callable[[str], str]

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

MONTH_PATTERN = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
WEEKDAY_PATTERN = (
    r"monday|tuesday|wednesday|thursday|friday|saturday|sunday|"
    r"mon|tues?|wed|thu(?:rs?)?|fri|sat|sun"
)
MONTH_TOKEN = re.compile(rf"\b(?:{MONTH_PATTERN})\b\.?", re.IGNORECASE)
YEAR_TOKEN = re.compile(r"^(?:19|20)\d{2}$")


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Lowercase, strip diacritics and punctuation, collapse whitespace.

    Returns ``None`` for empty input or input that holds no alphanumerics.
    """
    if not value:
        return None
    text = unicodedata.normalize("NFKD", str(value).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_ALNUM.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text or None


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def is_year(token: str) -> bool:
    return bool(YEAR_TOKEN.match(token))


def remove_pattern(pattern: re.Pattern) -> TextPass:
    """Build a pass that blanks every match of ``pattern``."""

    def _pass(text: str) -> str:
        return pattern.sub(" ", text)

    return _pass


def remove_words(words: Iterable[str]) -> TextPass:
    pattern = re.compile(
        r"\b(?:" + "|".join(re.escape(w) for w in sorted(words)) + r")\b",
        re.IGNORECASE,
    )
    return remove_pattern(pattern)


def apply_passes(text: Optional[str], passes: Iterable[TextPass]) -> str:
    result = text or ""
    for text_pass in passes:
        result = text_pass(result)
    return result
