from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from .text import (
    MONTH_TOKEN,
    WEEKDAY_PATTERN,
    TextPass,
    apply_passes,
    collapse_whitespace,
    normalize_text,
    remove_pattern,
    remove_words,
)

CITY_NOISE_WORDS = frozenset(
    {"presents", "tour", "part", "show", "stadium", "arena", "the", "big", "ass", "tickets"}
)

DEFAULT_CITY_ALIASES: dict[str, tuple[str, ...]] = {
    "west valley city": ("salt lake city",),
    "nyc": ("new york",),
    "new york city": ("new york",),
    "manhattan": ("new york",),
    "la": ("los angeles",),
    "washington dc": ("washington",),
    "dc": ("washington",),
    "vegas": ("las vegas",),
    "philly": ("philadelphia",),
    "nola": ("new orleans",),
    "east rutherford": ("new york",),
    "inglewood": ("los angeles",),
    "arlington": ("dallas", "fort worth"),
}

HEAD_TOKEN_SWAPS: dict[str, str] = {
    "ft": "fort",
    "fort": "ft",
    "st": "saint",
    "saint": "st",
    "mt": "mount",
    "mount": "mt",
}

_WRAPPING_QUOTES = {'"': '"', "'": "'", "“": "”", "‘": "’"}
_LEADING_TIME = re.compile(
    r"^\s*(?:\d{1,2}:\d{2}\s*[ap]\.?\s?m\.?|\d{2}:\d{2})(?![\w:])\s*",
    re.IGNORECASE,
)
_TICKETS_WORD = re.compile(r"\btickets\b", re.IGNORECASE)
_ISO_DATE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
_WEEKDAY = re.compile(rf"\b(?:{WEEKDAY_PATTERN})\b\.?", re.IGNORECASE)
_ORDINAL_DAY = re.compile(r"\b\d{1,2}(?:st|nd|rd|th)\b", re.IGNORECASE)
_PUNCT_ONLY_TOKEN = re.compile(r"(?:(?<=\s)|^)[^\w\s]+(?=\s|$)")


def clean_city_display(raw: Optional[str]) -> str:
    text = collapse_whitespace(raw or "")
    if len(text) >= 2 and _WRAPPING_QUOTES.get(text[0]) == text[-1]:
        text = text[1:-1].strip()
    return text


def strip_leading_time(text: str) -> str:
    return _LEADING_TIME.sub("", text, count=1)


def keep_after_tickets(text: str) -> str:
    match = _TICKETS_WORD.search(text)
    if match is None:
        return text
    return text[match.end():]


def keep_city_tail(text: str) -> str:
    tokens = text.split()
    if len(tokens) <= 3:
        return " ".join(tokens)
    last_two = tokens[-2:]
    if all(token.isalpha() for token in last_two):
        return " ".join(last_two)
    return " ".join(tokens[-3:])


CITY_CANDIDATE_PASSES: tuple[TextPass, ...] = (
    strip_leading_time,
    keep_after_tickets,
    remove_pattern(_ISO_DATE),
    remove_pattern(_WEEKDAY),
    remove_pattern(MONTH_TOKEN),
    remove_pattern(_ORDINAL_DAY),
    remove_words(CITY_NOISE_WORDS),
    remove_pattern(_PUNCT_ONLY_TOKEN),
    collapse_whitespace,
    keep_city_tail,
)


def extract_city_candidate(raw: Optional[str]) -> str:
    """Reduce messy page text to its trailing place words.

    "8:00 PM Sat Oct 12th Austin" becomes "Austin". A short tail keeps any
    state that follows the city, so "8:00 PM Sat Oct 12th Austin TX" becomes
    "Austin TX"; send the state in its own field to get a bare city.
    """
    return apply_passes(raw, CITY_CANDIDATE_PASSES)


def swap_head_token(variant: str) -> Optional[str]:
    head, _, rest = variant.partition(" ")
    swapped = HEAD_TOKEN_SWAPS.get(head)
    if swapped is None or not rest:
        return None
    return f"{swapped} {rest}"


def city_variants(
    raw: Optional[str],
    aliases: Mapping[str, Sequence[str]] = DEFAULT_CITY_ALIASES,
) -> list[str]:
    """Return normalized city variants, the cleaned input first.

    Aliases are looked up on the base variant; head-token swaps are applied
    to the base variant and each alias.
    """
    base = normalize_text(extract_city_candidate(clean_city_display(raw)))
    if not base:
        return []
    candidates = [base, *aliases.get(base, ())]
    variants: list[str] = []
    for candidate in candidates:
        for value in (candidate, swap_head_token(candidate)):
            if value and value not in variants:
                variants.append(value)
    return variants
