from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .text import (
    MONTH_TOKEN,
    TextPass,
    apply_passes,
    collapse_whitespace,
    is_year,
    normalize_text,
    remove_pattern,
    remove_words,
)

EXACT = "exact"
UPCOMING = "upcoming"

PERFORMER_STOPWORDS = frozenset(
    {
        "tickets",
        "ticket",
        "tix",
        "tour",
        "live",
        "the",
        "and",
        "with",
        "parking",
        "package",
        "packages",
        "session",
        "sess",
        "vip",
        "concert",
        "in",
        "at",
        "of",
        "a",
        "an",
        "presents",
        "featuring",
        "feat",
        "special",
        "guest",
        "guests",
        "event",
        "events",
        "pass",
    }
)
TITLE_BOILERPLATE = ("tickets", "tour", "events")

_TITLE_DELIMITER = re.compile(r" \| | - ")
_LEADING_THE = re.compile(r"^\s*the\s+", re.IGNORECASE)
_DAY_PACKAGE = re.compile(r"\b\d+\s*-?\s*day\s+package\b", re.IGNORECASE)
_BARE_DAY_PACKAGE = re.compile(r"\bday\s+package\b", re.IGNORECASE)
_PACKAGE = re.compile(r"\bpackage\b", re.IGNORECASE)
_SESSION_TAIL = re.compile(r"\b(?:session|sess)\b.*$", re.IGNORECASE)


@dataclass(frozen=True)
class PerformerPick:
    text: str
    source: str


def performer_from_title(raw_title: Optional[str]) -> str:
    """Derive a performer guess from a page title like "Zach Bryan Tickets | Site"."""
    title = raw_title or ""
    delimiter = _TITLE_DELIMITER.search(title)
    if delimiter:
        title = title[: delimiter.start()]
    return collapse_whitespace(remove_words(TITLE_BOILERPLATE)(title))


def pick_performer(performer_query: Optional[str], raw_title: Optional[str]) -> Optional[PerformerPick]:
    explicit = collapse_whitespace(performer_query or "")
    if explicit:
        return PerformerPick(text=explicit, source="performer_query")
    derived = performer_from_title(raw_title)
    if derived:
        return PerformerPick(text=derived, source="raw_title")
    return None


def strip_leading_the(text: str) -> str:
    return _LEADING_THE.sub("", text, count=1)


def truncate_at_month(text: str) -> str:
    # Cuts at the first month token, except one that opens the string:
    # a leading month is part of the name ("June Carter"), not a date.
    for match in MONTH_TOKEN.finditer(text):
        if text[: match.start()].strip():
            return text[: match.start()]
    return text


PERFORMER_CLEANUP_PASSES: Tuple[TextPass, ...] = (
    strip_leading_the,
    truncate_at_month,
    remove_pattern(_DAY_PACKAGE),
    remove_pattern(_BARE_DAY_PACKAGE),
    remove_pattern(_PACKAGE),
    remove_pattern(_SESSION_TAIL),
    collapse_whitespace,
)


def clean_performer(text: Optional[str]) -> str:
    return apply_passes(text, PERFORMER_CLEANUP_PASSES)


def performer_tokens(text: Optional[str]) -> List[str]:
    normalized = normalize_text(clean_performer(text))
    if not normalized:
        return []
    return [
        token
        for token in normalized.split(" ")
        if token not in PERFORMER_STOPWORDS and not is_year(token)
    ]


def _single_token_allowed(token: str, mode: str) -> bool:
    if token in PERFORMER_STOPWORDS or is_year(token):
        return False
    if mode == UPCOMING:
        return len(token) >= 4
    return True


def build_word_variants(tokens: List[str], mode: str) -> List[List[str]]:
    """Ordered token subsets to try against the store, most specific first.

    The full token list always leads; then prefixes longest to shortest,
    then suffixes dropping one more leading token each time. Derived
    single-token variants must clear the per-mode length floor.
    """
    if mode not in (EXACT, UPCOMING):
        raise ValueError(f"unknown variant mode: {mode}")
    if not tokens:
        return []
    variants: List[List[str]] = [list(tokens)]
    seen = {tuple(tokens)}
    candidates = [tokens[:end] for end in range(len(tokens) - 1, 0, -1)]
    candidates += [tokens[start:] for start in range(1, len(tokens))]
    for candidate in candidates:
        key = tuple(candidate)
        if key in seen:
            continue
        if len(candidate) == 1 and not _single_token_allowed(candidate[0], mode):
            continue
        seen.add(key)
        variants.append(list(candidate))
    return variants
