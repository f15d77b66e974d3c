from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .text import normalize_text

US_STATES: Tuple[Tuple[str, str], ...] = (
    ("Alabama", "AL"),
    ("Alaska", "AK"),
    ("Arizona", "AZ"),
    ("Arkansas", "AR"),
    ("California", "CA"),
    ("Colorado", "CO"),
    ("Connecticut", "CT"),
    ("Delaware", "DE"),
    ("District of Columbia", "DC"),
    ("Florida", "FL"),
    ("Georgia", "GA"),
    ("Hawaii", "HI"),
    ("Idaho", "ID"),
    ("Illinois", "IL"),
    ("Indiana", "IN"),
    ("Iowa", "IA"),
    ("Kansas", "KS"),
    ("Kentucky", "KY"),
    ("Louisiana", "LA"),
    ("Maine", "ME"),
    ("Maryland", "MD"),
    ("Massachusetts", "MA"),
    ("Michigan", "MI"),
    ("Minnesota", "MN"),
    ("Mississippi", "MS"),
    ("Missouri", "MO"),
    ("Montana", "MT"),
    ("Nebraska", "NE"),
    ("Nevada", "NV"),
    ("New Hampshire", "NH"),
    ("New Jersey", "NJ"),
    ("New Mexico", "NM"),
    ("New York", "NY"),
    ("North Carolina", "NC"),
    ("North Dakota", "ND"),
    ("Ohio", "OH"),
    ("Oklahoma", "OK"),
    ("Oregon", "OR"),
    ("Pennsylvania", "PA"),
    ("Rhode Island", "RI"),
    ("South Carolina", "SC"),
    ("South Dakota", "SD"),
    ("Tennessee", "TN"),
    ("Texas", "TX"),
    ("Utah", "UT"),
    ("Vermont", "VT"),
    ("Virginia", "VA"),
    ("Washington", "WA"),
    ("West Virginia", "WV"),
    ("Wisconsin", "WI"),
    ("Wyoming", "WY"),
    ("Puerto Rico", "PR"),
    ("Guam", "GU"),
    ("U.S. Virgin Islands", "VI"),
    ("Alberta", "AB"),
    ("British Columbia", "BC"),
    ("Manitoba", "MB"),
    ("New Brunswick", "NB"),
    ("Newfoundland and Labrador", "NL"),
    ("Nova Scotia", "NS"),
    ("Ontario", "ON"),
    ("Prince Edward Island", "PE"),
    ("Quebec", "QC"),
    ("Saskatchewan", "SK"),
)

_ABBREVIATION = re.compile(r"^[a-z]{2,3}$")


@dataclass(frozen=True)
class StateTable:
    """Read-only abbreviation <-> full name lookup, keys and values normalized."""

    name_by_abbr: Mapping[str, str] = field(default_factory=dict)
    abbr_by_name: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "StateTable":
        name_by_abbr: dict[str, str] = {}
        abbr_by_name: dict[str, str] = {}
        for name, abbr in pairs:
            name_norm = normalize_text(name)
            abbr_norm = normalize_text(abbr)
            if not name_norm or not abbr_norm:
                continue
            name_by_abbr[abbr_norm] = name_norm
            abbr_by_name[name_norm] = abbr_norm
        return cls(MappingProxyType(name_by_abbr), MappingProxyType(abbr_by_name))

    @classmethod
    def from_csv(cls, path: str | Path) -> "StateTable":
        with Path(path).open(newline="", encoding="utf-8") as handle:
            rows = [(row["name"], row["abbr"]) for row in csv.DictReader(handle)]
        return cls.from_pairs(rows)


@dataclass(frozen=True)
class StateFilter:
    full: Optional[str]
    abbr: Optional[str]

    @property
    def resolved(self) -> bool:
        return bool(self.full and self.abbr)

    def store_values(self) -> Tuple[str, ...]:
        """Values a stored ``state_norm`` may hold for this state; empty when unresolved."""
        if not self.resolved:
            return ()
        return (self.abbr, self.full)


def normalize_state(raw: Optional[str], table: StateTable) -> Optional[StateFilter]:
    """Resolve ``raw`` to both spellings; ``None`` means no state constraint."""
    value = normalize_text(raw)
    if not value:
        return None
    if _ABBREVIATION.match(value):
        return StateFilter(full=table.name_by_abbr.get(value), abbr=value)
    return StateFilter(full=value, abbr=table.abbr_by_name.get(value))
