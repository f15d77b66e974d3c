from __future__ import annotations

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .cities import DEFAULT_CITY_ALIASES
from .states import US_STATES, StateTable


@dataclass(frozen=True)
class MatchingTables:
    states: StateTable
    city_aliases: Mapping[str, Sequence[str]]


def load_matching_tables(
    state_table_path: Optional[str] = None,
    city_aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> MatchingTables:
    """Build the lookup tables once at startup.

    ``STATE_TABLE_PATH`` may point at a ``name,abbr`` CSV that replaces the
    built-in US/Canada table.
    """
    path = state_table_path or os.getenv("STATE_TABLE_PATH")
    states = StateTable.from_csv(path) if path else StateTable.from_pairs(US_STATES)
    aliases = {key: tuple(values) for key, values in (city_aliases or DEFAULT_CITY_ALIASES).items()}
    return MatchingTables(states=states, city_aliases=MappingProxyType(aliases))
