from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Protocol, Tuple

from .models import EventRecord

MATCH_PERFORMER = "performer"
MATCH_EVENT_NAME = "event_name"


@dataclass(frozen=True)
class EventQuery:
    city_norms: Tuple[str, ...]
    tokens: Tuple[str, ...]
    match_on: str = MATCH_PERFORMER
    date_day: Optional[date] = None
    date_from: Optional[date] = None
    state_norms: Tuple[str, ...] = ()
    exclude_parking: bool = False
    limit: Optional[int] = None


class EventStore(Protocol):
    """Read-only contract for the event store."""

    def find_events(self, query: EventQuery) -> List[EventRecord]:
        """Return events matching ``query`` ordered by date, time, then id.

        Offers and linked performer names are attached to every record.
        """
        raise NotImplementedError
