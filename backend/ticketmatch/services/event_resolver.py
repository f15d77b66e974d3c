from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ticketmatch.domain.models import EventRecord
from ticketmatch.domain.performers import EXACT, UPCOMING, build_word_variants
from ticketmatch.domain.queries import MATCH_EVENT_NAME, MATCH_PERFORMER, EventQuery, EventStore

EXACT_LIMIT = 25
UPCOMING_LIMIT = 4
UPCOMING_KEEP = 3

HIGH = "high"
MEDIUM = "medium"
LOW = "low"

EXACT_OR_TIEBROKEN = "exact_or_tiebroken"
MULTIPLE = "multiple"
UPCOMING_IN_CITY = "upcoming_in_city"
NO_UPCOMING_IN_CITY = "no_upcoming_in_city"
MISSING_REQUIRED_FIELDS = "missing_required_fields"

ADD_DATE_HINT = "More upcoming events found in this city; add a date to narrow the match."


@dataclass
class ResolveOutcome:
    confidence: str
    reason: str
    mode: str
    events: List[EventRecord] = field(default_factory=list)
    hint: Optional[str] = None
    queries_run: int = 0


class EventResolver:
    """Two-tier search: exact date first when usable, then upcoming events in the city."""

    def __init__(self, store: EventStore):
        if store is None:
            raise ValueError("store is required")
        self.store = store

    def resolve(
        self,
        *,
        tokens: Sequence[str],
        city_norms: Sequence[str],
        state_norms: Sequence[str] = (),
        date_day: Optional[date] = None,
        time_24: Optional[str] = None,
        today: date,
    ) -> ResolveOutcome:
        queries_run = 0
        if date_day is not None and date_day >= today:
            events, ran = self._first_hit(self.exact_queries(tokens, city_norms, state_norms, date_day))
            queries_run += ran
            if events:
                events = self._tie_break(events, time_24)
                single = len(events) == 1
                return ResolveOutcome(
                    confidence=HIGH if single else MEDIUM,
                    reason=EXACT_OR_TIEBROKEN if single else MULTIPLE,
                    mode=EXACT,
                    events=events,
                    queries_run=queries_run,
                )

        events, ran = self._first_hit(self.upcoming_queries(tokens, city_norms, state_norms, today))
        queries_run += ran
        if not events:
            return ResolveOutcome(
                confidence=LOW, reason=NO_UPCOMING_IN_CITY, mode=UPCOMING, queries_run=queries_run
            )
        hint = None
        if len(events) > UPCOMING_KEEP:
            events = events[:UPCOMING_KEEP]
            hint = ADD_DATE_HINT
        return ResolveOutcome(
            confidence=MEDIUM,
            reason=UPCOMING_IN_CITY,
            mode=UPCOMING,
            events=events,
            hint=hint,
            queries_run=queries_run,
        )

    def exact_queries(
        self,
        tokens: Sequence[str],
        city_norms: Sequence[str],
        state_norms: Sequence[str],
        date_day: date,
    ) -> List[EventQuery]:
        return [
            EventQuery(
                city_norms=tuple(city_norms),
                tokens=tuple(variant),
                match_on=match_on,
                date_day=date_day,
                state_norms=tuple(state_norms),
                limit=EXACT_LIMIT,
            )
            for variant in build_word_variants(list(tokens), EXACT)
            for match_on in (MATCH_PERFORMER, MATCH_EVENT_NAME)
        ]

    def upcoming_queries(
        self,
        tokens: Sequence[str],
        city_norms: Sequence[str],
        state_norms: Sequence[str],
        today: date,
    ) -> List[EventQuery]:
        return [
            EventQuery(
                city_norms=tuple(city_norms),
                tokens=tuple(variant),
                match_on=match_on,
                date_from=today,
                state_norms=tuple(state_norms),
                exclude_parking=True,
                limit=UPCOMING_LIMIT,
            )
            for variant in build_word_variants(list(tokens), UPCOMING)
            for match_on in (MATCH_PERFORMER, MATCH_EVENT_NAME)
        ]

    def _first_hit(self, queries: List[EventQuery]) -> Tuple[List[EventRecord], int]:
        for count, query in enumerate(queries, start=1):
            events = self.store.find_events(query)
            if events:
                return list(events), count
        return [], len(queries)

    @staticmethod
    def _tie_break(events: List[EventRecord], time_24: Optional[str]) -> List[EventRecord]:
        if len(events) <= 1 or not time_24:
            return events
        same_time = [event for event in events if (event.time_24 or "") == time_24]
        return same_time or events
