from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Mapping, Optional

from ticketmatch.domain.cities import city_variants
from ticketmatch.domain.links import BROWSE_URL_TEMPLATES, browse_links, slugify
from ticketmatch.domain.lookups import MatchingTables
from ticketmatch.domain.offers import present_event
from ticketmatch.domain.performers import PerformerPick, clean_performer, performer_tokens, pick_performer
from ticketmatch.domain.queries import EventStore
from ticketmatch.domain.states import normalize_state
from ticketmatch.infra.log import get_logger

from .event_resolver import HIGH, LOW, MISSING_REQUIRED_FIELDS, EventResolver

log = get_logger(__name__)

MISSING_FIELDS_HINT = "Need performer_query (or raw_title) + city. State, date_day and time_24 are optional."


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class MatchService:
    def __init__(
        self,
        store: EventStore,
        tables: MatchingTables,
        *,
        clock: Optional[Callable[[], date]] = None,
        link_templates: Mapping[str, str] = BROWSE_URL_TEMPLATES,
    ):
        if tables is None:
            raise ValueError("tables are required")
        self.resolver = EventResolver(store)
        self.tables = tables
        self.clock = clock or utc_today
        self.link_templates = link_templates

    def match(
        self,
        *,
        performer_query: Optional[str] = None,
        raw_title: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        date_day: Optional[date] = None,
        time_24: Optional[str] = None,
    ) -> dict:
        pick = pick_performer(performer_query, raw_title)
        tokens = performer_tokens(pick.text) if pick else []
        cities = city_variants(city, self.tables.city_aliases)
        state_filter = normalize_state(state, self.tables.states)
        state_norms = state_filter.store_values() if state_filter else ()

        if not cities or not tokens:
            log.info(
                "match.missing_fields",
                has_city=bool(cities),
                has_tokens=bool(tokens),
                performer_source=pick.source if pick else None,
            )
            response = {
                "confidence": LOW,
                "reason": MISSING_REQUIRED_FIELDS,
                "matches": [],
                "hint": MISSING_FIELDS_HINT,
            }
            if pick:
                response["fallback"] = self._fallback(pick)
            return response

        today = self.clock()
        outcome = self.resolver.resolve(
            tokens=tokens,
            city_norms=cities,
            state_norms=state_norms,
            date_day=date_day,
            time_24=time_24,
            today=today,
        )
        log.info(
            "match.resolved",
            mode=outcome.mode,
            confidence=outcome.confidence,
            reason=outcome.reason,
            matches=len(outcome.events),
            queries=outcome.queries_run,
            tokens=tokens,
            cities=cities,
            state_filtered=bool(state_norms),
        )
        response = {
            "confidence": outcome.confidence,
            "reason": outcome.reason,
            "matches": [present_event(event) for event in outcome.events],
        }
        if outcome.hint:
            response["hint"] = outcome.hint
        if outcome.confidence != HIGH:
            response["fallback"] = self._fallback(pick)
        return response

    def _fallback(self, pick: PerformerPick) -> dict:
        name = clean_performer(pick.text) or pick.text
        return {
            "performer_input": pick.text,
            "performer_source": pick.source,
            "performer_slug": slugify(name),
            "links": browse_links(name, self.link_templates),
        }
