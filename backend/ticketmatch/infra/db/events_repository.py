from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import exists, or_, select
from sqlalchemy.engine import Connection, Engine

from ticketmatch.domain.models import EventRecord, OfferRecord
from ticketmatch.domain.queries import MATCH_EVENT_NAME, MATCH_PERFORMER, EventQuery

from .tables import event_performers_table, events_table, offers_table, performers_table


class EventsRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def find_events(self, query: EventQuery) -> List[EventRecord]:
        if not query.city_norms or not query.tokens:
            return []
        stmt = (
            select(events_table)
            .where(*self._filters(query))
            .order_by(
                events_table.c.date_day,
                events_table.c.time_24.is_(None),
                events_table.c.time_24,
                events_table.c.id,
            )
        )
        if query.limit:
            stmt = stmt.limit(query.limit)
        with self.engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
            if not rows:
                return []
            event_ids = [row["id"] for row in rows]
            offers = self._offers_by_event(conn, event_ids)
            performers = self._performer_names_by_event(conn, event_ids)
        return [
            self._to_record(dict(row), offers.get(row["id"], []), performers.get(row["id"], []))
            for row in rows
        ]

    def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        with self.engine.begin() as conn:
            row = conn.execute(select(events_table).where(events_table.c.id == event_id)).mappings().first()
        return dict(row) if row else None

    def _filters(self, query: EventQuery) -> list:
        filters = [events_table.c.city_norm.in_(query.city_norms)]
        if query.date_day is not None:
            filters.append(events_table.c.date_day == query.date_day)
        if query.date_from is not None:
            filters.append(events_table.c.date_day >= query.date_from)
        if query.state_norms:
            filters.append(events_table.c.state_norm.in_(query.state_norms))
        event_name = events_table.c.event_name_norm
        if query.exclude_parking:
            filters.append(or_(event_name.is_(None), ~event_name.contains("parking")))
        if query.match_on == MATCH_PERFORMER:
            filters.append(self._linked_performer_matches(query.tokens))
        elif query.match_on == MATCH_EVENT_NAME:
            filters.extend(event_name.contains(token) for token in query.tokens)
        else:
            raise ValueError(f"unsupported match target: {query.match_on}")
        return filters

    @staticmethod
    def _linked_performer_matches(tokens: Sequence[str]):
        join_stmt = event_performers_table.join(
            performers_table, event_performers_table.c.performer_id == performers_table.c.id
        )
        return exists(
            select(event_performers_table.c.event_id)
            .select_from(join_stmt)
            .where(
                event_performers_table.c.event_id == events_table.c.id,
                *[performers_table.c.performer_norm.contains(token) for token in tokens],
            )
        )

    @staticmethod
    def _offers_by_event(conn: Connection, event_ids: List[str]) -> Dict[str, List[OfferRecord]]:
        rows = conn.execute(
            select(offers_table).where(offers_table.c.event_id.in_(event_ids)).order_by(offers_table.c.source)
        ).mappings().all()
        grouped: Dict[str, List[OfferRecord]] = defaultdict(list)
        for row in rows:
            grouped[row["event_id"]].append(
                OfferRecord(
                    source=row["source"],
                    event_id=row["event_id"],
                    url=row["url"],
                    price_min=row["price_min"],
                    price_max=row["price_max"],
                    price_range_raw=row["price_range_raw"],
                    tickets_yn=row["tickets_yn"],
                    promo_percent=row["promo_percent"],
                    promo_code=row["promo_code"],
                    last_seen_at=row["last_seen_at"],
                )
            )
        return grouped

    @staticmethod
    def _performer_names_by_event(conn: Connection, event_ids: List[str]) -> Dict[str, List[str]]:
        join_stmt = event_performers_table.join(
            performers_table, event_performers_table.c.performer_id == performers_table.c.id
        )
        rows = conn.execute(
            select(event_performers_table.c.event_id, performers_table.c.name)
            .select_from(join_stmt)
            .where(event_performers_table.c.event_id.in_(event_ids))
            .order_by(performers_table.c.name)
        ).all()
        grouped: Dict[str, List[str]] = defaultdict(list)
        for event_id, name in rows:
            if name:
                grouped[event_id].append(name)
        return grouped

    @staticmethod
    def _to_record(row: Dict[str, Any], offers: List[OfferRecord], performer_names: List[str]) -> EventRecord:
        return EventRecord(
            id=row["id"],
            event_name=row.get("event_name"),
            date_day=row["date_day"],
            time_24=row.get("time_24"),
            city=row.get("city"),
            city_norm=row.get("city_norm"),
            state=row.get("state"),
            state_norm=row.get("state_norm"),
            venue=row.get("venue"),
            country=row.get("country"),
            performer_names=tuple(performer_names),
            offers=tuple(offers),
        )
