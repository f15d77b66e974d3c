from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection, Engine

from ticketmatch.domain.canonical import FeedRow
from ticketmatch.domain.text import normalize_text
from ticketmatch.infra.db.tables import event_performers_table, events_table, offers_table, performers_table

DEFAULT_MASTER_SOURCE = os.getenv("MASTER_SOURCE", "geturtix")


class FeedUpsertService:
    """Writes feed rows into the store.

    Only the master source may overwrite canonical event fields; any other
    source creates an event when it is missing and otherwise leaves it alone.
    Offers are keyed by (source, event) and never touch promo fields.
    """

    def __init__(self, engine: Engine, *, master_source: Optional[str] = None):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine
        self.master_source = (master_source or DEFAULT_MASTER_SOURCE).lower()

    def upsert_rows(self, source: str, rows: Iterable[FeedRow]) -> dict:
        stats = {
            "events": {"inserted": 0, "updated": 0, "kept": 0},
            "performers": {"inserted": 0, "updated": 0},
            "offers": {"inserted": 0, "updated": 0},
            "total": 0,
        }
        is_master = source.lower() == self.master_source
        with self.engine.begin() as conn:
            for row in rows:
                now = datetime.now(timezone.utc)
                stats["events"][self._upsert_event(conn, row, is_master, now)] += 1
                stats["performers"][self._upsert_performer(conn, row)] += 1
                self._ensure_link(conn, row)
                stats["offers"][self._upsert_offer(conn, source, row, now)] += 1
                stats["total"] += 1
        return stats

    def _upsert_event(self, conn: Connection, row: FeedRow, is_master: bool, now: datetime) -> str:
        exists = conn.execute(
            select(events_table.c.id).where(events_table.c.id == row.event_id)
        ).scalar_one_or_none()
        if exists is None:
            conn.execute(
                insert(events_table).values(
                    id=row.event_id,
                    **self._event_payload(row, keep_empty=True),
                    created_at=now,
                    updated_at=now,
                )
            )
            return "inserted"
        if not is_master:
            return "kept"
        conn.execute(
            update(events_table)
            .where(events_table.c.id == row.event_id)
            .values(**self._event_payload(row, keep_empty=False), updated_at=now)
        )
        return "updated"

    @staticmethod
    def _event_payload(row: FeedRow, *, keep_empty: bool) -> dict:
        payload = {
            "date_day": row.date_day,
            "time_24": row.time_24,
            "datetime_raw": row.datetime_raw,
        }
        optional = {
            "event_name": row.event_name or None,
            "event_name_norm": normalize_text(row.event_name),
            "city": row.city or None,
            "city_norm": normalize_text(row.city),
            "state": row.state or None,
            "state_norm": normalize_text(row.state),
            "country": row.country or None,
            "venue": row.venue or None,
            "venue_norm": normalize_text(row.venue),
        }
        for key, value in optional.items():
            if keep_empty or value is not None:
                payload[key] = value
        return payload

    @staticmethod
    def _upsert_performer(conn: Connection, row: FeedRow) -> str:
        exists = conn.execute(
            select(performers_table.c.id).where(performers_table.c.id == row.performer_id)
        ).scalar_one_or_none()
        name = row.performer_name or None
        if exists is None:
            conn.execute(
                insert(performers_table).values(
                    id=row.performer_id, name=name, performer_norm=normalize_text(name)
                )
            )
            return "inserted"
        if name:
            conn.execute(
                update(performers_table)
                .where(performers_table.c.id == row.performer_id)
                .values(name=name, performer_norm=normalize_text(name))
            )
        return "updated"

    @staticmethod
    def _ensure_link(conn: Connection, row: FeedRow) -> None:
        linked = conn.execute(
            select(func.count())
            .select_from(event_performers_table)
            .where(
                event_performers_table.c.event_id == row.event_id,
                event_performers_table.c.performer_id == row.performer_id,
            )
        ).scalar_one()
        if not linked:
            conn.execute(
                insert(event_performers_table).values(event_id=row.event_id, performer_id=row.performer_id)
            )

    @staticmethod
    def _upsert_offer(conn: Connection, source: str, row: FeedRow, now: datetime) -> str:
        existing_id = conn.execute(
            select(offers_table.c.id).where(
                (offers_table.c.source == source) & (offers_table.c.event_id == row.event_id)
            )
        ).scalar_one_or_none()
        values = {
            "url": row.url,
            "price_min": row.price_min,
            "price_max": row.price_max,
            "price_range_raw": row.price_range_raw,
            "last_seen_at": now,
        }
        if existing_id is None:
            conn.execute(
                insert(offers_table).values(
                    source=source, event_id=row.event_id, tickets_yn=row.tickets_yn, **values
                )
            )
            return "inserted"
        if row.tickets_yn is not None:
            values["tickets_yn"] = row.tickets_yn
        conn.execute(update(offers_table).where(offers_table.c.id == existing_id).values(**values))
        return "updated"

    def set_promo(self, source: str, percent: Optional[int], code: Optional[str]) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(
                update(offers_table)
                .where(func.lower(offers_table.c.source) == source.lower())
                .values(promo_percent=percent, promo_code=code)
            )
        return result.rowcount or 0
