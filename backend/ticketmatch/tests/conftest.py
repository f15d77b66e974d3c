from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine, insert, select

from ticketmatch.domain.text import normalize_text
from ticketmatch.infra.db.tables import (
    event_performers_table,
    events_table,
    metadata,
    offers_table,
    performers_table,
)


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ticketmatch.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)


@pytest.fixture()
def seed_event(engine):
    """Insert one event with its performers and offers; returns the event id."""

    def _seed(
        event_id: str,
        *,
        name: str,
        day: date,
        city: str,
        state: str | None = "TX",
        time_24: str | None = "20:00",
        venue: str | None = "Moody Center",
        performers: list[tuple[str, str]] | None = None,
        offers: list[dict] | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        with engine.begin() as conn:
            conn.execute(
                insert(events_table).values(
                    id=event_id,
                    event_name=name,
                    event_name_norm=normalize_text(name),
                    date_day=day,
                    time_24=time_24,
                    city=city,
                    city_norm=normalize_text(city),
                    state=state,
                    state_norm=normalize_text(state),
                    venue=venue,
                    venue_norm=normalize_text(venue),
                    country="US",
                    created_at=now,
                    updated_at=now,
                )
            )
            for performer_id, performer_name in performers or []:
                known = conn.execute(
                    select(performers_table.c.id).where(performers_table.c.id == performer_id)
                ).scalar_one_or_none()
                if known is None:
                    conn.execute(
                        insert(performers_table).values(
                            id=performer_id,
                            name=performer_name,
                            performer_norm=normalize_text(performer_name),
                        )
                    )
                conn.execute(
                    insert(event_performers_table).values(event_id=event_id, performer_id=performer_id)
                )
            for offer in offers or []:
                conn.execute(
                    insert(offers_table).values(
                        event_id=event_id,
                        url=offer.get("url", f"https://example.com/{offer['source']}/{event_id}"),
                        last_seen_at=now,
                        **{k: v for k, v in offer.items() if k != "url"},
                    )
                )
        return event_id

    return _seed
