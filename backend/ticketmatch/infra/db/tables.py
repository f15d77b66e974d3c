from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

events_table = Table(
    "events",
    metadata,
    Column("id", Text, primary_key=True),
    Column("event_name", Text),
    Column("event_name_norm", Text),
    Column("date_day", Date, nullable=False),
    Column("time_24", Text),
    Column("datetime_raw", Text),
    Column("city", Text),
    Column("city_norm", Text),
    Column("state", Text),
    Column("state_norm", Text),
    Column("venue", Text),
    Column("venue_norm", Text),
    Column("country", Text),
    Column("tickets_yn", Boolean, default=True),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Index("ix_events_date_city_state", "date_day", "city_norm", "state_norm"),
)

performers_table = Table(
    "performers",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text),
    Column("performer_norm", Text, index=True),
)

event_performers_table = Table(
    "event_performers",
    metadata,
    Column("event_id", Text, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("performer_id", Text, ForeignKey("performers.id", ondelete="CASCADE"), primary_key=True, index=True),
)

offers_table = Table(
    "offers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source", Text, nullable=False),
    Column("event_id", Text, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("url", Text, nullable=False),
    Column("price_min", Integer),
    Column("price_max", Integer),
    Column("price_range_raw", Text),
    Column("tickets_yn", Boolean),
    Column("promo_percent", Integer),
    Column("promo_code", Text),
    Column("last_seen_at", DateTime(timezone=True)),
    UniqueConstraint("source", "event_id", name="uq_offers_source_event"),
)
