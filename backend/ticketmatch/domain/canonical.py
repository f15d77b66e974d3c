from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .models import Source


@dataclass
class FeedRow:
    """One row of a ticket feed, already parsed into store units."""

    event_id: str
    performer_id: str
    url: str
    date_day: date
    time_24: str
    datetime_raw: str
    performer_name: Optional[str] = None
    event_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    venue: Optional[str] = None
    price_min: Optional[int] = None
    price_max: Optional[int] = None
    price_range_raw: Optional[str] = None
    tickets_yn: Optional[bool] = None

    def __post_init__(self):
        if not self.event_id or not self.performer_id:
            raise ValueError("event_id and performer_id are required")
        if not self.url:
            raise ValueError("url is required")


def parse_source(value: str) -> Source:
    try:
        return Source(value.strip().lower())
    except ValueError:
        allowed = ", ".join(source.value for source in Source)
        raise ValueError(f"unknown source {value!r}; expected one of {allowed}") from None
