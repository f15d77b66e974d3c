from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class Source(str, Enum):
    GETURTIX = "geturtix"
    TN = "tn"
    TL = "tl"
    SBS = "sbs"


@dataclass(frozen=True)
class OfferRecord:
    source: str
    event_id: str
    url: str
    price_min: Optional[int] = None
    price_max: Optional[int] = None
    price_range_raw: Optional[str] = None
    tickets_yn: Optional[bool] = None
    promo_percent: Optional[int] = None
    promo_code: Optional[str] = None
    last_seen_at: Optional[datetime] = None


@dataclass(frozen=True)
class EventRecord:
    id: str
    event_name: Optional[str]
    date_day: date
    time_24: Optional[str] = None
    city: Optional[str] = None
    city_norm: Optional[str] = None
    state: Optional[str] = None
    state_norm: Optional[str] = None
    venue: Optional[str] = None
    country: Optional[str] = None
    performer_names: Tuple[str, ...] = ()
    offers: Tuple[OfferRecord, ...] = field(default_factory=tuple)
