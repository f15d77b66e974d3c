from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from .models import EventRecord, OfferRecord

OFFER_LABELS = {
    "base": "Base price (excl. fees & taxes)",
    "est": "Est. after promo (excl. fees & taxes)",
}

_TIME_24 = re.compile(r"^(\d{2}):(\d{2})$")


def money(cents: Optional[int]) -> Optional[str]:
    if cents is None:
        return None
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))


def est_after_promo(price_min: Optional[int], promo_percent: Optional[int]) -> Optional[int]:
    if price_min is None:
        return None
    percent = promo_percent or 0
    estimate = Decimal(price_min) * (1 - Decimal(percent) / 100)
    return int(estimate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_time12(time_24: Optional[str]) -> Optional[str]:
    if not time_24:
        return None
    match = _TIME_24.match(time_24)
    if not match:
        return None
    hour = int(match.group(1))
    suffix = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour}:{match.group(2)} {suffix}"


def _sort_key(offer: OfferRecord):
    estimate = est_after_promo(offer.price_min, offer.promo_percent)
    effective = estimate if estimate is not None else offer.price_min
    if effective is None:
        return (1, 0)
    return (0, effective)


def sort_offers(offers: Iterable[OfferRecord]) -> List[OfferRecord]:
    """Cheapest effective price first; offers without any price last."""
    return sorted(offers, key=_sort_key)


def present_offer(offer: OfferRecord) -> dict:
    return {
        "source": offer.source,
        "url": offer.url,
        "tickets_yn": offer.tickets_yn,
        "base_price_min": money(offer.price_min),
        "base_price_max": money(offer.price_max),
        "promo_percent": offer.promo_percent,
        "promo_code": offer.promo_code,
        "est_after_promo": money(est_after_promo(offer.price_min, offer.promo_percent)),
        "labels": dict(OFFER_LABELS),
    }


def aggregate_availability(offers: Iterable[OfferRecord]) -> Optional[bool]:
    flags = [offer.tickets_yn for offer in offers]
    if any(flag is True for flag in flags):
        return True
    if any(flag is False for flag in flags):
        return False
    return None


def present_event(event: EventRecord) -> dict:
    return {
        "event_id": event.id,
        "event_name": event.event_name,
        "date_day": event.date_day.isoformat(),
        "time_24": event.time_24,
        "time_12": to_time12(event.time_24),
        "city": event.city,
        "state": event.state,
        "venue": event.venue,
        "performers": [name for name in event.performer_names if name],
        "tickets_yn": aggregate_availability(event.offers),
        "offers": [present_offer(offer) for offer in sort_offers(event.offers)],
    }
