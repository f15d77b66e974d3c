from __future__ import annotations

from datetime import date, timedelta

import pytest

from ticketmatch.domain.queries import MATCH_EVENT_NAME, MATCH_PERFORMER, EventQuery
from ticketmatch.infra.db.events_repository import EventsRepository

DAY = date(2026, 11, 20)


def test_all_tokens_must_hit_the_same_performer(engine, seed_event):
    seed_event(
        "evt-split",
        name="Country Night",
        day=DAY,
        city="Austin",
        performers=[("p-top", "Zach Top"), ("p-luke", "Luke Bryan")],
    )
    repo = EventsRepository(engine)
    query = EventQuery(city_norms=("austin",), tokens=("zach", "bryan"), date_day=DAY)
    assert repo.find_events(query) == []
    single = EventQuery(city_norms=("austin",), tokens=("bryan",), date_day=DAY)
    [event] = repo.find_events(single)
    assert event.performer_names == ("Luke Bryan", "Zach Top")


def test_event_name_match_is_case_insensitive(engine, seed_event):
    seed_event("evt-1", name="ZACH BRYAN: The Quittin Time Tour", day=DAY, city="Austin")
    repo = EventsRepository(engine)
    query = EventQuery(city_norms=("austin",), tokens=("zach", "quittin"), match_on=MATCH_EVENT_NAME, date_day=DAY)
    assert [e.id for e in repo.find_events(query)] == ["evt-1"]
    by_performer = EventQuery(city_norms=("austin",), tokens=("zach",), match_on=MATCH_PERFORMER, date_day=DAY)
    assert repo.find_events(by_performer) == []


def test_event_name_match_uses_normalized_name(engine, seed_event):
    seed_event("evt-1", name="Beyoncé: Renaissance", day=DAY, city="Houston")
    repo = EventsRepository(engine)
    query = EventQuery(city_norms=("houston",), tokens=("beyonce",), match_on=MATCH_EVENT_NAME, date_day=DAY)
    assert [e.id for e in repo.find_events(query)] == ["evt-1"]


def test_upcoming_ordering_limit_and_lower_bound(engine, seed_event):
    performers = [("p-1", "Hozier")]
    seed_event("evt-past", name="Hozier", day=DAY - timedelta(days=1), city="Denver", performers=performers)
    seed_event("evt-notime", name="Hozier", day=DAY, city="Denver", time_24=None, performers=performers)
    seed_event("evt-late", name="Hozier", day=DAY, city="Denver", time_24="21:00", performers=performers)
    seed_event("evt-early", name="Hozier", day=DAY, city="Denver", time_24="19:00", performers=performers)
    seed_event("evt-next", name="Hozier", day=DAY + timedelta(days=1), city="Denver", performers=performers)
    repo = EventsRepository(engine)
    query = EventQuery(city_norms=("denver",), tokens=("hozier",), date_from=DAY, limit=3)
    assert [e.id for e in repo.find_events(query)] == ["evt-early", "evt-late", "evt-notime"]


def test_state_and_city_membership_filters(engine, seed_event):
    seed_event("evt-tx", name="Hozier", day=DAY, city="Fort Worth", state="TX", performers=[("p-1", "Hozier")])
    seed_event("evt-ok", name="Hozier", day=DAY, city="Fort Worth", state="Oklahoma", performers=[("p-1", "Hozier")])
    repo = EventsRepository(engine)
    base = dict(city_norms=("ft worth", "fort worth"), tokens=("hozier",), date_day=DAY)
    assert {e.id for e in repo.find_events(EventQuery(**base))} == {"evt-tx", "evt-ok"}
    assert [e.id for e in repo.find_events(EventQuery(**base, state_norms=("ok", "oklahoma")))] == ["evt-ok"]


def test_parking_exclusion(engine, seed_event):
    seed_event("evt-park", name="Parking: Hozier", day=DAY, city="Denver", performers=[("p-1", "Hozier")])
    repo = EventsRepository(engine)
    query = EventQuery(city_norms=("denver",), tokens=("hozier",), date_from=DAY, exclude_parking=True)
    assert repo.find_events(query) == []


def test_offers_are_attached(engine, seed_event):
    seed_event(
        "evt-1",
        name="Hozier",
        day=DAY,
        city="Denver",
        performers=[("p-1", "Hozier")],
        offers=[{"source": "tn", "price_min": 5000}, {"source": "geturtix", "price_min": 6000, "promo_percent": 20}],
    )
    [event] = EventsRepository(engine).find_events(
        EventQuery(city_norms=("denver",), tokens=("hozier",), date_day=DAY)
    )
    assert {o.source for o in event.offers} == {"tn", "geturtix"}
    assert event.date_day == DAY


def test_empty_filters_short_circuit(engine):
    repo = EventsRepository(engine)
    assert repo.find_events(EventQuery(city_norms=(), tokens=("x",))) == []
    assert repo.find_events(EventQuery(city_norms=("austin",), tokens=())) == []


def test_repository_requires_engine():
    with pytest.raises(ValueError):
        EventsRepository(None)
