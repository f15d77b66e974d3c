from __future__ import annotations

import csv
import os
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import typer
from sqlalchemy import create_engine

from ticketmatch.domain.canonical import FeedRow, parse_source
from ticketmatch.infra.db.tables import metadata
from ticketmatch.services.feed_upsert import FeedUpsertService

app = typer.Typer(help="Import a ticket feed CSV into the event store")
DEFAULT_DATA_DIR = Path(os.getenv("IMPORT_DATA_DIR", "/data"))
BATCH_SIZE = 1000

_US_DATETIME = re.compile(r"^(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2})$")


def import_feed_csv(
    source: str,
    path: str | Path,
    *,
    engine=None,
    database_url: Optional[str] = None,
    master_source: Optional[str] = None,
    batch_size: int = BATCH_SIZE,
) -> dict:
    feed_source = parse_source(source).value
    feed_path = _resolve_feed_path(path)

    if engine is None:
        if database_url is None:
            database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL required if engine not provided")
        engine = create_engine(database_url, future=True)
    metadata.create_all(engine)
    service = FeedUpsertService(engine, master_source=master_source)

    totals = {"processed": 0, "skipped": 0, "events_inserted": 0, "offers_inserted": 0}
    batch: List[FeedRow] = []
    for row in _read_csv(feed_path):
        parsed = parse_feed_row(row)
        if parsed is None:
            totals["skipped"] += 1
            continue
        batch.append(parsed)
        if len(batch) >= batch_size:
            _flush(service, feed_source, batch, totals)
            print(f"[import_feed] source={feed_source} processed={totals['processed']}")
            batch = []
    if batch:
        _flush(service, feed_source, batch, totals)

    print(
        f"[import_feed] Import complete source={feed_source} file={feed_path} "
        f"processed={totals['processed']} skipped={totals['skipped']} "
        f"events_inserted={totals['events_inserted']} offers_inserted={totals['offers_inserted']}"
    )
    return totals


@app.command()
def run(
    source: str = typer.Argument(..., help="Feed source: geturtix, tn, tl or sbs"),
    path: Path = typer.Argument(..., help="Path to the feed CSV"),
):
    """CLI entrypoint for importing one feed file."""
    import_feed_csv(source, path)


def parse_feed_row(row: Dict[str, str]) -> Optional[FeedRow]:
    event_id = row.get("EventID") or ""
    performer_id = row.get("PerformerID") or ""
    datetime_raw = row.get("DateTime") or ""
    url = row.get("URLLink") or ""
    if not event_id or not performer_id or not datetime_raw or not url:
        return None
    parsed = parse_datetime_us(datetime_raw)
    if parsed is None:
        return None
    date_day, time_24 = parsed
    price_range_raw = row.get("PriceRange") or ""
    price_min, price_max = parse_price_range(price_range_raw)
    return FeedRow(
        event_id=event_id,
        performer_id=performer_id,
        url=url,
        date_day=date_day,
        time_24=time_24,
        datetime_raw=datetime_raw,
        performer_name=row.get("Performer") or None,
        event_name=row.get("Event") or None,
        city=row.get("City") or None,
        state=row.get("State") or None,
        country=row.get("Country") or None,
        venue=row.get("Venue") or None,
        price_min=price_min,
        price_max=price_max,
        price_range_raw=price_range_raw,
        tickets_yn=yn_to_bool(row.get("TicketsYN")),
    )


def parse_datetime_us(value: str) -> Optional[Tuple[date, str]]:
    """``"05/14/2021 19:30"`` -> ``(date(2021, 5, 14), "19:30")``."""
    match = _US_DATETIME.match((value or "").strip())
    if not match:
        return None
    month, day, year, hour, minute = match.groups()
    try:
        day_value = date(int(year), int(month), int(day))
    except ValueError:
        return None
    return day_value, f"{hour}:{minute}"


def parse_price_range(value: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """``"$699.00-$1,329.71"`` -> ``(69900, 132971)`` in cents."""
    if not value:
        return None, None
    parts = value.strip().split("-")
    left = parts[0] if parts else ""
    right = parts[1] if len(parts) > 1 else ""
    return _to_cents(left), _to_cents(right)


def _to_cents(amount: str) -> Optional[int]:
    cleaned = amount.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        cents = Decimal(cleaned) * 100
    except InvalidOperation:
        return None
    if not cents.is_finite():
        return None
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def yn_to_bool(value: Optional[str]) -> Optional[bool]:
    flag = (value or "").strip().upper()
    if flag == "Y":
        return True
    if flag == "N":
        return False
    return None


def _flush(service: FeedUpsertService, source: str, batch: List[FeedRow], totals: dict) -> None:
    stats = service.upsert_rows(source, batch)
    totals["processed"] += stats["total"]
    totals["events_inserted"] += stats["events"]["inserted"]
    totals["offers_inserted"] += stats["offers"]["inserted"]


def _resolve_feed_path(path: str | Path) -> Path:
    candidate = Path(path)
    if not candidate.is_absolute() and not candidate.exists():
        candidate = DEFAULT_DATA_DIR / candidate
    if not candidate.exists():
        raise FileNotFoundError(f"Feed file not found: {path}")
    return candidate


def _read_csv(path: Path) -> Iterator[Dict[str, str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            yield {k: (v.strip() if isinstance(v, str) else v) for k, v in row.items()}


if __name__ == "__main__":
    app()
