from __future__ import annotations

import os
from typing import Optional

import typer
from sqlalchemy import create_engine

from ticketmatch.domain.canonical import parse_source
from ticketmatch.services.feed_upsert import FeedUpsertService

app = typer.Typer(help="Apply a promo code to every offer of one source")


def set_promo(
    source: str,
    percent: Optional[int],
    code: Optional[str],
    *,
    engine=None,
    database_url: Optional[str] = None,
) -> int:
    if percent is not None and not 0 <= percent <= 100:
        raise ValueError("percent must be between 0 and 100")
    feed_source = parse_source(source).value
    if engine is None:
        if database_url is None:
            database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL required if engine not provided")
        engine = create_engine(database_url, future=True)
    updated = FeedUpsertService(engine).set_promo(feed_source, percent, code)
    print(f"[set_promo] source={feed_source} percent={percent} code={code} updated={updated}")
    return updated


@app.command()
def run(
    source: str = typer.Argument(..., help="Offer source"),
    percent: Optional[int] = typer.Option(None, help="Promo percent 0-100"),
    code: Optional[str] = typer.Option(None, help="Promo code shown to users"),
):
    set_promo(source, percent, code)


if __name__ == "__main__":
    app()
