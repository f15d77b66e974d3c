import json
import os
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from sqlalchemy import create_engine

from ticketmatch.domain.lookups import load_matching_tables
from ticketmatch.infra.db.events_repository import EventsRepository
from ticketmatch.jobs.import_feed import import_feed_csv
from ticketmatch.jobs.set_promo import set_promo
from ticketmatch.services.match_service import MatchService

app = typer.Typer(help="CLI for the ticket event matcher")


def _engine(database_url: Optional[str]):
    url = database_url or os.getenv("DATABASE_URL")
    if not url:
        typer.echo("DATABASE_URL must be provided via --database-url or env", err=True)
        raise typer.Exit(code=2)
    return create_engine(url, future=True)


@app.command("match")
def cli_match(
    performer: Optional[str] = typer.Option(None, help="Performer text"),
    title: Optional[str] = typer.Option(None, help="Page title, used when no performer is given"),
    city: Optional[str] = typer.Option(None, help="City"),
    state: Optional[str] = typer.Option(None, help="State abbreviation or name"),
    day: Optional[str] = typer.Option(None, "--date", help="Date YYYY-MM-DD"),
    time_24: Optional[str] = typer.Option(None, "--time", help="Time HH:mm"),
    database_url: Optional[str] = typer.Option(None, help="SQLAlchemy database URL"),
):
    try:
        date_day = date.fromisoformat(day) if day else None
    except ValueError:
        raise typer.BadParameter("date must be YYYY-MM-DD", param_hint="--date") from None
    service = MatchService(EventsRepository(_engine(database_url)), load_matching_tables())
    response = service.match(
        performer_query=performer,
        raw_title=title,
        city=city,
        state=state,
        date_day=date_day,
        time_24=time_24,
    )
    typer.echo(json.dumps(response, indent=2))


@app.command("import-feed")
def cli_import_feed(
    source: str = typer.Argument(..., help="Feed source: geturtix, tn, tl or sbs"),
    path: Path = typer.Argument(..., help="Path to the feed CSV"),
    database_url: Optional[str] = typer.Option(None, help="SQLAlchemy database URL"),
):
    import_feed_csv(source, path, engine=_engine(database_url))


@app.command("set-promo")
def cli_set_promo(
    source: str = typer.Argument(..., help="Offer source"),
    percent: Optional[int] = typer.Option(None, help="Promo percent 0-100"),
    code: Optional[str] = typer.Option(None, help="Promo code"),
    database_url: Optional[str] = typer.Option(None, help="SQLAlchemy database URL"),
):
    set_promo(source, percent, code, engine=_engine(database_url))


if __name__ == "__main__":
    app()
