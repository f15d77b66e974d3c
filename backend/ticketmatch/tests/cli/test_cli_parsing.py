import json
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from typer.testing import CliRunner

from ticketmatch.cli.main import app
from ticketmatch.infra.db.tables import offers_table

HEADER = "EventID,PerformerID,Performer,Event,City,State,Country,Venue,DateTime,URLLink,PriceRange,TicketsYN\n"


def _db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'ticketmatch.db'}"


def test_match_command_prints_json(engine, seed_event, tmp_path):
    day = datetime.now(timezone.utc).date() + timedelta(days=10)
    seed_event("evt-1", name="Hozier", day=day, city="Denver", state="CO", performers=[("p-1", "Hozier")])
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["match", "--performer", "Hozier", "--city", "Denver", "--date", day.isoformat(), "--database-url", _db_url(tmp_path)],
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["confidence"] == "high"
    assert payload["matches"][0]["event_id"] == "evt-1"


def test_match_command_rejects_bad_date(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        app, ["match", "--performer", "Hozier", "--city", "Denver", "--date", "20/11/2026", "--database-url", _db_url(tmp_path)]
    )
    assert result.exit_code != 0


def test_match_command_requires_database(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    runner = CliRunner()
    result = runner.invoke(app, ["match", "--performer", "Hozier", "--city", "Denver"])
    assert result.exit_code == 2


def test_import_and_promo_commands(engine, tmp_path):
    feed = tmp_path / "tn.csv"
    feed.write_text(
        HEADER + "E1,P1,Hozier,Hozier,Denver,CO,US,Ball Arena,11/20/2026 19:30,https://tn.test/e1,$80.00-$120.00,Y\n",
        encoding="utf-8",
    )
    runner = CliRunner()
    imported = runner.invoke(app, ["import-feed", "tn", str(feed), "--database-url", _db_url(tmp_path)])
    assert imported.exit_code == 0
    assert "processed=1" in imported.stdout

    promo = runner.invoke(
        app, ["set-promo", "tn", "--percent", "10", "--code", "TN10", "--database-url", _db_url(tmp_path)]
    )
    assert promo.exit_code == 0
    with engine.begin() as conn:
        row = conn.execute(select(offers_table.c.promo_percent, offers_table.c.promo_code)).one()
    assert tuple(row) == (10, "TN10")
