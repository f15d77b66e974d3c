from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlalchemy.engine import Engine

from ticketmatch.domain.lookups import MatchingTables
from ticketmatch.infra.db.events_repository import EventsRepository
from ticketmatch.services.match_service import MatchService


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "db_engine", None)
    if engine is None:
        raise HTTPException(status_code=500, detail="Database engine not configured")
    return engine


def get_matching_tables(request: Request) -> MatchingTables:
    return request.app.state.matching_tables


def get_match_service(
    engine: Engine = Depends(get_engine),
    tables: MatchingTables = Depends(get_matching_tables),
) -> MatchService:
    return MatchService(EventsRepository(engine), tables)
