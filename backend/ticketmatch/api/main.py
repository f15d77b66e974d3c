from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine

from ticketmatch.api.routers import match
from ticketmatch.domain.lookups import MatchingTables, load_matching_tables


def create_app(engine=None, tables: MatchingTables | None = None) -> FastAPI:
    app = FastAPI(title="Ticket Match API", version="0.1.0")
    if engine is None:
        database_url = os.getenv("DATABASE_URL")
        engine = create_engine(database_url, future=True) if database_url else None
    app.state.db_engine = engine
    app.state.matching_tables = tables or load_matching_tables()

    origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(match.router)
    return app


app = create_app()
