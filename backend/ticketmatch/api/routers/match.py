from __future__ import annotations

from fastapi import APIRouter, Depends

from ticketmatch.api.deps import get_match_service
from ticketmatch.api.schemas import MatchRequest
from ticketmatch.services.match_service import MatchService

router = APIRouter(tags=["match"])


@router.get("/health")
def health():
    return {"ok": True}


@router.post("/match")
def match_event(payload: MatchRequest, service: MatchService = Depends(get_match_service)):
    return service.match(
        performer_query=payload.performer_query,
        raw_title=payload.raw_title,
        city=payload.city,
        state=payload.state,
        date_day=payload.parsed_date_day(),
        time_24=payload.time_24,
    )
