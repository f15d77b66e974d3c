from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class MatchRequest(BaseModel):
    performer_query: Optional[str] = None
    raw_title: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    date_day: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    time_24: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="HH:mm")

    @field_validator("date_day")
    @classmethod
    def _real_calendar_day(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            date.fromisoformat(value)
        return value

    def parsed_date_day(self) -> Optional[date]:
        return date.fromisoformat(self.date_day) if self.date_day else None
