"""Pydantic schemas that describe day-entry payloads for the API.

Field names are snake_case in Python and camelCase on the wire
(``timeStart``, ``userId`` ...). Format checks for dates and clock times live
in ``services.timecalc`` so that every caller, HTTP or not, gets the same
validation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DayInput(BaseModel):
    """Full replacement payload for create and update."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {"date": "2024-01-01", "timeStart": "09:00", "timeEnd": "17:30", "location": "Office"}
        },
    )

    date: str
    time_start: str
    time_end: Optional[str] = None
    location: Optional[str] = None


class CloseRequest(BaseModel):
    model_config = _CAMEL

    time_end: Optional[str] = None


class DayOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    date: str
    time_start: str
    time_end: Optional[str] = None
    hours: float
    location: Optional[str] = None
    user_id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    open: bool


class SummaryDay(BaseModel):
    model_config = _CAMEL

    date: str
    total_hours: float
    entries: int


class DaysSummary(BaseModel):
    model_config = _CAMEL

    date_from: Optional[str] = Field(default=None, alias="from")
    date_to: Optional[str] = Field(default=None, alias="to")
    total_hours: float = 0.0
    days: list[SummaryDay] = Field(default_factory=list)
