from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from ..core.errors import NotFoundError
from ..deps.auth import require_user
from ..deps.services import get_day_service, get_summary_aggregator
from ..schemas.day import CloseRequest, DayInput, DayOut, DaysSummary
from ..services.authn import Identity
from ..services.days import NOT_FOUND_MESSAGE, DayEntryService
from ..services.summary import SummaryAggregator

router = APIRouter(prefix="/days", tags=["days"], dependencies=[Depends(require_user)])


@router.get("", response_model=list[DayOut])
def api_list_days(
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    return days.list(user.id, date_from, date_to)


@router.post("", response_model=DayOut, status_code=status.HTTP_201_CREATED)
def api_create_day(
    payload: DayInput,
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    return days.create(user.id, payload)


# Registered before "/{entry_id}" so "summary" is not parsed as an id.
@router.get("/summary", response_model=DaysSummary, response_model_exclude_none=True)
def api_summary(
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    user: Identity = Depends(require_user),
    aggregator: SummaryAggregator = Depends(get_summary_aggregator),
):
    return aggregator.summarize(user.id, date_from, date_to)


@router.get("/{entry_id}", response_model=DayOut)
def api_get_day(
    entry_id: int,
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    entry = days.get(user.id, entry_id)
    if entry is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return entry


@router.put("/{entry_id}", response_model=DayOut)
def api_replace_day(
    entry_id: int,
    payload: DayInput,
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    return days.update(user.id, entry_id, payload)


@router.delete("/{entry_id}")
def api_delete_day(
    entry_id: int,
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    days.delete(user.id, entry_id)
    return {"success": True}


@router.post("/{entry_id}/close", response_model=DayOut)
def api_close_day(
    entry_id: int,
    payload: CloseRequest | None = Body(default=None),
    user: Identity = Depends(require_user),
    days: DayEntryService = Depends(get_day_service),
):
    return days.close(user.id, entry_id, payload.time_end if payload else None)
