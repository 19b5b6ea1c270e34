"""Day-entry rules: validation, hour derivation and per-user isolation.

``DayEntryService`` is the only writer of the ``days`` table. It accepts a
resolved user id (``None`` means the request was anonymous and fails closed),
validates the time range before touching the database, and always recomputes
``hours`` from the clock times so clients can never supply their own value.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..crud import days as day_store
from ..models.day import DayEntry
from ..schemas.day import DayInput
from . import timecalc

logger = logging.getLogger("daytracker.days")

NOT_FOUND_MESSAGE = "Day not found"


def _require_user(user_id: Optional[int]) -> int:
    if user_id is None:
        raise UnauthorizedError("Unauthorized")
    return user_id


def prepare_values(payload: DayInput) -> dict:
    """Validate ``payload`` and return the column values to store."""

    date = timecalc.parse_date(payload.date)
    start = timecalc.format_clock(timecalc.parse_clock(payload.time_start, "timeStart"))
    end = timecalc.normalize_end(payload.time_end)
    if end is not None:
        end = timecalc.format_clock(timecalc.parse_clock(end, "timeEnd"))
    location = (payload.location or "").strip() or None
    if location is not None:
        try:
            location.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValidationError("location must be valid UTF-8 text") from exc
    return {
        "date": date,
        "time_start": start,
        "time_end": end,
        "hours": timecalc.compute_hours(start, end),
        "location": location,
    }


class DayEntryService:
    def __init__(
        self,
        db: Session,
        *,
        tz: str = "UTC",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.db = db
        self.tz = tz
        self.clock = clock

    def create(self, user_id: Optional[int], payload: DayInput) -> DayEntry:
        owner = _require_user(user_id)
        values = prepare_values(payload)
        try:
            entry = day_store.insert_entry(self.db, owner, values)
        except ConflictError:
            logger.info("day.conflict", extra={"extra_data": {"date": values["date"], "time_start": values["time_start"]}})
            raise
        logger.info("day.created", extra={"extra_data": {"day_id": entry.id, "hours": entry.hours}})
        return entry

    def update(self, user_id: Optional[int], entry_id: int, payload: DayInput) -> DayEntry:
        owner = _require_user(user_id)
        values = prepare_values(payload)
        entry = day_store.find_owned_by_id(self.db, owner, entry_id)
        if entry is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        try:
            return day_store.replace_entry(self.db, entry, values)
        except ConflictError:
            logger.info("day.conflict", extra={"extra_data": {"day_id": entry_id, "date": values["date"]}})
            raise

    def delete(self, user_id: Optional[int], entry_id: int) -> None:
        owner = _require_user(user_id)
        entry = day_store.find_owned_by_id(self.db, owner, entry_id)
        if entry is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        day_store.delete_entry(self.db, entry)

    def get(self, user_id: Optional[int], entry_id: int) -> DayEntry | None:
        owner = _require_user(user_id)
        return day_store.find_owned_by_id(self.db, owner, entry_id)

    def list(
        self,
        user_id: Optional[int],
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> list[DayEntry]:
        owner = _require_user(user_id)
        # Bounds that are not YYYY-MM-DD are ignored rather than rejected.
        return day_store.list_owned(
            self.db,
            owner,
            date_from if timecalc.is_date_string(date_from) else None,
            date_to if timecalc.is_date_string(date_to) else None,
        )

    def close(self, user_id: Optional[int], entry_id: int, end_time: str | None = None) -> DayEntry:
        """Stamp an end time on an open entry; closed entries come back unchanged."""

        entry = self.get(user_id, entry_id)
        if entry is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        if not entry.open:
            return entry
        end = timecalc.normalize_end(end_time)
        if end is None:
            now = self.clock() if self.clock is not None else None
            end = timecalc.current_clock(self.tz, now)
        payload = DayInput(
            date=entry.date,
            time_start=entry.time_start,
            time_end=end,
            location=entry.location,
        )
        return self.update(user_id, entry_id, payload)
