from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ..core.errors import UnauthorizedError
from ..crud import days as day_store
from ..schemas.day import DaysSummary, SummaryDay
from .timecalc import is_date_string


class SummaryAggregator:
    """Read-only hour totals for one user over an optional date range."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def summarize(
        self,
        user_id: Optional[int],
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> DaysSummary:
        if user_id is None:
            raise UnauthorizedError("Unauthorized")
        lower = date_from if is_date_string(date_from) else None
        upper = date_to if is_date_string(date_to) else None
        total = day_store.total_hours(self.db, user_id, lower, upper)
        per_date = day_store.hours_per_date(self.db, user_id, lower, upper)
        return DaysSummary(
            date_from=lower,
            date_to=upper,
            total_hours=total,
            days=[SummaryDay(date=day, total_hours=hours, entries=count) for day, hours, count in per_date],
        )
