"""Translation of storage constraint violations into domain conflicts.

Every write that can trip a unique constraint funnels its ``IntegrityError``
through ``violates`` so there is exactly one place that knows how the
different database drivers phrase those failures.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import IntegrityError

DAYS_USER_DATE_START_UNIQUE = "days_user_date_start_unique"
USERS_EMAIL_UNIQUE = "users_email_unique"

# SQLite reports the columns instead of the constraint name:
#   UNIQUE constraint failed: days.user_id, days.date, days.time_start
_SQLITE_SIGNATURES: dict[str, Sequence[str]] = {
    DAYS_USER_DATE_START_UNIQUE: ("days.user_id", "days.date", "days.time_start"),
    USERS_EMAIL_UNIQUE: ("users.email",),
}


def violates(exc: IntegrityError, constraint: str) -> bool:
    """Return True when ``exc`` was raised by the named unique constraint."""

    message = str(exc.orig) if exc.orig is not None else str(exc)
    if constraint in message:
        return True
    columns = _SQLITE_SIGNATURES.get(constraint)
    if not columns or "UNIQUE constraint failed" not in message:
        return False
    failed = message.split("UNIQUE constraint failed:", 1)[1]
    failed_columns = {part.strip() for part in failed.split(",")}
    return failed_columns == set(columns)
