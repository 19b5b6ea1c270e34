"""Repository helpers for day entries. Every query is scoped by ``user_id``."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError
from ..db.integrity import DAYS_USER_DATE_START_UNIQUE, violates
from ..models.day import DayEntry

DUPLICATE_START_MESSAGE = "Day entry already exists for date & start time"


def _utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _range_filters(user_id: int, date_from: str | None, date_to: str | None) -> list:
    clauses = [DayEntry.user_id == user_id]
    if date_from:
        clauses.append(DayEntry.date >= date_from)
    if date_to:
        clauses.append(DayEntry.date <= date_to)
    return clauses


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if violates(exc, DAYS_USER_DATE_START_UNIQUE):
            raise ConflictError(DUPLICATE_START_MESSAGE) from exc
        raise


def find_owned_by_id(db: Session, user_id: int, entry_id: int) -> DayEntry | None:
    stmt = select(DayEntry).where(DayEntry.id == entry_id, DayEntry.user_id == user_id)
    return db.execute(stmt).scalars().first()


def list_owned(
    db: Session,
    user_id: int,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[DayEntry]:
    stmt = (
        select(DayEntry)
        .where(*_range_filters(user_id, date_from, date_to))
        .order_by(desc(DayEntry.date), desc(DayEntry.time_start), desc(DayEntry.id))
    )
    return list(db.execute(stmt).scalars().all())


def insert_entry(db: Session, user_id: int, values: dict) -> DayEntry:
    now = _utcnow()
    entry = DayEntry(user_id=user_id, created_at=now, updated_at=now, **values)
    db.add(entry)
    _commit_or_conflict(db)
    db.refresh(entry)
    return entry


def replace_entry(db: Session, entry: DayEntry, values: dict) -> DayEntry:
    for field in ("date", "time_start", "time_end", "hours", "location"):
        setattr(entry, field, values.get(field))
    entry.updated_at = _utcnow()
    _commit_or_conflict(db)
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry: DayEntry) -> None:
    db.delete(entry)
    db.commit()


def total_hours(
    db: Session,
    user_id: int,
    date_from: str | None = None,
    date_to: str | None = None,
) -> float:
    stmt = select(func.coalesce(func.sum(DayEntry.hours), 0)).where(
        *_range_filters(user_id, date_from, date_to)
    )
    return float(db.execute(stmt).scalar_one())


def hours_per_date(
    db: Session,
    user_id: int,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[tuple[str, float, int]]:
    stmt = (
        select(DayEntry.date, func.sum(DayEntry.hours), func.count())
        .where(*_range_filters(user_id, date_from, date_to))
        .group_by(DayEntry.date)
        .order_by(DayEntry.date)
    )
    return [(row[0], float(row[1] or 0), int(row[2])) for row in db.execute(stmt).all()]
