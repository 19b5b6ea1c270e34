"""Credential store: raw persistence for login sessions."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.orm import Session

from ..models.user import UserSession


def to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def insert_session(db: Session, token: str, user_id: int, expires_at: datetime, created_at: datetime) -> UserSession:
    record = UserSession(
        id=token,
        user_id=user_id,
        expires_at=to_iso(expires_at),
        created_at=to_iso(created_at),
    )
    db.add(record)
    db.commit()
    return record


def find_session(db: Session, token: str) -> UserSession | None:
    return db.get(UserSession, token)


def delete_session(db: Session, token: str) -> int:
    result = db.execute(delete(UserSession).where(UserSession.id == token))
    db.commit()
    return result.rowcount or 0
