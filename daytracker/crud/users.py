"""Credential store: lookups and inserts for user accounts."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError
from ..db.integrity import USERS_EMAIL_UNIQUE, violates
from ..models.user import User


def _utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == normalize_email(email)).limit(1)
    return db.execute(stmt).scalars().first()


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def email_exists(db: Session, email: str) -> bool:
    stmt = select(User.id).where(User.email == normalize_email(email)).limit(1)
    return db.execute(stmt).first() is not None


def create_user(db: Session, email: str, password_hash: str) -> User:
    now = _utcnow()
    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if violates(exc, USERS_EMAIL_UNIQUE):
            raise ConflictError("Email already registered") from exc
        raise
    db.refresh(user)
    return user
