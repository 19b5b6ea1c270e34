"""SQLAlchemy models for accounts and their login sessions."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..db.integrity import USERS_EMAIL_UNIQUE
from ..db.session import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name=USERS_EMAIL_UNIQUE),)

    id = Column(Integer, primary_key=True, index=True)
    # Always stored lower-cased; see ``crud.users.normalize_email``.
    email = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


class UserSession(Base):
    """Server-side record behind the opaque ``session_id`` cookie."""

    __tablename__ = "sessions"

    id = Column(Text, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # ISO-8601 UTC, e.g. 2024-01-08T09:00:00Z
    expires_at = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    user = relationship("User", back_populates="sessions")


__all__ = ["User", "UserSession"]
