from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import IntegrityAnomaly
from ..crud import users as user_store
from .sessions import SessionManager

logger = logging.getLogger("daytracker.authn")


@dataclass(frozen=True)
class Identity:
    """Minimal view of the signed-in user attached to a request."""

    id: int
    email: str


class RequestAuthenticator:
    """Turn an inbound session token into an ``Identity`` or ``None``."""

    def __init__(self, sessions: SessionManager) -> None:
        self.sessions = sessions

    def authenticate(self, token: str | None) -> Identity | None:
        session = self.sessions.resolve(token)
        if session is None:
            return None
        try:
            return self._load_identity(session.user_id)
        except IntegrityAnomaly as exc:
            logger.warning("session.orphaned", extra={"extra_data": {"user_id": session.user_id, "reason": exc.message}})
            return None

    def _load_identity(self, user_id: int) -> Identity:
        user = user_store.find_by_id(self.sessions.db, user_id)
        if user is None:
            raise IntegrityAnomaly(f"session references missing user {user_id}")
        return Identity(id=user.id, email=user.email)
