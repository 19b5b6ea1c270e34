"""Issue, resolve and revoke opaque session tokens.

Sessions are stored server side and referenced by a random token that the
transport layer hands to the client (as a cookie, in practice). Expiry is fixed
at issuance: resolving a session never pushes ``expires_at`` forward, and an
expired session is deleted the first time anyone presents it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.orm import Session

from ..core.security import new_session_token, utcnow
from ..crud import sessions as session_store
from ..models.user import UserSession

DEFAULT_TTL = timedelta(days=7)

logger = logging.getLogger("daytracker.sessions")


@dataclass(frozen=True)
class IssuedSession:
    id: str
    expires_at: datetime


class SessionManager:
    def __init__(
        self,
        db: Session,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.ttl = ttl
        self.clock = clock

    def create(self, user_id: int, ttl: timedelta | None = None) -> IssuedSession:
        now = self.clock()
        expires_at = now + (ttl if ttl is not None else self.ttl)
        token = new_session_token()
        session_store.insert_session(self.db, token, user_id, expires_at, now)
        logger.info("session.created", extra={"extra_data": {"user_id": user_id}})
        return IssuedSession(id=token, expires_at=expires_at)

    def resolve(self, token: str | None) -> UserSession | None:
        if not token:
            return None
        record = session_store.find_session(self.db, token)
        if record is None:
            return None
        if session_store.from_iso(record.expires_at) <= self.clock():
            user_id = record.user_id
            session_store.delete_session(self.db, token)
            logger.info("session.expired", extra={"extra_data": {"user_id": user_id}})
            return None
        return record

    def revoke(self, token: str | None) -> None:
        if not token:
            return
        if session_store.delete_session(self.db, token):
            logger.info("session.revoked")
