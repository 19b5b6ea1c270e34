from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..core.errors import ConflictError, UnauthorizedError
from ..core.security import PasswordHasher
from ..crud import users as user_store
from ..models.user import User

logger = logging.getLogger("daytracker.accounts")

INVALID_CREDENTIALS = "Invalid email or password"


class AccountService:
    """Registration and credential checks on top of the user store."""

    def __init__(self, db: Session, hasher: PasswordHasher) -> None:
        self.db = db
        self.hasher = hasher

    def register(self, email: str, password: str) -> User:
        if user_store.email_exists(self.db, email):
            raise ConflictError("Email already registered")
        # create_user maps a racing duplicate onto the same ConflictError.
        user = user_store.create_user(self.db, email, self.hasher.hash(password))
        logger.info("auth.registered", extra={"extra_data": {"user_id": user.id}})
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = user_store.find_by_email(self.db, email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.info("auth.login_failed")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user

    def email_exists(self, email: str) -> bool:
        return user_store.email_exists(self.db, email)
