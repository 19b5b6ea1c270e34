"""Password hashing and session token primitives."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

import bcrypt

from .errors import ValidationError

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72
# 32 random bytes (256 bits). Collisions are not checked for; at this size the
# odds are negligible for any realistic number of live sessions.
SESSION_TOKEN_BYTES = 32


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class PasswordHasher:
    """Salted, deliberately slow one-way hashing backed by bcrypt."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        try:
            encoded = password.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValidationError("Password must be valid UTF-8 text") from exc
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed or truncated hash, or an over-long password.
            return False


def new_session_token() -> str:
    return secrets.token_hex(SESSION_TOKEN_BYTES)
