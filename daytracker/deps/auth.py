from __future__ import annotations

from fastapi import Request

from ..core.errors import UnauthorizedError
from ..services.authn import Identity


def get_current_user(request: Request) -> Identity | None:
    """Identity resolved by ``SessionAuthMiddleware``, or None if anonymous."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> Identity:
    user = get_current_user(request)
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user
