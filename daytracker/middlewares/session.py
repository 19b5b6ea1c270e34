from __future__ import annotations

from datetime import timedelta

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..services.authn import Identity, RequestAuthenticator
from ..services.sessions import SessionManager
from .request_id import principal_ctx_var


class SessionAuthMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie once per request.

    The resolved ``Identity`` (or None) lands on ``request.state.user``.
    Anonymous requests are never rejected here; protected routes do that.
    A cookie that no longer resolves is cleared on the way out.
    """

    def __init__(self, app, cookie_name: str = "session_id", ttl_days: int = 7) -> None:  # type: ignore[override]
        super().__init__(app)
        self.cookie_name = cookie_name
        self.ttl = timedelta(days=ttl_days)

    def _authenticate(self, request: Request, token: str) -> Identity | None:
        db = request.app.state.session_factory()
        try:
            authenticator = RequestAuthenticator(SessionManager(db, ttl=self.ttl))
            return authenticator.authenticate(token)
        finally:
            db.close()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        token = request.cookies.get(self.cookie_name)
        user = await run_in_threadpool(self._authenticate, request, token) if token else None
        request.state.user = user
        if user is not None:
            principal_ctx_var.set(f"user:{user.id}")
        response = await call_next(request)
        replaced = any(
            cookie.startswith(f"{self.cookie_name}=") for cookie in response.headers.getlist("set-cookie")
        )
        if token and user is None and not replaced:
            response.delete_cookie(self.cookie_name, path="/")
        return response
