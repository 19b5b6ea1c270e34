"""Application factory and top-level wiring for the Day Tracker API.

This module is the glue that brings together configuration, database setup,
middleware, API routers and error handling.

*What:* ``create_app`` builds a fully wired FastAPI instance.
*When:* Once per process (``daytracker.main``) or once per test.
*Why:* Everything a request needs (settings, the database engine, the session
factory and the password hasher) hangs off ``app.state``, so two apps in the
same process never share state and tests can point at a throwaway database.
*How:* Build the engine, create missing tables, register middleware
(outermost last) and routers, then install the JSON error handlers.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import AppSettings, get_settings
from .core.errors import register_exception_handlers
from .core.security import PasswordHasher
from .db.session import Base, build_engine, build_session_factory
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware
from .middlewares.session import SessionAuthMiddleware

# Importing the SQLAlchemy models registers them with the metadata. Without
# this step ``Base.metadata.create_all`` would not know about our tables.
from .models import day as _day  # noqa: F401
from .models import user as _user  # noqa: F401


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.APP_NAME)

    # ---------- DB init ----------
    engine = build_engine(settings.DB_URL)
    Base.metadata.create_all(bind=engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    # ---------- Middleware ----------
    # Starlette wraps in reverse order: the request id is assigned first, then
    # security headers, then the session cookie is resolved.
    app.add_middleware(
        SessionAuthMiddleware,
        cookie_name=settings.SESSION_COOKIE_NAME,
        ttl_days=settings.SESSION_TTL_DAYS,
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.COOKIE_SECURE)
    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", "X-Request-ID"],
        )
    app.add_middleware(RequestIdMiddleware)

    # ---------- Routers ----------
    from .routers import auth as auth_router
    from .routers import days as days_router

    app.include_router(auth_router.router)
    app.include_router(days_router.router)

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, bool]:
        return {"ok": True}

    # ---------- Exception handling ----------
    register_exception_handlers(app)
    return app


__all__ = ["create_app"]
