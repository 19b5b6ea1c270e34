"""Per-request service construction.

Services are plain objects built around the request's database session and
the settings stored on ``app.state`` by ``create_app``.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..core.config import AppSettings
from ..core.security import PasswordHasher
from ..db.session import get_db
from ..services.accounts import AccountService
from ..services.days import DayEntryService
from ..services.sessions import SessionManager
from ..services.summary import SummaryAggregator


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_session_manager(
    db: Session = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
) -> SessionManager:
    return SessionManager(db, ttl=timedelta(days=settings.SESSION_TTL_DAYS))


def get_account_service(request: Request, db: Session = Depends(get_db)) -> AccountService:
    hasher: PasswordHasher = request.app.state.password_hasher
    return AccountService(db, hasher)


def get_day_service(
    db: Session = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
) -> DayEntryService:
    return DayEntryService(db, tz=settings.TZ)


def get_summary_aggregator(db: Session = Depends(get_db)) -> SummaryAggregator:
    return SummaryAggregator(db)
