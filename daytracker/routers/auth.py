"""Registration, login and session cookie endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..core.config import AppSettings
from ..deps.auth import require_user
from ..deps.services import get_account_service, get_app_settings, get_session_manager
from ..schemas.auth import EmailCheck, LoginRequest, RegisterRequest, UserOut
from ..services.accounts import AccountService
from ..services.authn import Identity
from ..services.sessions import IssuedSession, SessionManager

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, settings: AppSettings, issued: IssuedSession) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        issued.id,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    sessions: SessionManager = Depends(get_session_manager),
    settings: AppSettings = Depends(get_app_settings),
):
    user = accounts.register(payload.email, payload.password)
    _set_session_cookie(response, settings, sessions.create(user.id))
    return UserOut(id=user.id, email=user.email)


@router.post("/login", response_model=UserOut)
def login(
    payload: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    sessions: SessionManager = Depends(get_session_manager),
    settings: AppSettings = Depends(get_app_settings),
):
    user = accounts.authenticate(payload.email, payload.password)
    _set_session_cookie(response, settings, sessions.create(user.id))
    return UserOut(id=user.id, email=user.email)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
    settings: AppSettings = Depends(get_app_settings),
):
    sessions.revoke(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response


@router.get("/me", response_model=UserOut)
def me(user: Identity = Depends(require_user)):
    return UserOut(id=user.id, email=user.email)


@router.get("/check-email", response_model=EmailCheck)
def check_email(
    email: str | None = Query(default=None),
    accounts: AccountService = Depends(get_account_service),
):
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing email")
    return EmailCheck(exists=accounts.email_exists(email))
