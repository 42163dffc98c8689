"""
FastAPI routes for the teacher dashboard authentication flows.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response

from teacher_dashboard.api.cookies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    clear_session_cookies,
    set_access_cookies,
    set_session_cookies,
)
from teacher_dashboard.api.guards import require_session
from teacher_dashboard.core.config import AppSettings
from teacher_dashboard.dependencies import (
    get_app_settings,
    get_credential_validator,
    get_session_manager,
)
from teacher_dashboard.schemas import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionValidationResponse,
    TeacherProfile,
    TokenExpiries,
)
from teacher_dashboard.services import (
    CredentialValidator,
    InvalidRefreshTokenError,
    Session,
    SessionManager,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _profile(validator: CredentialValidator, identity: str) -> TeacherProfile:
    account = validator.account
    name = account.name if identity == account.email else "Teacher"
    return TeacherProfile(email=identity, name=name)


def _expiries(session: Session) -> TokenExpiries:
    return TokenExpiries(
        access_token=session.access_token_expires_at,
        refresh_token=session.refresh_token_expires_at,
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/auth/login", response_model=LoginResponse, status_code=HTTPStatus.OK)
async def login(
    payload: LoginRequest,
    response: Response,
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> LoginResponse:
    """Check the submitted credentials and start a session."""
    if not payload.email or not payload.password:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="Email and password are required",
        )
    if not validator.validate_email(payload.email):
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST, detail="Invalid email format"
        )
    if not validator.validate_password(payload.password):
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="Password must be at least 8 characters and contain a special character",
        )

    account = validator.check(payload.email, payload.password)
    if account is None:
        logger.warning("Rejected login for %s", payload.email)
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="Invalid email or password"
        )

    if settings.session.sweep_on_login:
        manager.sweep()

    session = manager.login(account.email)
    set_session_cookies(response, session, settings)
    return LoginResponse(
        teacher=TeacherProfile(email=account.email, name=account.name),
        expires_at=_expiries(session),
    )


@router.get(
    "/auth/session",
    response_model=SessionValidationResponse,
    status_code=HTTPStatus.OK,
)
async def check_session(
    response: Response,
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> SessionValidationResponse:
    """
    Validate the current session, issuing a new access token when only the
    refresh token is still valid.
    """
    if not refresh_token:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="No active session"
        )

    try:
        result = manager.check_session(access_token or "", refresh_token)
    except InvalidRefreshTokenError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="Session expired"
        ) from exc

    if not result.authenticated or result.session is None:
        logger.info("Session check failed with state %s", result.state.value)
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="Session expired"
        )

    session = result.session
    if result.refreshed:
        set_access_cookies(response, session, settings)

    return SessionValidationResponse(
        teacher=_profile(validator, session.owner_identity),
        expires_at=_expiries(session),
        refreshed=result.refreshed,
    )


@router.post("/auth/logout", response_model=LogoutResponse, status_code=HTTPStatus.OK)
async def logout(
    response: Response,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> LogoutResponse:
    """Terminate the session and clear every session cookie."""
    if not access_token and not refresh_token:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="No active session"
        )

    manager.logout(access_token, refresh_token)
    clear_session_cookies(response, settings)
    return LogoutResponse()


@router.get("/teacher/me", response_model=TeacherProfile, status_code=HTTPStatus.OK)
async def current_teacher(
    session: Annotated[Session, Depends(require_session)],
    validator: Annotated[CredentialValidator, Depends(get_credential_validator)],
) -> TeacherProfile:
    """Return the signed-in teacher for protected dashboard pages."""
    return _profile(validator, session.owner_identity)


__all__ = ["router"]
