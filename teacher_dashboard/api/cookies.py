"""Helpers for writing and clearing the session cookies on a response."""

from __future__ import annotations

from fastapi import Response

from teacher_dashboard.core.config import AppSettings
from teacher_dashboard.services.sessions import (
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    Session,
)

ACCESS_TOKEN_COOKIE = "session_access_token"
REFRESH_TOKEN_COOKIE = "session_refresh_token"
ACCESS_EXPIRES_COOKIE = "session_access_token_expires"
REFRESH_EXPIRES_COOKIE = "session_refresh_token_expires"
TEACHER_EMAIL_COOKIE = "session_teacher_email"

ACCESS_COOKIE_MAX_AGE = int(ACCESS_TOKEN_TTL.total_seconds())  # 1800
REFRESH_COOKIE_MAX_AGE = int(REFRESH_TOKEN_TTL.total_seconds())  # 2419200

SESSION_COOKIES = (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    ACCESS_EXPIRES_COOKIE,
    REFRESH_EXPIRES_COOKIE,
    TEACHER_EMAIL_COOKIE,
)


def _set(response: Response, settings: AppSettings, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path=settings.cookies.path,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.cookies.samesite,
    )


def set_access_cookies(response: Response, session: Session, settings: AppSettings) -> None:
    _set(response, settings, ACCESS_TOKEN_COOKIE, session.access_token, ACCESS_COOKIE_MAX_AGE)
    _set(
        response,
        settings,
        ACCESS_EXPIRES_COOKIE,
        str(session.access_token_expires_at),
        ACCESS_COOKIE_MAX_AGE,
    )


def set_session_cookies(response: Response, session: Session, settings: AppSettings) -> None:
    """Write both tokens plus the companion expiry and identity cookies."""
    set_access_cookies(response, session, settings)
    _set(response, settings, REFRESH_TOKEN_COOKIE, session.refresh_token, REFRESH_COOKIE_MAX_AGE)
    _set(
        response,
        settings,
        REFRESH_EXPIRES_COOKIE,
        str(session.refresh_token_expires_at),
        REFRESH_COOKIE_MAX_AGE,
    )
    _set(response, settings, TEACHER_EMAIL_COOKIE, session.owner_identity, REFRESH_COOKIE_MAX_AGE)


def clear_session_cookies(response: Response, settings: AppSettings) -> None:
    for key in SESSION_COOKIES:
        _set(response, settings, key, "", 0)


__all__ = [
    "ACCESS_COOKIE_MAX_AGE",
    "ACCESS_EXPIRES_COOKIE",
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_COOKIE_MAX_AGE",
    "REFRESH_EXPIRES_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "SESSION_COOKIES",
    "TEACHER_EMAIL_COOKIE",
    "clear_session_cookies",
    "set_access_cookies",
    "set_session_cookies",
]
