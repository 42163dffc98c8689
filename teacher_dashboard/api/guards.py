"""Route protection for pages that require a signed-in teacher."""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException

from teacher_dashboard.api.cookies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from teacher_dashboard.dependencies import get_session_manager
from teacher_dashboard.services import Session, SessionManager, SessionState


def require_session(
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> Session:
    """Allow Active and Refreshable sessions through; refreshing is left to /auth/session."""
    state = manager.classify(access_token or "", refresh_token or "")
    session = None
    if state is SessionState.ACTIVE:
        session = manager.get(access_token or "")
    elif state is SessionState.REFRESHABLE:
        session = manager.get_by_refresh_token(refresh_token or "")

    if session is None:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail="Authentication required"
        )
    return session


__all__ = ["require_session"]
