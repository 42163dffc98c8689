"""Schemas for the login, session-check and logout endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials submitted by the login form."""

    email: Optional[str] = Field(None, description="Teacher email address.")
    password: Optional[str] = Field(None, description="Teacher password.")


class TeacherProfile(BaseModel):
    email: str
    name: str


class TokenExpiries(BaseModel):
    """Absolute expiry of each session token in epoch milliseconds."""

    access_token: int
    refresh_token: int


class LoginResponse(BaseModel):
    success: bool = True
    teacher: TeacherProfile
    expires_at: TokenExpiries


class SessionValidationResponse(BaseModel):
    valid: bool = True
    teacher: TeacherProfile
    expires_at: TokenExpiries
    refreshed: bool = Field(
        False, description="True when a new access token was issued by this call."
    )


class LogoutResponse(BaseModel):
    success: bool = True


__all__ = [
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "SessionValidationResponse",
    "TeacherProfile",
    "TokenExpiries",
]
