"""Public schema exports."""

from .auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionValidationResponse,
    TeacherProfile,
    TokenExpiries,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "SessionValidationResponse",
    "TeacherProfile",
    "TokenExpiries",
]
