"""Service layer exports."""

from .credentials import CredentialValidator, TeacherAccount
from .sessions import (
    InvalidRefreshTokenError,
    Session,
    SessionCheck,
    SessionManager,
    SessionState,
    SessionStore,
)
from .tokens import TokenIssuer, TokenKind, TokenRecord, TokenTable, TokenVerification

__all__ = [
    "CredentialValidator",
    "InvalidRefreshTokenError",
    "Session",
    "SessionCheck",
    "SessionManager",
    "SessionState",
    "SessionStore",
    "TeacherAccount",
    "TokenIssuer",
    "TokenKind",
    "TokenRecord",
    "TokenTable",
    "TokenVerification",
]
