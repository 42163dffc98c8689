"""
Factory functions to provide settings, shared session state and services as
FastAPI dependencies.

The token table, session store, issuer and manager are built once when this
module is imported; the providers only hand them out. Tests swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from teacher_dashboard.core.config import AppSettings, get_settings
from teacher_dashboard.services import (
    CredentialValidator,
    SessionManager,
    SessionStore,
    TeacherAccount,
    TokenIssuer,
    TokenTable,
)

_TOKEN_TABLE = TokenTable()
_SESSION_STORE = SessionStore()
_TOKEN_ISSUER = TokenIssuer(_TOKEN_TABLE)
_SESSION_MANAGER = SessionManager(_TOKEN_ISSUER, _SESSION_STORE)


@lru_cache()
def _settings() -> AppSettings:
    """Ensure configuration is created once per process."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings()


def get_token_table() -> TokenTable:
    """Provide the process-wide token table."""
    return _TOKEN_TABLE


def get_session_store() -> SessionStore:
    """Provide the process-wide session store."""
    return _SESSION_STORE


def get_token_issuer() -> TokenIssuer:
    """Provide the token issuer bound to the shared token table."""
    return _TOKEN_ISSUER


def get_session_manager() -> SessionManager:
    """Provide the session manager bound to the shared issuer and store."""
    return _SESSION_MANAGER


@lru_cache()
def get_credential_validator() -> CredentialValidator:
    """Provide the validator for the configured teacher account."""
    credentials = _settings().credentials
    return CredentialValidator(
        TeacherAccount(
            email=credentials.email,
            password=credentials.password,
            name=credentials.name,
        )
    )


__all__ = [
    "get_app_settings",
    "get_credential_validator",
    "get_session_manager",
    "get_session_store",
    "get_token_issuer",
    "get_token_table",
]
