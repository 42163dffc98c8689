"""Expose dependency helpers for FastAPI routers."""

from .services import (
    get_app_settings,
    get_credential_validator,
    get_session_manager,
    get_session_store,
    get_token_issuer,
    get_token_table,
)

__all__ = [
    "get_app_settings",
    "get_credential_validator",
    "get_session_manager",
    "get_session_store",
    "get_token_issuer",
    "get_token_table",
]
