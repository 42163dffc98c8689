"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the session services and
the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import logging
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class CookieSettings(BaseSettings):
    """Transport settings for the session cookies."""

    secure: Optional[bool] = Field(
        None,
        validation_alias="SESSION_COOKIE_SECURE",
        description="Force the Secure flag. Defaults to on in production only.",
    )
    samesite: Literal["lax", "strict", "none"] = Field(
        "strict", validation_alias="SESSION_COOKIE_SAMESITE"
    )
    path: str = Field("/", validation_alias="SESSION_COOKIE_PATH")

    @field_validator("samesite", mode="before")
    @classmethod
    def _lower_samesite(cls, value: str) -> str:
        return value.lower() if isinstance(value, str) else value


class CredentialSettings(BaseSettings):
    """The single teacher account accepted by the login endpoint."""

    email: str = Field("teacher1@teacher.com", validation_alias="TEACHER_EMAIL")
    password: str = Field("Password!", validation_alias="TEACHER_PASSWORD")
    name: str = Field("Teacher One", validation_alias="TEACHER_NAME")


class SessionSettings(BaseSettings):
    """Housekeeping for the in-memory session and token tables."""

    sweep_on_login: bool = Field(
        False,
        validation_alias="SESSION_SWEEP_ON_LOGIN",
        description="Evict stale sessions and token records on every login.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    cookies: CookieSettings = Field(default_factory=CookieSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.cookies.secure is not None:
            return self.cookies.secure
        return self.is_production


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "CookieSettings",
    "CredentialSettings",
    "SessionSettings",
    "get_settings",
]
