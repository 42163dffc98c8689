"""Credential checks for the single configured teacher account."""

from __future__ import annotations

import hmac
import re
from dataclasses import dataclass
from typing import Optional

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SPECIAL_CHAR_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

PASSWORD_MIN_LENGTH = 8


@dataclass(frozen=True, slots=True)
class TeacherAccount:
    email: str
    password: str
    name: str = "Teacher"


class CredentialValidator:
    """Validate login input and match it against the configured account."""

    def __init__(self, account: TeacherAccount) -> None:
        self._account = account

    @property
    def account(self) -> TeacherAccount:
        return self._account

    @staticmethod
    def validate_email(email: str) -> bool:
        return bool(_EMAIL_PATTERN.match(email or ""))

    @staticmethod
    def validate_password(password: str) -> bool:
        """At least eight characters including one special character."""
        if len(password or "") < PASSWORD_MIN_LENGTH:
            return False
        return bool(_SPECIAL_CHAR_PATTERN.search(password))

    def check(self, email: str, password: str) -> Optional[TeacherAccount]:
        """Return the account when both values match, otherwise ``None``."""
        email_ok = hmac.compare_digest(
            email.encode("utf-8"), self._account.email.encode("utf-8")
        )
        password_ok = hmac.compare_digest(
            password.encode("utf-8"), self._account.password.encode("utf-8")
        )
        if email_ok and password_ok:
            return self._account
        return None


__all__ = ["CredentialValidator", "PASSWORD_MIN_LENGTH", "TeacherAccount"]
