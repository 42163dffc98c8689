"""Opaque token issuance and verification backed by an in-memory table."""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from teacher_dashboard.utils.clock import Clock, now_millis

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
_TOKEN_PATTERN = re.compile(r"^[a-f0-9]{64}$")
_MAX_ISSUE_ATTEMPTS = 3


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenRecord:
    """Metadata stored for every issued token."""

    token: str
    owner_identity: str
    kind: TokenKind
    expires_at: int


@dataclass(frozen=True, slots=True)
class TokenVerification:
    """Outcome of checking a presented token against the table."""

    valid: bool
    expired: bool
    owner_identity: Optional[str] = None
    kind: Optional[TokenKind] = None


_UNKNOWN = TokenVerification(valid=False, expired=False)


def is_well_formed(token: object) -> bool:
    """Return True when ``token`` looks like a 64-character lowercase hex token."""
    return isinstance(token, str) and bool(_TOKEN_PATTERN.match(token))


class TokenTable:
    """Process-local mapping of token value to its record."""

    def __init__(self) -> None:
        self._records: Dict[str, TokenRecord] = {}

    def put(self, record: TokenRecord) -> None:
        if record.token in self._records:
            raise ValueError("Token value already issued.")
        self._records[record.token] = record

    def get(self, token: str) -> Optional[TokenRecord]:
        return self._records.get(token)

    def prune(self, before: int) -> int:
        """Remove records that expired strictly before ``before``."""
        stale = [key for key, record in self._records.items() if record.expires_at < before]
        for key in stale:
            del self._records[key]
        return len(stale)

    def __contains__(self, token: object) -> bool:
        return token in self._records

    def __len__(self) -> int:
        return len(self._records)


class TokenIssuer:
    """Mint opaque tokens and answer validity queries for them.

    Tokens carry no claims of their own, so every verification is a lookup
    in the ``TokenTable`` the issuer was constructed with.
    """

    def __init__(self, table: TokenTable | None = None, *, clock: Clock = now_millis) -> None:
        self._table = table if table is not None else TokenTable()
        self._clock = clock

    @property
    def table(self) -> TokenTable:
        return self._table

    def now(self) -> int:
        return self._clock()

    def issue(
        self,
        owner_identity: str,
        kind: TokenKind,
        ttl_millis: int,
        *,
        now: int | None = None,
    ) -> str:
        """Issue a token for ``owner_identity`` valid for ``ttl_millis``."""
        if not owner_identity:
            raise ValueError("Owner identity must be provided.")
        if ttl_millis <= 0:
            raise ValueError("Token lifetime must be positive.")

        issued_at = self._clock() if now is None else now
        kind = TokenKind(kind)
        for _ in range(_MAX_ISSUE_ATTEMPTS):
            token = secrets.token_hex(TOKEN_BYTES)
            if token in self._table:
                continue
            self._table.put(
                TokenRecord(
                    token=token,
                    owner_identity=owner_identity,
                    kind=kind,
                    expires_at=issued_at + ttl_millis,
                )
            )
            return token
        raise RuntimeError("Unable to generate a unique token.")

    def verify(self, token: object, *, expected_kind: TokenKind | None = None) -> TokenVerification:
        """Check ``token`` against the table. Malformed input is simply invalid."""
        if not token or not is_well_formed(token):
            return _UNKNOWN

        record = self._table.get(token)  # type: ignore[arg-type]
        if record is None:
            return _UNKNOWN
        if expected_kind is not None and record.kind is not TokenKind(expected_kind):
            return _UNKNOWN

        expired = self._clock() >= record.expires_at
        return TokenVerification(
            valid=not expired,
            expired=expired,
            owner_identity=record.owner_identity,
            kind=record.kind,
        )

    def get_record(self, token: str) -> Optional[TokenRecord]:
        if not is_well_formed(token):
            return None
        return self._table.get(token)

    def prune_expired(self, retention_millis: int = 0) -> int:
        """Drop records that expired more than ``retention_millis`` ago."""
        removed = self._table.prune(self._clock() - retention_millis)
        if removed:
            logger.info("Pruned %d expired token records", removed)
        return removed


__all__ = [
    "TOKEN_BYTES",
    "TokenIssuer",
    "TokenKind",
    "TokenRecord",
    "TokenTable",
    "TokenVerification",
    "is_well_formed",
]
