"""
Session lifecycle management.

A session pairs one short-lived access token with one long-lived refresh
token issued for the same identity. The manager classifies presented token
pairs into one of four states and swaps in a new access token when only the
refresh token is still good.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

from teacher_dashboard.services.tokens import TokenIssuer, TokenKind, TokenVerification
from teacher_dashboard.utils.clock import seconds_to_millis

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=30)
REFRESH_TOKEN_TTL = timedelta(days=28)

ACCESS_TOKEN_TTL_MS = seconds_to_millis(ACCESS_TOKEN_TTL.total_seconds())
REFRESH_TOKEN_TTL_MS = seconds_to_millis(REFRESH_TOKEN_TTL.total_seconds())

# Expired token records outlive their expiry by this much before a sweep drops
# them, so an access token is still known long after its refresh partner lapses.
TOKEN_RECORD_RETENTION_MS = 2 * REFRESH_TOKEN_TTL_MS


class SessionState(str, Enum):
    ACTIVE = "Active"
    REFRESHABLE = "Refreshable"
    EXPIRED = "Expired"
    INVALIDATED = "Invalidated"


class InvalidRefreshTokenError(Exception):
    """Raised when a refresh is attempted with a token that does not verify."""


@dataclass(slots=True)
class Session:
    """Token pair issued together for one identity. Timestamps are epoch ms."""

    access_token: str
    refresh_token: str
    owner_identity: str
    issued_at: int
    access_token_expires_at: int
    refresh_token_expires_at: int


@dataclass(frozen=True, slots=True)
class SessionCheck:
    """Result of the session-check flow."""

    state: SessionState
    session: Optional[Session] = None
    refreshed: bool = False

    @property
    def authenticated(self) -> bool:
        return self.session is not None and self.state in (
            SessionState.ACTIVE,
            SessionState.REFRESHABLE,
        )


def classify_verifications(
    access: TokenVerification, refresh: TokenVerification
) -> SessionState:
    """Map a pair of token verifications to a session state.

    The access token always wins; the refresh token only matters once the
    access token is known to be unusable.
    """
    if access.valid:
        return SessionState.ACTIVE
    if refresh.valid:
        return SessionState.REFRESHABLE
    if access.expired and refresh.expired:
        return SessionState.EXPIRED
    return SessionState.INVALIDATED


class SessionStore:
    """In-memory session records keyed by access token."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def store(self, session: Session) -> None:
        self._sessions[session.access_token] = session

    def get(self, access_token: str) -> Optional[Session]:
        if not access_token:
            return None
        return self._sessions.get(access_token)

    def remove(self, access_token: str) -> Optional[Session]:
        return self._sessions.pop(access_token, None)

    def get_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        if not refresh_token:
            return None
        for session in self._sessions.values():
            if session.refresh_token == refresh_token:
                return session
        return None

    def rekey(self, old_access_token: str, session: Session) -> None:
        """Move ``session`` from ``old_access_token`` to its current access token."""
        if old_access_token != session.access_token:
            self._sessions.pop(old_access_token, None)
        self._sessions[session.access_token] = session

    def prune_expired(self, now: int) -> int:
        """Remove sessions whose refresh token has lapsed."""
        stale = [
            key
            for key, session in self._sessions.items()
            if now >= session.refresh_token_expires_at
        ]
        for key in stale:
            del self._sessions[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


class SessionManager:
    """Create, classify, refresh and end sessions."""

    def __init__(self, issuer: TokenIssuer, store: SessionStore | None = None) -> None:
        self._issuer = issuer
        self._store = store if store is not None else SessionStore()

    @property
    def issuer(self) -> TokenIssuer:
        return self._issuer

    @property
    def sessions(self) -> SessionStore:
        return self._store

    def create_session(self, identity: str) -> Session:
        """Issue a fresh access/refresh token pair for ``identity``."""
        issued_at = self._issuer.now()
        access_token = self._issuer.issue(
            identity, TokenKind.ACCESS, ACCESS_TOKEN_TTL_MS, now=issued_at
        )
        refresh_token = self._issuer.issue(
            identity, TokenKind.REFRESH, REFRESH_TOKEN_TTL_MS, now=issued_at
        )
        return Session(
            access_token=access_token,
            refresh_token=refresh_token,
            owner_identity=identity,
            issued_at=issued_at,
            access_token_expires_at=issued_at + ACCESS_TOKEN_TTL_MS,
            refresh_token_expires_at=issued_at + REFRESH_TOKEN_TTL_MS,
        )

    def classify(self, access_token: str, refresh_token: str) -> SessionState:
        access = self._issuer.verify(access_token, expected_kind=TokenKind.ACCESS)
        if access.valid:
            return SessionState.ACTIVE
        refresh = self._issuer.verify(refresh_token, expected_kind=TokenKind.REFRESH)
        return classify_verifications(access, refresh)

    def refresh(self, refresh_token: str) -> str:
        """Issue a new access token for the owner of ``refresh_token``.

        The refresh token itself is left untouched.
        """
        verification = self._issuer.verify(refresh_token, expected_kind=TokenKind.REFRESH)
        if not verification.valid or not verification.owner_identity:
            logger.warning("Rejected refresh attempt with an unusable refresh token")
            raise InvalidRefreshTokenError("Invalid refresh token.")
        return self._issuer.issue(
            verification.owner_identity, TokenKind.ACCESS, ACCESS_TOKEN_TTL_MS
        )

    # Session store operations

    def store(self, session: Session) -> None:
        self._store.store(session)

    def get(self, access_token: str) -> Optional[Session]:
        return self._store.get(access_token)

    def remove(self, access_token: str) -> Optional[Session]:
        return self._store.remove(access_token)

    def get_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        return self._store.get_by_refresh_token(refresh_token)

    # Flows used by the HTTP layer

    def login(self, identity: str) -> Session:
        session = self.create_session(identity)
        self._store.store(session)
        logger.info("Created session for %s", identity)
        return session

    def refresh_session(self, session: Session) -> Session:
        """Write a new access token and expiry into ``session`` and re-key it."""
        old_access_token = session.access_token
        new_access_token = self.refresh(session.refresh_token)
        record = self._issuer.get_record(new_access_token)
        if record is None:  # pragma: no cover - issue() always stores the record
            raise InvalidRefreshTokenError("Issued access token is missing.")
        session.access_token = new_access_token
        session.access_token_expires_at = record.expires_at
        self._store.rekey(old_access_token, session)
        logger.info("Refreshed access token for %s", session.owner_identity)
        return session

    def check_session(self, access_token: str, refresh_token: str) -> SessionCheck:
        """Classify a presented token pair and refresh it when possible."""
        state = self.classify(access_token, refresh_token)

        if state is SessionState.ACTIVE:
            session = self._store.get(access_token)
            if session is None or session.refresh_token != refresh_token:
                return SessionCheck(state=state)
            return SessionCheck(state=state, session=session)

        if state is SessionState.REFRESHABLE:
            session = self._store.get_by_refresh_token(refresh_token)
            if session is None:
                return SessionCheck(state=state)
            return SessionCheck(
                state=state, session=self.refresh_session(session), refreshed=True
            )

        return SessionCheck(state=state)

    def logout(self, access_token: str | None, refresh_token: str | None = None) -> bool:
        """Remove the session owning either token. Token records are kept."""
        session = self._store.remove(access_token) if access_token else None
        if session is None and refresh_token:
            session = self._store.get_by_refresh_token(refresh_token)
            if session is not None:
                self._store.remove(session.access_token)
        if session is None:
            return False
        logger.info("Removed session for %s", session.owner_identity)
        return True

    def sweep(self, now: int | None = None) -> Tuple[int, int]:
        """Evict stale sessions and long-expired token records.

        Token records are kept for TOKEN_RECORD_RETENTION_MS past their expiry
        so that a recently lapsed pair still classifies as expired.
        """
        current = self._issuer.now() if now is None else now
        sessions_removed = self._store.prune_expired(current)
        tokens_removed = self._issuer.table.prune(current - TOKEN_RECORD_RETENTION_MS)
        if sessions_removed or tokens_removed:
            logger.info(
                "Swept %d stale sessions and %d expired token records",
                sessions_removed,
                tokens_removed,
            )
        return sessions_removed, tokens_removed


__all__ = [
    "ACCESS_TOKEN_TTL",
    "ACCESS_TOKEN_TTL_MS",
    "InvalidRefreshTokenError",
    "REFRESH_TOKEN_TTL",
    "REFRESH_TOKEN_TTL_MS",
    "Session",
    "SessionCheck",
    "SessionManager",
    "SessionState",
    "SessionStore",
    "TOKEN_RECORD_RETENTION_MS",
    "classify_verifications",
]
