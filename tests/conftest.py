"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from teacher_dashboard.services import SessionManager, SessionStore, TokenIssuer, TokenTable


class ManualClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, *, minutes: float = 0, days: float = 0, millis: int = 0) -> None:
        self.now += int(minutes * 60_000) + int(days * 86_400_000) + millis


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def issuer(clock: ManualClock) -> TokenIssuer:
    return TokenIssuer(TokenTable(), clock=clock)


@pytest.fixture
def manager(issuer: TokenIssuer) -> SessionManager:
    return SessionManager(issuer, SessionStore())
