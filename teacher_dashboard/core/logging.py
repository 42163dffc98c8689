"""
Logging utilities for the FastAPI application and maintenance scripts.

Provides a consistent logging format and keeps session tokens out of logs.
"""

import logging
import re
import sys

_TOKEN_PATTERN = re.compile(r"\b[a-f0-9]{64}\b")
REDACTED = "[redacted-token]"


class TokenRedactionFilter(logging.Filter):
    """Mask anything shaped like a session token in formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _TOKEN_PATTERN.sub(REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, TokenRedactionFilter) for f in handler.filters):
            handler.addFilter(TokenRedactionFilter())


__all__ = ["REDACTED", "TokenRedactionFilter", "configure_logging"]
