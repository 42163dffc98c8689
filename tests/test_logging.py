import logging

from teacher_dashboard.core.logging import REDACTED, TokenRedactionFilter


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args or None, None)


def test_filter_masks_token_arguments() -> None:
    token = "ab" * 32
    record = _record("Issued %s for %s", token, "t@x.com")

    assert TokenRedactionFilter().filter(record) is True
    assert record.getMessage() == f"Issued {REDACTED} for t@x.com"


def test_filter_leaves_ordinary_messages_alone() -> None:
    record = _record("Created session for %s", "t@x.com")

    TokenRedactionFilter().filter(record)

    assert record.args == ("t@x.com",)
    assert record.getMessage() == "Created session for t@x.com"
