"""Tests for session-aware logging."""

from __future__ import annotations

import logging

from orgnav.logging import SessionRichHandler, _ContextFilter, configure_logging, session_context


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("orgnav.test", logging.INFO, __file__, 1, message, None, None)


def test_session_context_binds_record_fields() -> None:
    """It should stamp records with the bound session and restore it afterwards."""

    context_filter = _ContextFilter()
    inner, nested, outer = _record(), _record(), _record()

    with session_context(session_id=3, label="Go to"):
        context_filter.filter(inner)
        with session_context(session_id=4):
            context_filter.filter(nested)
    context_filter.filter(outer)

    assert (inner.session, inner.label) == ("3", "Go to")
    assert (nested.session, nested.label) == ("4", "Go to")
    assert (outer.session, outer.label) == ("-", "-")


def test_handler_prefixes_session() -> None:
    """It should prefix messages logged inside a picker session."""

    handler = SessionRichHandler()
    record = _record()
    record.session = "7"
    record.label = "Refile to"
    assert handler.render_message(record, "hello").plain == "[7:Refile to] hello"

    record.session = "-"
    assert handler.render_message(record, "hello").plain == "hello"


def test_configure_logging_is_idempotent() -> None:
    """It should keep a single session handler across repeated calls."""

    configure_logging("WARNING")
    configure_logging("INFO")

    root = logging.getLogger()
    assert sum(isinstance(h, SessionRichHandler) for h in root.handlers) == 1
    assert root.level == logging.INFO
    configure_logging("WARNING")
