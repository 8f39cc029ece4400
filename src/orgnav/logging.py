"""Logging utilities.

Records emitted while a picker session is being opened or dispatched carry the
session id and search label. The console handler prefixes such messages with
``[<session>:<label>]`` so interleaved searches stay readable.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.text import Text

_NO_SESSION = "-"


@dataclass(frozen=True)
class _BoundSession:
    session_id: str
    label: str


_bound: contextvars.ContextVar[_BoundSession | None] = contextvars.ContextVar("orgnav_session", default=None)


class _ContextFilter(logging.Filter):
    """Copy the bound picker session onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        bound = _bound.get()
        record.session = bound.session_id if bound else _NO_SESSION  # type: ignore[attr-defined]
        record.label = bound.label if bound else _NO_SESSION  # type: ignore[attr-defined]
        return True


class SessionRichHandler(RichHandler):
    """RichHandler that tags messages with the picker session they belong to."""

    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        rendered = super().render_message(record, message)
        session = getattr(record, "session", _NO_SESSION)
        if session == _NO_SESSION or not isinstance(rendered, Text):
            return rendered
        tag = Text(f"[{session}:{getattr(record, 'label', _NO_SESSION)}] ", style="dim cyan")
        return Text.assemble(tag, rendered)


@contextlib.contextmanager
def session_context(*, session_id: int | str, label: str | None = None) -> Iterator[None]:
    """Bind a picker session to log records emitted inside the block.

    A nested binding without a label keeps the enclosing label.
    """

    outer = _bound.get()
    if label is None:
        label = outer.label if outer else _NO_SESSION
    token = _bound.set(_BoundSession(str(session_id), label))
    try:
        yield
    finally:
        _bound.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Install a single session-aware rich handler on the root logger.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if isinstance(h, SessionRichHandler)]:
        root.removeHandler(existing)

    handler = SessionRichHandler(rich_tracebacks=True, show_path=False)
    handler.addFilter(_ContextFilter())
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
