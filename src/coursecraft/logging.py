"""Logging utilities.

Log records carry the chat session, the turn number inside that session and the pipeline step
(classify, route, mutate) that emitted them. Hosts embedding the library can keep their own
handlers; :func:`configure_logging` only adds a rich console handler once.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler

_CONTEXT: dict[str, contextvars.ContextVar[str]] = {
    "session_id": contextvars.ContextVar("coursecraft_session_id", default="-"),
    "turn": contextvars.ContextVar("coursecraft_turn", default="-"),
    "step": contextvars.ContextVar("coursecraft_step", default="-"),
}

_FORMAT = "%(asctime)s %(levelname)s session=%(session_id)s turn=%(turn)s step=%(step)s %(name)s: %(message)s"
_HANDLER_MARK = "_coursecraft_handler"


class _ContextFilter(logging.Filter):
    """Copy the bound chat context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        for name, var in _CONTEXT.items():
            setattr(record, name, var.get())
        return True


@contextlib.contextmanager
def session_context(*, session_id: str, turn: int | None = None, step: str | None = None) -> Iterator[None]:
    """Bind chat context for every record logged inside the block.

    Args:
        session_id: Chat session identifier.
        turn: 1-based message number within the session.
        step: Pipeline step (e.g. "classify", "mutate").
    """

    values = {"session_id": session_id, "turn": str(turn) if turn is not None else None, "step": step}
    tokens = [(_CONTEXT[name], _CONTEXT[name].set(value)) for name, value in values.items() if value is not None]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def set_step(step: str) -> None:
    """Update the pipeline step of the current context."""

    _CONTEXT["step"].set(step)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, _HANDLER_MARK, False) for h in root.handlers):
        return

    # stdout carries command output (JSON)
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log the active exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
