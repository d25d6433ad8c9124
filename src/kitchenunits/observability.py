"""Diagnostic routing for the quantity algebra.

Soft problems (unrecognized units, prices that cannot be computed) never raise.
They are logged through the ``kitchenunits`` logger and forwarded to the sink
bound in the current context, so callers can collect or silence them without
touching process-wide logging.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from . import config

logger = logging.getLogger("kitchenunits")

LOG_FORMAT = "[%(levelname)s] %(message)s"


@dataclass(frozen=True)
class Diagnostic:
    """A soft problem reported while parsing or pricing quantities."""

    code: str
    message: str
    level: int = logging.WARNING
    context: Dict[str, Any] = field(default_factory=dict)


DiagnosticSink = Callable[[Diagnostic], None]

_sink_ctx: ContextVar[Optional[DiagnosticSink]] = ContextVar("diagnostic_sink", default=None)


def bind_sink(sink: Optional[DiagnosticSink]) -> Token:
    """Bind ``sink`` for the current context and return the reset token."""

    return _sink_ctx.set(sink)


def reset_sink(token: Optional[Token]) -> None:
    """Restore the sink that was active before :func:`bind_sink`."""

    if token is None:
        return
    _sink_ctx.reset(token)


def current_sink() -> Optional[DiagnosticSink]:
    return _sink_ctx.get()


def emit_diagnostic(code: str, message: str, *, level: int = logging.WARNING, **context: Any) -> Diagnostic:
    """Log ``message`` and hand the diagnostic to the bound sink, if any."""

    diagnostic = Diagnostic(code=code, message=message, level=level, context=dict(context))
    logger.log(level, message, extra={"payload": {"code": code, **context}})
    sink = current_sink()
    if sink is not None:
        sink(diagnostic)
    return diagnostic


@contextmanager
def capture_diagnostics() -> Iterator[List[Diagnostic]]:
    """Collect every diagnostic emitted inside the ``with`` block."""

    collected: List[Diagnostic] = []
    token = bind_sink(collected.append)
    try:
        yield collected
    finally:
        reset_sink(token)


def configure_logging(level: Optional[int] = None) -> None:
    """Install a basic handler using the configured level."""

    logging.basicConfig(level=level if level is not None else config.log_level(), format=LOG_FORMAT)


__all__ = [
    "Diagnostic",
    "DiagnosticSink",
    "bind_sink",
    "reset_sink",
    "current_sink",
    "emit_diagnostic",
    "capture_diagnostics",
    "configure_logging",
]
