"""Structured logging via structlog.

Configures structlog once at application startup. Both `structlog.get_logger()`
and plain `logging.getLogger()` loggers (the client modules, httpx) end up
on one root handler whose `ProcessorFormatter` runs the same processor
chain, so every line has the same shape.

Renderer selection:
  debug=True:  `ConsoleRenderer` with colours for local development.
  debug=False: `JSONRenderer` for machine-parseable logs in production.

ContextVar injection:
  The `session_id` field is injected into every log line, structlog or
  stdlib, while an upload session is running (see `maquette.upload.session`).
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Optional, TextIO

import structlog

if TYPE_CHECKING:
    from maquette.core.config import Settings

_HANDLER_NAME = "maquette"

_session_id_var: ContextVar[str] = ContextVar("session_id", default="")


def get_session_id() -> str:
    """Return the current upload session ID, or empty string if not set."""
    return _session_id_var.get()


def bind_session_id(session_id: str) -> Token:
    """Set the session ID for the current context; returns a reset token."""
    return _session_id_var.set(session_id)


def reset_session_id(token: Token) -> None:
    _session_id_var.reset(token)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject session_id from its ContextVar."""
    session_id = get_session_id()
    if session_id:
        event_dict["session_id"] = session_id
    return event_dict


def configure_structlog(debug: bool = True, stream: Optional[TextIO] = None) -> None:
    """Configure structlog and the stdlib root handler.

    Call once from the host application before the first upload.
    Safe to call more than once: the previously installed handler is
    replaced, not duplicated.

    Args:
        debug: Console rendering at DEBUG level when true, JSON at INFO otherwise.
        stream: Where log lines go (default: stdout).
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    # structlog events are handed to stdlib logging and rendered by the
    # handler's formatter; caching is off so a reconfigure reaches
    # module-level loggers too.
    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def configure_logging(settings: "Settings") -> None:
    """Configure logging from client settings (`debug` picks the renderer)."""
    configure_structlog(debug=settings.debug)
