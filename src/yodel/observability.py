"""Logging hooks shared by every stage of a load.

Purpose
    Give the resolver, detectors, discovery, adapters, and the composition root
    one way to report progress. Records carry a ``context`` attribute (the
    active trace id plus event fields) so JSON formatters can pick them up
    directly.

Contents
    - ``TRACE_ID``: context variable holding the id of the load in progress.
    - ``get_logger``: the ``yodel`` logger, silent until a handler is attached.
    - ``bind_trace_id``: set or clear ``TRACE_ID``.
    - ``log_debug`` / ``log_info`` / ``log_error``: level-specific wrappers.
    - ``make_event``: ``stage`` + ``path`` event dictionaries.

System Integration
    The domain layer stays free of logging; everything else imports from here.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

LOGGER_NAME: Final[str] = "yodel"

TRACE_ID: ContextVar[str | None] = ContextVar("yodel_trace_id", default=None)
"""Identifier of the load in progress, ``None`` outside an explicit binding."""

_LOGGER: Final[logging.Logger] = logging.getLogger(LOGGER_NAME)
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``yodel`` logger so applications can attach handlers or change its level."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Set the trace id reported with every record; ``None`` clears it.

    Examples
    --------
    >>> bind_trace_id('load-42')
    >>> TRACE_ID.get()
    'load-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(stage: str, path: str | None, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return ``{"stage": ..., "path": ..., **payload}`` for keyword expansion into ``log_*``.

    Examples
    --------
    >>> make_event('discover', '/srv/app', {'selected': 2})
    {'stage': 'discover', 'path': '/srv/app', 'selected': 2}
    >>> make_event('load', None)
    {'stage': 'load', 'path': None}
    """

    return {"stage": stage, "path": path, **(payload or {})}


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    # skip building the context dict when nobody listens at this level
    if _LOGGER.isEnabledFor(level):
        _LOGGER.log(level, message, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
