"""
Structured logging for the fixture dumper.

Manifesto:
    A dump is a batch job launched from a terminal or a CI step, and its
    fixture output may itself go to stdout. Logs therefore always go to
    stderr, as key-value events (``dumper.entity_rendered entity=...``),
    rendered for humans on a terminal and as JSON lines elsewhere.

Architecture:
    ::

        configure_logging(level, json_format)
          │
          ├── merge_contextvars        run_id / format bound by LogContext
          ├── add_log_level
          ├── TimeStamper(iso)         optional
          ├── service.name
          └── ConsoleRenderer │ JSONRenderer  ──►  stderr

Event names are dotted: ``<module>.<what happened>``, e.g.
``ordering.cycle_detected`` or ``writer.fixture_written``.

Examples:
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> with LogContext(run_id="3f2a9c", format="yml"):
    ...     logger.info("dumper.started")

Tags:
    logging, structlog, fixture-dumper

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from fixture_dumper.core.errors import ConfigError

_SERVICE_NAME = "fixture-dumper"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in _LEVELS:
        raise ConfigError(f"Unknown log level '{level}'. Use one of: {', '.join(_LEVELS)}")
    return getattr(logging, name)


def _processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [structlog.processors.StackInfoRenderer(), _add_service_name]

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    return processors


def configure_logging(
    level: str | int = "INFO",
    json_format: bool | None = None,
    service: str = "fixture-dumper",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for a dump run.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON lines if True, console if False, auto (JSON unless
            stderr is a tty) if None
        service: Value of the ``service.name`` key on every event
        add_timestamp: Prefix events with an ISO timestamp

    Raises:
        ConfigError: Unknown level name
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service
    numeric_level = _parse_level(level)

    if json_format is None:
        json_format = not sys.stderr.isatty()

    structlog.configure(
        processors=_processors(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )
    # SQLAlchemy and other stdlib loggers
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind keys onto every following event of this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Binds keys for the duration of a ``with`` block.

    Keys that were already bound outside the block get their previous value
    back on exit; keys that were not are removed.

    Example:
        with LogContext(run_id="3f2a9c", format="yml"):
            logger.info("dumper.started")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs
        self._previous: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        current = structlog.contextvars.get_contextvars()
        self._previous = {k: current[k] for k in self._context if k in current}
        bind_context(**self._context)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self._context)
        if self._previous:
            bind_context(**self._previous)


__all__ = [
    "LogContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
