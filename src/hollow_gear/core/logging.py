"""Structured logging for the Hollow Gear engine.

The engine logs state transitions (a character dying, a psionic
overload, a harness malfunction, migration steps, patch replay) through
structlog with keyword context. Hosts choose the output with
``configure_logging`` or ``configure_from_settings``; until then
structlog's defaults apply.

Example:
    >>> from hollow_gear.core.logging import character_context, get_logger
    >>> logger = get_logger(__name__)
    >>> with character_context("char-001"):
    ...     logger.info("Heat added", source="spellcasting", amount=3)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from hollow_gear.core.constants import CURRENT_SCHEMA_VERSION


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

_log_file: IO[str] | None = None


def add_engine_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp every entry with the engine name and snapshot schema version.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with engine context added.
    """
    event_dict.setdefault("engine", "hollow_gear")
    event_dict.setdefault("schema_version", CURRENT_SCHEMA_VERSION)
    return event_dict


def close_log_file() -> None:
    """Close the file opened by the last ``configure_logging`` call, if any."""
    global _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None


def _renderer(json_format: bool, colors: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=colors,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """Configure engine logging.

    Entries go to stderr, or are appended to ``log_file`` when one is
    given. Console output is only colored on a terminal. A file opened
    by an earlier call is closed first.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render one JSON object per line.
        log_file: Optional file that receives the entries instead of stderr.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    global _log_file
    close_log_file()

    stream: IO[str]
    if log_file is not None:
        stream = _log_file = Path(log_file).open("a", encoding="utf-8")
        logger_factory: Any = structlog.WriteLoggerFactory(file=stream)
    else:
        stream = sys.stderr
        logger_factory = structlog.PrintLoggerFactory(file=stream)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_engine_context,
            structlog.processors.StackInfoRenderer(),
            *_renderer(json_format, colors=stream.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


def configure_from_settings() -> None:
    """Configure logging from ``get_settings().logging``."""
    from hollow_gear.core.config import get_settings

    settings = get_settings().logging
    configure_logging(
        level=settings.level,
        json_format=settings.json_format,
        log_file=settings.file,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger for an engine module.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        A structlog BoundLogger.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every subsequent entry in this context.

    Example:
        >>> bind_context(session_id="table-7")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def character_context(character_id: str, **extra: Any) -> Iterator[None]:
    """Tag entries logged inside the block with a character id.

    Previously bound values are restored on exit.

    Args:
        character_id: Character being operated on.
        **extra: Further pairs to bind for the block.
    """
    with structlog.contextvars.bound_contextvars(character_id=character_id, **extra):
        yield


__all__ = [
    "add_engine_context",
    "configure_logging",
    "configure_from_settings",
    "close_log_file",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
