"""Logging utilities for stencil.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or a log file. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

# Open log files keyed by resolved path, shared by every logger writing there
_LOG_FILES: dict[Path, TextIO] = {}


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks STENCIL_DEBUG first (sets DEBUG if present), then STENCIL_LOG_LEVEL.
    Defaults to INFO if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("STENCIL_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("STENCIL_LOG_LEVEL", "info").upper(), logging.INFO)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, STENCIL_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("STENCIL_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _open_log_file(path: Path) -> TextIO:
    """Return the append-mode handle for a log file, opening it once.

    Handles stay open for the life of the process.
    """
    key = path.resolve()
    handle = _LOG_FILES.get(key)
    if handle is None or handle.closed:
        key.parent.mkdir(parents=True, exist_ok=True)
        handle = key.open("a", encoding="utf-8")
        _LOG_FILES[key] = handle
    return handle


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    component: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    The log level is determined by (in order of precedence):
    1. STENCIL_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. STENCIL_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to a log file opened in append mode. Empty writes
            to stderr.
        component: Component name bound to all log entries, if given.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = (
        _log_level_from_string(level, respect_env=True)
        if level is not None
        else _get_log_level()
    )

    if log_file:
        logger_factory = structlog.WriteLoggerFactory(file=_open_log_file(Path(log_file)))
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )

    if component:
        return logger.bind(component=component)
    return logger
