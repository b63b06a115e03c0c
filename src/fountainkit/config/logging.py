"""Logging configuration for fountainkit."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    TimeStamper,
    add_log_level,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import (
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
    render_to_log_kwargs,
)

from fountainkit.config.settings import FountainKitSettings

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _resolve_level(level_name: str) -> int:
    """Translate a level name into a ``logging`` level.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        valid = ", ".join(sorted(logging.getLevelNamesMapping()))
        raise ValueError(f"Invalid log level '{level_name}'. Valid levels are: {valid}")
    return level


def _console_renderer() -> Any:
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.rich_traceback,
    )


def _build_formatter(log_format: str) -> ProcessorFormatter:
    """Create the stdlib formatter that renders records for ``log_format``."""
    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    elif log_format == "structured":
        renderer = structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "event"],
            drop_missing=True,
        )
    else:
        renderer = _console_renderer()
    return ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[TimeStamper(fmt="iso"), add_log_level, add_logger_name],
    )


def _build_handlers(
    settings: FountainKitSettings, formatter: logging.Formatter, level: int
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(settings.log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def configure_logging(settings: FountainKitSettings) -> None:
    """Configure stdlib logging and structlog from settings.

    Args:
        settings: Application settings containing logging configuration.

    Raises:
        ValueError: If the log level is not a known logging level.
    """
    level = _resolve_level(settings.log_level)
    formatter = _build_formatter(settings.log_format)

    logging.basicConfig(
        level=level,
        handlers=_build_handlers(settings, formatter, level),
        force=True,
    )
    logging.getLogger().setLevel(level)

    processors: list[Any] = [
        merge_contextvars,
        filter_by_level,
        TimeStamper(fmt="iso"),
        add_log_level,
        dict_tracebacks,
    ]
    if settings.debug:
        processors.append(
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    # pytest's caplog only sees records routed through the stdlib formatter
    in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
    processors.append(format_exc_info)
    if settings.log_format in {"json", "structured"} or in_pytest:
        processors.extend([render_to_log_kwargs, ProcessorFormatter.wrap_for_formatter])
    else:
        processors.append(_console_renderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger.

    Args:
        name: Logger name (usually __name__).

    Returns:
        Structlog logger bound to ``name``.
    """
    return structlog.get_logger(name)
