"""Structured logging configuration using structlog."""

import logging
import sys
from pathlib import Path
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "reqspec"
APP_VERSION = "0.3.0"

# Root handlers installed by setup_logging(); replaced on every call
_installed_handlers: list[logging.Handler] = []


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log entries."""
    event_dict["app"] = APP_NAME
    event_dict["version"] = APP_VERSION
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call repeatedly: the CLI reconfigures logging from the loaded
    config after the import-time defaults, and the new level and handlers
    replace the previous ones.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "console")
        log_file: Optional log file path, in addition to the stream
        stream: Stream for log lines (defaults to the current stderr)
    """
    # Convert log level string to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure structlog processors
    shared_processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if log_format == "console":
        # Console-friendly output
        processors = shared_processors + [
            structlog.processors.ExceptionPrettyPrinter(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # JSON output
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Drop handlers from a previous call
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    # Log lines go to stderr so CLI output on stdout stays machine-readable
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]

    # Add file handler if log_file specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        _installed_handlers.append(handler)

    root_logger.setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("requirement_finalized", title="Backend Engineer", region="gulf")
    """
    return structlog.get_logger(name)


# Initialize logging on module import with defaults
# Can be reconfigured later with setup_logging()
setup_logging()
