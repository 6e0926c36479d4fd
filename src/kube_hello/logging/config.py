"""Structured logging configuration using structlog.

structlog renders through stdlib logging, so two handlers receive every
event: a console handler on stderr whose level follows ``--verbose`` and
``--debug``, and a rotating JSON file that always records DEBUG.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

LOG_DIR = Path.home() / ".local" / "state" / "khello"
LOG_FILE = LOG_DIR / "khello.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

# Handlers installed by configure_logging(), replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


def _formatter(renderer: structlog.types.Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_SHARED_PROCESSORS,
    )


def _cleanup_old_logs() -> None:
    """Delete rotated log files older than RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in LOG_DIR.glob(f"{LOG_FILE.name}*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            continue


def _setup_file_logging() -> logging.Handler | None:
    """Attach the rotating JSON file handler to the root logger.

    Returns:
        The installed handler, or None if the log directory is not writable.
    """
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        _cleanup_old_logs()
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
        )
    except OSError:
        return None

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    logging.getLogger().addHandler(file_handler)
    return file_handler


def _remove_installed_handlers() -> None:
    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
) -> None:
    """Configure structured logging for the application.

    Calling it again replaces the handlers of the previous call.

    Args:
        verbose: Show INFO events on the console.
        debug: Show DEBUG events on the console, with locals in tracebacks.
        json_output: Render console events as JSON.
    """
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _remove_installed_handlers()

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_formatter(renderer))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if file_handler := _setup_file_logging():
        _installed_handlers.append(file_handler)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally bound to initial context.

    Args:
        name: Logger name, usually ``__name__``.
        **initial_context: Key/value pairs included in every event.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
