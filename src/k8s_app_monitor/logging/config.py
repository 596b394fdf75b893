"""Structured logging configuration using structlog.

The dashboard owns stdout, so console logs go to stderr and stay quiet
(WARNING) unless ``--verbose`` or ``--debug`` is passed. Everything is also
written as JSON to a rotating file for post-mortem inspection.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

LOG_DIR = Path.home() / ".local" / "state" / "k8s-monitor"
LOG_FILE = LOG_DIR / "monitor.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

# kubernetes/urllib3 are chatty at DEBUG and would flood the file log
QUIET_LOGGERS = ("kubernetes", "urllib3")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

# Marks handlers installed here so a second configure_logging() replaces them
_HANDLER_TAG = "_k8s_monitor_handler"


def console_level(verbose: bool = False, debug: bool = False) -> int:
    """Console log level for the ``--verbose`` / ``--debug`` flags."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _prune_rotated_logs() -> None:
    """Delete monitor logs older than RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in LOG_DIR.glob(f"{LOG_FILE.name}*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            continue


def _file_handler() -> RotatingFileHandler | None:
    """Rotating JSON file handler, or None when LOG_DIR is not writable."""
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None

    _prune_rotated_logs()
    handler = RotatingFileHandler(LOG_FILE, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    return handler


def _console_handler(level: int, debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
            ),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    return handler


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure structlog and the stdlib root logger for the monitor.

    Calling it again replaces the handlers a previous call installed.

    Args:
        verbose: INFO level on the console.
        debug: DEBUG level on the console, with locals in tracebacks.
    """
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

    root_logger = logging.getLogger()
    for old in [h for h in root_logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        root_logger.removeHandler(old)
        old.close()

    handlers = [_console_handler(console_level(verbose, debug), debug), _file_handler()]
    for handler in handlers:
        if handler is None:
            continue
        setattr(handler, _HANDLER_TAG, True)
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)  # handlers filter

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
