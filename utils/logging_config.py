"""
Logging configuration for c7-mirror.

Console output goes to stderr so stdout stays clean for `list --json`.
Each run also appends to a rotating text log and, optionally, a JSON log
that carries the project id of per-project records.
"""

import functools
import inspect
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "c7_mirror"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(lineno)d | %(message)s"


class StructuredFormatter(logging.Formatter):
    """JSON-structured log formatter for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "project"):
            log_data["project"] = record.project
        return json.dumps(log_data)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for human readability."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    console: bool = True,
    json_logs: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the `c7_mirror` logger tree and return its root.

    Clears handlers left by a previous call, so the CLI and tests can call
    it repeatedly. Log files rotate at `max_bytes`, keeping `backup_count`
    old files.
    """
    log_dir = log_dir or Path.home() / ".c7_mirror" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        formatter_cls = ColoredFormatter if sys.stderr.isatty() else logging.Formatter
        console_handler.setFormatter(formatter_cls(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "c7_mirror.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root_logger.addHandler(file_handler)

    if json_logs:
        json_handler = logging.handlers.RotatingFileHandler(
            log_dir / "c7_mirror.json.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        json_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(json_handler)

    return root_logger


def log_performance(logger: Optional[logging.Logger] = None):
    """Decorator to log execution time of a function or coroutine function."""

    def decorator(func):
        def _log(start: float, error: Optional[Exception] = None) -> None:
            log = logger or get_logger(func.__module__)
            elapsed = (time.monotonic() - start) * 1000
            if error is None:
                log.debug(f"{func.__name__} completed in {elapsed:.1f}ms")
            else:
                log.error(f"{func.__name__} failed after {elapsed:.1f}ms: {error}", exc_info=True)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.monotonic()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _log(start, e)
                    raise
                _log(start)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log(start, e)
                raise
            _log(start)
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
