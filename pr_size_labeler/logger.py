"""Loguru setup for the labeler.

Every record carries whichever of the delivery, event, repository and pull
request fields were bound with ``log_with_context``; they are rendered as a
``[key=value ...]`` suffix so one delivery can be followed through the logs.
"""

from __future__ import annotations

import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger as _logger

LOG_DIR_ENV = "APP_LOG_DIR"
LOG_LEVEL_ENV = "APP_LOG_LEVEL"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

CONTEXT_FIELDS = ("delivery_id", "event_type", "repository", "pull_number")

_CONFIGURED = False


def _format_record(record: dict) -> str:
    extra = record["extra"]
    fields = [f"{name}={extra[name]}" for name in CONTEXT_FIELDS if extra.get(name) is not None]
    extra["context"] = f" [{' '.join(fields)}]" if fields else ""
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        "<dim>{extra[context]}</dim>\n{exception}"
    )


def configure_logger() -> None:
    """Install the stdout sink and the daily file sink, once per process."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    log_dir = Path(os.getenv(LOG_DIR_ENV) or DEFAULT_LOG_DIR).expanduser().resolve()
    log_dir.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.add(
        sys.stdout,
        level=os.getenv(LOG_LEVEL_ENV, "INFO"),
        format=_format_record,
        colorize=sys.stdout.isatty(),
    )
    _logger.add(
        log_dir / "pr-size-labeler-{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format=_format_record,
        rotation="00:00",
        retention="7 days",
        enqueue=True,
    )
    _CONFIGURED = True


def get_logger():
    configure_logger()
    return _logger


def log_with_context(logger_instance, **context: str | int | None) -> Any:
    """Bind the non-empty context fields, e.g. ``delivery_id`` or ``pull_number``."""
    return logger_instance.bind(**{k: v for k, v in context.items() if v is not None})


@contextmanager
def log_timing(logger_instance, operation: str) -> Iterator[Any]:
    """Log how long ``operation`` took, and log it once at ERROR if it raises."""

    start_time = time.perf_counter()
    logger_instance.debug(f"Starting {operation}")
    try:
        yield logger_instance
    except Exception as exc:
        logger_instance.error(f"Failed {operation} after {time.perf_counter() - start_time:.3f}s: {exc}")
        raise
    logger_instance.debug(f"Completed {operation} in {time.perf_counter() - start_time:.3f}s")


def log_success(logger_instance, message: str, **context: str | int | None) -> None:
    log_with_context(logger_instance, **context).info(f"=== SUCCESS: {message} ===")


def log_failure(logger_instance, message: str, error: Exception | None = None, **context: str | int | None) -> None:
    ctx_logger = log_with_context(logger_instance, **context)
    suffix = f" | Error: {error}" if error else ""
    ctx_logger.error(f"=== FAILURE: {message}{suffix} ===")
