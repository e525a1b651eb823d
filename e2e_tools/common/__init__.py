"""
================================================================================
E2E Tools Common Utilities
================================================================================

Shared logging setup for the framework, the pytest plugins and the CLI runner.

Exports:
    - init_logger: Configure the loguru sinks once per process
    - DEFAULT_LOG_FORMAT: Console format used when none is given

Usage:
    from e2e_tools.common import init_logger

    init_logger(level="DEBUG", log_file="reports/logs/e2e.log")

================================================================================
"""

import os
import sys
import threading
from typing import Optional

from loguru import logger


DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False
_init_lock = threading.Lock()


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Safe to call from every entry point; only the first call configures sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.
        format_string: Log format string. Uses DEFAULT_LOG_FORMAT if not provided.
        log_file: Optional file path to write logs to.
        rotation: Rotation policy for the file sink.
        retention: Retention policy for the file sink.
    """
    global _logger_initialized

    with _init_lock:
        if _logger_initialized:
            return

        level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        format_string = format_string or DEFAULT_LOG_FORMAT

        logger.remove()
        logger.add(
            sys.stderr,
            format=format_string,
            level=level,
            colorize=True,
            enqueue=True,
        )

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            logger.add(
                log_file,
                format=format_string,
                level=level,
                rotation=rotation,
                retention=retention,
                enqueue=True,
            )

        _logger_initialized = True

    logger.debug(f"Logger initialized with level: {level}")


__all__ = [
    "DEFAULT_LOG_FORMAT",
    "init_logger",
]
