"""
Logging utilities for cdhit-clstr.

This module provides centralized logging configuration using loguru.
The library only emits records; sinks are installed by the command line
or by the embedding application.
"""

import sys
import time
import functools
from pathlib import Path
from typing import Optional, Any
from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    enable_json: bool = False,
) -> None:
    """
    Setup centralized logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        format_string: Custom format string
        enable_json: Enable JSON structured logging
    """
    # Remove default logger
    logger.remove()

    if format_string is None:
        if enable_json:
            format_string = "{message}"
        else:
            format_string = (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} | "
                "{message}"
            )

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=not enable_json,
        serialize=enable_json,
    )

    if log_file:
        logger.add(
            log_file,
            format=format_string,
            level=level,
            serialize=enable_json,
        )

    logger.debug("Logging system initialized")


class LoggerMixin:
    """Mixin class to add logging capabilities to any class."""

    @property
    def logger(self):
        """Get logger instance with class name."""
        return logger.bind(class_name=self.__class__.__name__)


def performance_monitor(func):
    """
    Decorator to log how long a function took.

    Args:
        func: Function to monitor

    Returns:
        Wrapped function with performance monitoring
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start_time = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(f"Performance: {func.__name__} executed in {time.time() - start_time:.3f}s")

    return wrapper
