"""
Logging utilities for sagephase.

All loggers live under the "sagephase" namespace. Console output goes through
rich; an optional plain-text log file captures the same records for batch runs.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "console",
    "setup_logging",
    "get_logger",
    "timed",
    "log_call",
]

PACKAGE_LOGGER = "sagephase"

# Shared between log output and the pipeline's progress display
console = Console(stderr=True)


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """
    Configure the package logger.

    Args:
        verbose: If True, log at DEBUG (including per-MNV merge decisions).
        log_file: Optional path to also write plain-text logs to.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace for the given module name."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


@contextmanager
def timed(operation: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Log the wall-clock duration of a block at DEBUG.

    Example:
        with timed("Merging phased variants", logger):
            summary = pipeline.run()
    """
    log = logger or get_logger(__name__)
    start = time.perf_counter()
    log.debug("Starting: %s", operation)
    try:
        yield
    finally:
        log.debug("Completed: %s (%.3fs)", operation, time.perf_counter() - start)


def log_call(logger: logging.Logger | None = None) -> Callable:
    """
    Decorator logging entry, duration and failure of a function.

    Example:
        @log_call()
        def build_summary(merger: PhaseMerger) -> MergeSummary:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = logger or get_logger(func.__module__)
            log.debug("Calling %s", func.__name__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error("%s failed: %s", func.__name__, e)
                raise
            log.debug("%s completed (%.3fs)", func.__name__, time.perf_counter() - start)
            return result

        return wrapper

    return decorator
