"""
Utility modules for sagephase.

Provides logging and timing helpers shared by the pipeline and the CLI.
"""

from .logging import console, get_logger, log_call, setup_logging, timed

__all__ = [
    "console",
    "get_logger",
    "log_call",
    "setup_logging",
    "timed",
]
