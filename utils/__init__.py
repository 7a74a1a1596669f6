# utils/__init__.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Utility module exports

from .logger import LogLevel, MarbleLogger, configure_logging, get_logger, set_log_level
from .comparable import comparable_error

__all__ = [
    "LogLevel",
    "MarbleLogger",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "comparable_error",
]
