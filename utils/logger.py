# utils/logger.py
# This file is part of Marbletime - Virtual-Time Marble Testing
#
# Logging utility for marble parsing and virtual-time scheduling

import logging
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for marble testing."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class MarbleLogger:
    """Centralized logger for marble testing with structured output."""

    def __init__(self, name: str = "marbletime", level: LogLevel = LogLevel.INFO):
        """Initialize the marble logger.

        Args:
            name: Logger name (typically module name)
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = StdoutHandler()
        console_handler.setLevel(level.value)
        console_handler.setFormatter(MarbleFormatter())

        self.logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    def is_debug(self) -> bool:
        """True when DEBUG records would be emitted."""
        return self.logger.isEnabledFor(logging.DEBUG)

    # Core logging methods
    def debug(self, message: str, **kwargs):
        """Log debug message (detailed internal state)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Specialized methods for marble testing events
    def diagram_parsed(self, diagram: str, event_count: int, terminal: Optional[str] = None):
        """Log a compiled diagram."""
        terminal_str = f", terminal={terminal}" if terminal else ""
        self.debug(f"Parsed '{diagram}' into {event_count} event(s){terminal_str}")

    def action_scheduled(self, frame: int, sequence: int, now: int):
        """Log an action entering the clock queue."""
        self.debug(f"    ⏱  scheduled #{sequence} at frame {frame} (now={now})")

    def frame_advanced(self, previous: int, current: int):
        """Log a clock advance."""
        if previous != current:
            self.debug(f"    ⏩ frame {previous} → {current}")

    def flush_summary(self, executed: int, skipped: int, now: int):
        """Log the outcome of a drain."""
        self.debug(
            f"Flush finished at frame {now}: {executed} action(s) run, {skipped} cancelled"
        )

    def subscription_logged(self, kind: str, frame: int, index: int):
        """Log subscribe/unsubscribe bookkeeping."""
        self.debug(f"    📎 {kind} #{index} at frame {frame}")

    def comparison_result(self, label: str, success: bool):
        """Log a deferred comparison."""
        if success:
            self.debug(f"✅ {label} matched")
        else:
            self.debug(f"❌ {label} did not match")


class StdoutHandler(logging.StreamHandler):
    """Console handler writing to whatever sys.stdout is at emit time."""

    def __init__(self):
        super().__init__(sys.stdout)

    @property
    def stream(self):
        return sys.stdout

    @stream.setter
    def stream(self, value):
        pass


class MarbleFormatter(logging.Formatter):
    """Custom formatter with clean output."""

    def format(self, record):
        # For INFO level and above, show message only (clean output)
        if record.levelno >= logging.INFO:
            return record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"[DEBUG] {record.getMessage()}"

        return f"[{record.levelname}] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[MarbleLogger] = None


def get_logger(name: str = "marbletime") -> MarbleLogger:
    """Get or create the global marble logger instance.

    Args:
        name: Logger name (default: "marbletime")

    Returns:
        MarbleLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = MarbleLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    get_logger().set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
