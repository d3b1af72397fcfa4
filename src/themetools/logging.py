"""
Logging setup for theme-tools.

User-facing output goes through the rich console in ``cli_ui``; this module
only configures diagnostics (which file was read, which anchor matched,
which URL was fetched) on the ``themetools`` logger, written to stderr.
"""

from __future__ import annotations

import logging
import os
import sys

# =============================================================================
# Terminal Colors (respects NO_COLOR)
# =============================================================================

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stderr.isatty()


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "" if _NO_COLOR else "\033[0m"
    DIM = "" if _NO_COLOR else "\033[2m"

    DEBUG = "" if _NO_COLOR else "\033[36m"  # Cyan
    INFO = "" if _NO_COLOR else "\033[32m"  # Green
    WARNING = "" if _NO_COLOR else "\033[33m"  # Yellow
    ERROR = "" if _NO_COLOR else "\033[31m"  # Red
    CRITICAL = "" if _NO_COLOR else "\033[35m"  # Magenta


class ConsoleFormatter(logging.Formatter):
    """Short ``LEVEL name: message`` lines for stderr."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.INFO: Colors.INFO,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelno, "")
        level = f"{level_color}{record.levelname}{Colors.RESET}"
        name = f"{Colors.DIM}{record.name}{Colors.RESET}"
        message = f"{level} {name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


# =============================================================================
# Logger Setup
# =============================================================================

LOGGER_NAME = "themetools"


def resolve_level(verbose: bool = False, environ: dict[str, str] | None = None) -> int:
    """``--verbose`` wins, then ``LOG_LEVEL``, then WARNING."""
    if verbose:
        return logging.DEBUG
    env = os.environ if environ is None else environ
    name = env.get("LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """
    Attach a single stderr handler to the ``themetools`` logger.

    Calling it again replaces the handler, so repeated CLI invocations in
    one process (tests) do not stack handlers.

    Args:
        level: Minimum log level

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ConsoleFormatter())
    handler.setLevel(level)
    logger.addHandler(handler)

    return logger
