"""Logging setup for logtally.

All modules log through children of the ``logtally`` logger, which owns the only
handler. Records go to stderr; stdout carries the report.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "logtally"

# Set once the package logger has a handler attached
_ROOT_LOGGER_CONFIGURED = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach a single handler to the ``logtally`` logger.

    Repeated calls are no-ops until :func:`reset_logging` is called.

    Args:
        level: Logging level (default: INFO).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stderr StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stdout is reserved for the report itself
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees the records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``logtally`` namespace.

    Args:
        name: Logger name (typically ``__name__`` of the calling module).

    Returns:
        Logger that inherits level and handlers from the package logger.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the log level for all logtally loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    setup_root_logger()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Log per-line exclusions and other DEBUG records."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Back to INFO: progress and summary lines only."""
    set_global_log_level(logging.INFO)


def apply_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Set the package level from the command-line verbosity flags.

    ``verbose`` wins over ``quiet``. Neither flag means INFO.

    Returns:
        The level now in effect.
    """
    if verbose:
        enable_debug_logging()
    elif quiet:
        set_global_log_level(logging.WARNING)
    else:
        disable_debug_logging()
    return logging.getLogger(ROOT_LOGGER_NAME).level


def reset_logging() -> None:
    """Reset logging configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
