"""Logging setup for netpaths.

All modules log through children of the ``netpaths`` logger. Library use
gets a single stdout handler at INFO; the command-line tool moves that
handler to stderr so log lines never mix with JSON written to stdout.
"""

import logging
import sys
from typing import Optional, TextIO

# Set once the package logger has its handler
_ROOT_LOGGER_CONFIGURED = False

ROOT_LOGGER_NAME = "netpaths"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Set up the package logger with a single handler.

    Repeated calls are no-ops until ``reset_logging`` is called.

    Args:
        level: Logging level (default: INFO).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stdout StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger that defers to the ``netpaths`` logger's level.

    Args:
        name: Logger name, normally the calling module's ``__name__``.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package logger and its handlers."""
    setup_root_logger()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def set_log_stream(stream: TextIO) -> None:
    """Point the package's stream handlers at ``stream``.

    File handlers are left alone.
    """
    setup_root_logger()

    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        if type(handler) is logging.StreamHandler:
            handler.setStream(stream)


def configure_cli_logging(
    verbose: bool = False, quiet: bool = False, stream: Optional[TextIO] = None
) -> int:
    """Apply the command-line logging flags.

    ``verbose`` wins over ``quiet``. Logs go to ``stream``, stderr by default.

    Returns:
        The level now in effect.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    set_log_stream(sys.stderr if stream is None else stream)
    set_global_log_level(level)
    return level


def reset_logging() -> None:
    """Drop the package handler so the next setup starts fresh (for tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
