"""Centralized logging configuration for scanpay.

Usage:
    from scanpay.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Detailed debug info")
    logger.info("General info")

Environment variables:
    SCANPAY_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOGGER_NAMESPACE = "scanpay_local"

# Names accepted by SCANPAY_LOG_LEVEL and the CLI --log-level option.
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get("SCANPAY_LOG_LEVEL", "")
    if isinstance(level, str):
        return LOG_LEVELS.get(level.strip().upper(), DEFAULT_LOG_LEVEL)
    return level


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | str | None = None) -> None:
    """Attach a stderr handler to the scanpay logger namespace, once.

    Args:
        level: Level number or name. If None, reads SCANPAY_LOG_LEVEL and
               falls back to DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    resolved = _resolve_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter_for(resolved))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the scanpay namespace, typically for __name__."""
    configure_logging()
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> int:
    """Change the log level at runtime and return the level now in effect.

    Handlers switch to the line-numbered format at DEBUG and back otherwise.
    """
    configure_logging()
    resolved = _resolve_level(level)
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    for handler in namespace_logger.handlers:
        handler.setFormatter(_formatter_for(resolved))
    return resolved
