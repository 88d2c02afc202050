"""Runtime infrastructure for scanpay.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Configuration loading via load_parser_limits(), load_vendor_templates()

Usage:
    from scanpay.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.config)
"""

from scanpay.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    LOG_LEVELS,
    LOGGER_NAMESPACE,
    configure_logging,
    get_logger,
    set_log_level,
)
from scanpay.runtime.parser_rules import clear_rule_caches, load_parser_limits, load_vendor_templates
from scanpay.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    "LOG_LEVELS",
    "LOGGER_NAMESPACE",
    # Rules
    "load_parser_limits",
    "load_vendor_templates",
    "clear_rule_caches",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
