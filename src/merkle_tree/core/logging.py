"""
Merkle Tree Proofs - Logging Configuration

Routes the package's structlog events through the stdlib "merkle_tree"
logger. The host application's root logger is never touched, and an
existing structlog configuration is kept unless force is set.
"""

import logging
import sys

import structlog

from merkle_tree.core.config import settings

PACKAGE_LOGGER = "merkle_tree"


class PackageHandler(logging.StreamHandler):
    """Stream handler installed once on the package logger."""


def resolve_log_level(level: str | None = None) -> int:
    """Pick the effective level: explicit argument, DEBUG flag, then LOG_LEVEL."""
    if level is not None:
        name = level
    elif settings.DEBUG:
        name = "DEBUG"
    else:
        name = settings.LOG_LEVEL

    resolved = logging.getLevelName(name.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level {name!r}")
    return resolved


def setup_logging(level: str | None = None, force: bool = False) -> logging.Logger:
    """
    Configure structured logging for the package.

    Args:
        level: Level name overriding settings
        force: Replace an existing structlog configuration

    Returns:
        The configured package logger
    """
    use_json = settings.ENV == "production"

    if force or not structlog.is_configured():
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=settings.DEBUG))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolve_log_level(level))

    if not any(isinstance(h, PackageHandler) for h in package_logger.handlers):
        handler = PackageHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    return package_logger
