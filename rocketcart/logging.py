"""
Centralized logging configuration for RocketCart.

Usage:
    from rocketcart.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart committed")
    logger.error("Snapshot write failed", exc_info=True)

All loggers live under the ``rocketcart`` namespace, so one call to
``set_log_level`` (the CLI's ``--verbose``) adjusts the whole package.
"""

import logging
import os
import sys
from functools import cache

ROOT_LOGGER_NAME = "rocketcart"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"


def _get_log_level() -> int:
    """Level from ROCKETCART_LOG_LEVEL, then LOG_LEVEL, default INFO."""
    level_name = os.environ.get("ROCKETCART_LOG_LEVEL") or os.environ.get("LOG_LEVEL", "INFO")
    return getattr(logging, level_name.upper(), logging.INFO)


def _configure_root_logger() -> None:
    """Attach a stdout handler unless the host application already configured logging."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(_get_log_level())

    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    is_production = os.environ.get("ROCKETCART_ENV") == "production"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if is_production else LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    # Every stock/catalog lookup is an HTTP request
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_root_logger()


def set_log_level(level: int | str) -> None:
    """Change the level of every rocketcart logger."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Names outside the package namespace are nested under ``rocketcart``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape newlines and other control characters that could forge log entries."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: int | str | None, max_length: int = 12) -> str:
    """
    Sanitize a product identifier for safe logging.

    Identifiers come from callers and the remote catalog, so they are escaped
    and truncated before they reach a log line.

    Args:
        id_value: Identifier to sanitize (can be None)
        max_length: Maximum length to keep

    Returns:
        Sanitized identifier or "N/A" if empty
    """
    if id_value is None or id_value == "":
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:max_length] if len(safe_value) > max_length else safe_value


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "set_log_level",
    "sanitize_id_for_logging",
]
