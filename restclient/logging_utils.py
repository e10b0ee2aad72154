"""Logging helpers for restclient."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOGGER_NAME = "restclient"
LOG_FORMAT = "[%(levelname)s] %(name)s %(message)s"

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class SensitiveHeaderFilter(logging.Filter):
    """Redact credential-bearing header values in mapping log arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict):
            record.args = {
                key: "[redacted]" if isinstance(key, str) and key.lower() in SENSITIVE_HEADERS else value
                for key, value in record.args.items()
            }
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: Optional[int] = None, *, debug: Optional[bool] = None) -> logging.Logger:
    """
    Send package log records to stderr.

    Without an explicit level, `DEBUG=1` in the environment selects
    logging.DEBUG and anything else logging.INFO. Calling this again only
    adjusts the level.
    """
    if debug is None:
        debug = debug_enabled()
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    logger = get_logger()
    logger.setLevel(level)
    if not any(getattr(handler, "_restclient", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(SensitiveHeaderFilter())
        handler._restclient = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = [
    "LOGGER_NAME",
    "SENSITIVE_HEADERS",
    "SensitiveHeaderFilter",
    "configure_logging",
    "debug_enabled",
    "get_logger",
]
