"""
Logging for SmartCart.

Every module logs through ``get_logger(__name__)``. Handlers live on the
``smartcart`` and ``api`` loggers only, so an embedding server (uvicorn,
Vercel) keeps control of the root logger.

Product names, feed keys and payment notes come from users or from the
trolley device; pass them through the sanitize helpers before logging.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_PRODUCTION = "[%(levelname)s] %(name)s: %(message)s"

APP_LOGGERS = ("smartcart", "api")

_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the application loggers (idempotent)."""
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    production = os.environ.get("ENVIRONMENT", "").lower() == "production"
    formatter = logging.Formatter(LOG_FORMAT_PRODUCTION if production else LOG_FORMAT)

    for name in APP_LOGGERS:
        app_logger = logging.getLogger(name)
        app_logger.setLevel(numeric_level)
        if not app_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(formatter)
            app_logger.addHandler(handler)
        app_logger.propagate = False

    # Upstash and Supabase both go through httpx, which logs each request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _clean(value) -> str:
    return str(value).translate(_CONTROL_CHARS)


def sanitize_id_for_logging(id_value, keep: int = 8) -> str:
    """Short, single-line form of an id (product, payment, account)."""
    if not id_value:
        return "N/A"
    return _clean(id_value)[:keep]


def sanitize_string_for_logging(value, max_length: int = 50) -> str:
    """
    Single-line, truncated form of free text.

    Used for product names, feed keys and admin notes.
    """
    if not value:
        return "N/A"
    text = _clean(value)
    return text if len(text) <= max_length else f"{text[:max_length]}..."


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
