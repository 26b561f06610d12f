"""Centralized logging helpers.

Provides a single place to configure the root logger from the environment
and small helpers for structured ``extra`` payloads so call sites stay
consistent. Safe to import from any module; it has no internal imports
besides ``constants``.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from constants import Constants

_STANDARD_FIELDS = ("event", "component", "action", "outcome", "target")


def _level_from_env(default: int = logging.INFO) -> int:
    """Return the log level named by the environment, or ``default``."""
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "").strip().upper()
    if not name:
        return default
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[int] = None) -> None:
    """Configure the root logger once.

    Level precedence: explicit ``level`` argument, then the
    ``VERSCHEME_LOG_LEVEL`` environment variable, then INFO.
    """
    root = logging.getLogger()
    effective = level if level is not None else _level_from_env()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(effective)


def add_file_handler(path: str) -> logging.Handler:
    """Attach a file handler to the root logger and return it."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    Standard fields are always present (``None`` when not supplied) so
    formatters can reference them; ``None`` valued custom fields are dropped.
    """
    ctx: Dict[str, Any] = {name: fields.pop(name, None) for name in _STANDARD_FIELDS}
    ctx.update({k: v for k, v in fields.items() if v is not None})
    return ctx


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records for ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)
