"""Centralized logging helpers.

Configures the root logger once from the environment and provides small
helpers for structured DEBUG traces that stay cheap when DEBUG is off.
"""
from __future__ import annotations

import logging
import os
import sys
import time
import urllib.parse
from typing import Any, Dict, Optional

from packagedetails.constants import Constants


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    The level comes from ``level`` when given, else from the
    PACKAGEDETAILS_LOG_LEVEL environment variable, else INFO. Calling this
    again replaces the handler installed by a previous call instead of
    stacking a second one.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_packagedetails", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    handler._packagedetails = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call.

    None values are dropped so traces only carry what was known.
    """
    return {key: value for key, value in fields.items() if value is not None}


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urllib.parse.urlsplit(url)
        port = parts.port
    except ValueError:
        return "<invalid url>"
    netloc = parts.hostname or ""
    if port:
        netloc = f"{netloc}:{port}"
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Milliseconds elapsed so far, or in total once the block exited."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
