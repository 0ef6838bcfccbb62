"""Centralized logging helpers.

Provides the process-level ``configure_logging`` used by the CLI and small
helpers for structured DEBUG traces (``extra_context``, ``Timer``) shared by
the registry and restore modules.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_OWNED = "_coobctl_handler"


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None, quiet: bool = False) -> None:
    """Configure the root logger once for the CLI process.

    Args:
        level: Level name; falls back to COOBCTL_LOG_LEVEL, then INFO.
        log_file: Optional path for an additional file handler.
        quiet: Only ERROR and above reach the console.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    # Only replace handlers installed by a previous call.
    for handler in list(root.handlers):
        if getattr(handler, _OWNED, False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level_value)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    if quiet:
        console.setLevel(logging.ERROR)
    setattr(console, _OWNED, True)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        setattr(file_handler, _OWNED, True)
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload, dropping empty fields."""
    return {key: value for key, value in fields.items() if value is not None}


def safe_url(url: str) -> str:
    """Strip credentials, query and fragment from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
