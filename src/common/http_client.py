"""Shared HTTP helpers used by the catalog client and the archive fetcher.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. Transport failures surface as
HttpRequestError; callers translate them into their own error class.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import requests

from constants import Constants
from common.errors import HttpRequestError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(
    url: str,
    *,
    context: str,
    timeout: Optional[float] = None,
    log: Optional[logging.Logger] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "catalog").
        timeout: Seconds for connect and read; defaults to Constants.REQUEST_TIMEOUT.
        log: Logger to trace into; defaults to this module's logger.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        HttpRequestError: On timeout or connection failure.
    """
    log = log or logger
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(log):
            log.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            log.error("%s request timed out after %s seconds", context, timeout)
            raise HttpRequestError(safe_target, f"timed out after {timeout} seconds") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            log.error("%s connection error: %s", context, exc)
            raise HttpRequestError(safe_target, str(exc)) from exc
        if is_debug_enabled(log):
            log.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def download_to_file(
    url: str,
    dest: Union[str, Path],
    *,
    context: str,
    timeout: Optional[float] = None,
    log: Optional[logging.Logger] = None,
) -> int:
    """Stream a binary payload to ``dest``.

    The read timeout applies between chunks, so a stalled transfer fails
    rather than blocking. A partially written file is removed on failure.

    Returns:
        Number of bytes written.

    Raises:
        HttpRequestError: On transport failure or a non-200 status.
        OSError: ``dest`` cannot be written.
    """
    log = log or logger
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    safe_target = safe_url(url)
    written = 0
    try:
        with requests.get(url, timeout=timeout, stream=True) as res:
            if res.status_code != 200:
                raise HttpRequestError(safe_target, f"unexpected status code {res.status_code}")
            with open(dest, "wb") as fh:
                for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
                        written += len(chunk)
    except requests.Timeout as exc:
        _discard(dest)
        log.error("%s download timed out after %s seconds", context, timeout)
        raise HttpRequestError(safe_target, f"timed out after {timeout} seconds") from exc
    except requests.RequestException as exc:
        _discard(dest)
        log.error("%s download error: %s", context, exc)
        raise HttpRequestError(safe_target, str(exc)) from exc
    except HttpRequestError:
        _discard(dest)
        raise

    if is_debug_enabled(log):
        log.debug(
            "HTTP download complete",
            extra=extra_context(
                event="http_download",
                component="http_client",
                action="GET",
                target=safe_target,
                bytes=written,
                context=context
            )
        )
    return written


def _discard(path: Union[str, Path]) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove partial download %s: %s", path, exc)
