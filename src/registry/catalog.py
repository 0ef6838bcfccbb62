"""Catalog client: fetch the repository listing and pick the latest version."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from common.errors import CatalogMalformed, CatalogUnavailable, HttpRequestError
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from versioning.models import PackageVersion
from versioning.parser import parse_catalog_key

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}

# Archive names split only with at least major.minor.patch
MIN_RESTORABLE_PRECISION = 3


class CatalogClient:
    """Reads the JSON listing of published ``.coob`` archives."""

    def __init__(self, timeout: Optional[float] = None, log: Optional[logging.Logger] = None):
        self.timeout = timeout
        self.log = log or logger

    def fetch_listing(self, base_uri: str) -> Dict[str, Any]:
        """GET ``base_uri`` and return the listing object.

        Raises:
            CatalogUnavailable: Network failure or non-200 status.
            CatalogMalformed: Body is not a JSON object.
        """
        try:
            res = safe_get(base_uri, context="catalog", timeout=self.timeout,
                           log=self.log, headers=HEADERS_JSON)
        except HttpRequestError as exc:
            raise CatalogUnavailable(f"Catalog at {exc.url} is unavailable: {exc.reason}") from exc

        if res.status_code != 200:
            raise CatalogUnavailable(
                f"Catalog at {safe_url(base_uri)} returned status code {res.status_code}"
            )
        try:
            body = json.loads(res.text)
        except ValueError as exc:
            raise CatalogMalformed(f"Catalog at {safe_url(base_uri)} is not valid JSON") from exc
        if not isinstance(body, dict):
            raise CatalogMalformed(
                f"Catalog at {safe_url(base_uri)} is not a JSON object (got {type(body).__name__})"
            )
        self.log.info("Catalog listing fetched: %d entries.", len(body))
        return body

    def latest_version(
        self,
        listing: Mapping[str, Any],
        package_id: str,
        ceiling: Optional[PackageVersion] = None,
    ) -> Optional[PackageVersion]:
        """Return the highest listed version of ``package_id`` below ``ceiling``.

        Two-component entries are skipped since they cannot be fetched.
        Entries whose precision differs from the ceiling's are skipped since
        versions are never zero-extended. Returns None when nothing qualifies.
        """
        best: Optional[PackageVersion] = None
        for key, version in _candidates(listing, package_id):
            if version.precision < MIN_RESTORABLE_PRECISION:
                self._skip(key, "too few components to restore")
                continue
            if ceiling is not None:
                if version.precision != ceiling.precision:
                    self._skip(key, "precision differs from ceiling")
                    continue
                if version >= ceiling:
                    self._skip(key, "at or above ceiling")
                    continue
            if best is None or version > best:
                best = version
        return best

    def _skip(self, key: str, reason: str) -> None:
        if is_debug_enabled(self.log):
            self.log.debug(
                "Catalog entry skipped",
                extra=extra_context(event="decision", component="catalog",
                                    target=key, outcome=reason)
            )


def _candidates(listing: Mapping[str, Any], package_id: str) -> Iterator[Tuple[str, PackageVersion]]:
    """Yield (key, version) for every key that names ``package_id``."""
    for key in listing:
        version = parse_catalog_key(key, package_id)
        if version is not None:
            yield key, version
