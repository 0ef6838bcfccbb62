"""Restore orchestrator: root coob plus its one-level dependencies.

Stages run strictly in sequence: resolve the root version (catalog only when
no explicit version is given), fetch the root, read its manifest, then fetch
each declared dependency in manifest order. Any failure aborts the run;
folders already extracted stay on disk.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from constants import Constants, RestoreStage
from common.errors import CoobError, InvalidVersion, NoVersionAvailable
from common.logging_utils import extra_context, is_debug_enabled
from registry.catalog import CatalogClient
from registry.fetcher import ArchiveFetcher
from registry import manifest as manifest_reader
from versioning.models import RestoreRequest, RestoreResult, is_valid_version

logger = logging.getLogger(__name__)


class RestoreOrchestrator:
    """Drives one restore run per ``restore`` call."""

    def __init__(
        self,
        catalog: Optional[CatalogClient] = None,
        fetcher: Optional[ArchiveFetcher] = None,
        read_manifest=None,
        log: Optional[logging.Logger] = None,
    ):
        self.log = log or logger
        self.catalog = catalog or CatalogClient(log=self.log)
        self.fetcher = fetcher or ArchiveFetcher(log=self.log)
        self.read_manifest = read_manifest or manifest_reader.read_manifest
        self.stage = RestoreStage.START

    def _advance(self, stage: RestoreStage, **fields) -> None:
        self.stage = stage
        if is_debug_enabled(self.log):
            self.log.debug(
                "Restore stage",
                extra=extra_context(event="stage", component="restore",
                                    outcome=stage.value, **fields)
            )

    def resolve_version(self, request: RestoreRequest) -> str:
        """Explicit version as given, else the latest catalog version under the ceiling."""
        if request.version:
            if not is_valid_version(request.version):
                raise InvalidVersion(f"Invalid version '{request.version}' for {request.package_id}")
            return request.version

        listing = self.catalog.fetch_listing(request.catalog_url)
        latest = self.catalog.latest_version(listing, request.package_id, request.ceiling)
        if latest is None:
            bound = f" below {request.ceiling}" if request.ceiling is not None else ""
            raise NoVersionAvailable(f"No published version of {request.package_id}{bound} found in catalog")
        self.log.info("Latest version of %s is %s.", request.package_id, latest)
        return str(latest)

    def restore(self, request: RestoreRequest) -> RestoreResult:
        """Run the restore sequence and return the resolved root version.

        Raises:
            CoobError: Any stage failure; the stage is left at FAILED.
        """
        self.stage = RestoreStage.START
        coobs_dir = Path(request.out_dir) / Constants.COOBS_DIR
        fetched = []
        try:
            version = self.resolve_version(request)
            self._advance(RestoreStage.VERSION_RESOLVED, target=request.package_id, version=version)

            root_dir = self.fetcher.fetch_and_extract(
                request.package_id, version, request.catalog_url, coobs_dir
            )
            fetched.append(f"{request.package_id}.{version}")
            self._advance(RestoreStage.ROOT_FETCHED, target=str(root_dir))

            manifest = self.read_manifest(root_dir)
            self._advance(RestoreStage.MANIFEST_READ, count=len(manifest.dependencies))

            for reference in manifest.dependencies:
                self.fetcher.fetch_and_extract(
                    reference.package_id, str(reference.version), request.catalog_url, coobs_dir
                )
                fetched.append(str(reference))
            self._advance(RestoreStage.DEPENDENCIES_FETCHED, count=len(fetched))
        except CoobError as exc:
            self._advance(RestoreStage.FAILED, target=request.package_id)
            self.log.error("Restore of %s failed: %s", request.package_id, exc)
            raise

        self.log.info("All coobs are restored.")
        return RestoreResult(package_id=request.package_id, version=version, fetched=fetched)
