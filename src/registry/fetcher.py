"""Archive fetcher: download a coob and expand it into its package folder."""
from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path
from typing import Optional, Protocol, Union

from constants import Constants
from common.errors import DownloadFailed, ExtractFailed, HttpRequestError, NameParseFailed
from common.http_client import download_to_file
from common.logging_utils import Timer
from versioning.parser import split_name_version

logger = logging.getLogger(__name__)


class Extractor(Protocol):
    """Capability that expands an archive into a directory."""

    def extract(self, archive: Path, target_dir: Path) -> None:
        """Extract ``archive`` into ``target_dir`` or raise ExtractFailed."""


class ZipExtractor:
    """Extractor backed by the zipfile module.

    The archive is CRC-checked before anything is written, and members that
    would land outside the target directory are rejected.
    """

    def extract(self, archive: Path, target_dir: Path) -> None:
        try:
            with zipfile.ZipFile(archive) as zf:
                bad_member = zf.testzip()
                if bad_member is not None:
                    raise ExtractFailed(f"Archive {archive.name} has a corrupt member: {bad_member}")
                root = target_dir.resolve()
                for name in zf.namelist():
                    dest = (root / name).resolve()
                    if dest != root and root not in dest.parents:
                        raise ExtractFailed(f"Archive {archive.name} member escapes target: {name}")
                zf.extractall(root)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError) as exc:
            raise ExtractFailed(f"Archive {archive.name} is not a readable zip: {exc}") from exc
        except OSError as exc:
            raise ExtractFailed(f"Archive {archive.name} could not be extracted: {exc}") from exc


class ArchiveFetcher:
    """Downloads ``<id>.<version>.coob`` and extracts it into ``out_dir/<name>``."""

    def __init__(
        self,
        extractor: Optional[Extractor] = None,
        timeout: Optional[float] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.extractor = extractor or ZipExtractor()
        self.timeout = timeout
        self.log = log or logger

    @staticmethod
    def archive_url(base_uri: str, package_id: str, version: str) -> str:
        """Download URL for one coob."""
        return f"{base_uri.rstrip('/')}/{package_id}.{version}{Constants.COOB_EXTENSION}"

    def fetch_and_extract(
        self,
        package_id: str,
        version: str,
        base_uri: str,
        out_dir: Union[str, Path],
    ) -> Path:
        """Fetch one coob and return the folder it was extracted into.

        The folder is named after the package part of ``<package_id>.<version>``
        and is emptied before extraction. The temporary zip is removed once
        extraction succeeds.

        Raises:
            NameParseFailed: ``<package_id>.<version>`` does not split, or the
                name would not land directly inside ``out_dir``.
            DownloadFailed: Network failure, non-200 status or the archive
                cannot be written locally.
            ExtractFailed: Archive is corrupt, unreadable or unsafe.
        """
        full_name = f"{package_id}.{version}"
        split = split_name_version(full_name)
        if split is None:
            raise NameParseFailed(f"Cannot split '{full_name}' into package name and version")
        name = split[0]

        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        url = self.archive_url(base_uri, package_id, version)
        archive = out_dir / f"{full_name}{Constants.ARCHIVE_EXTENSION}"
        target = out_dir / name
        if target.resolve().parent != out_dir.resolve():
            raise NameParseFailed(f"Package name '{name}' does not map to a folder inside {out_dir}")

        self.log.info("Downloading %s...", url)
        with Timer() as t:
            try:
                size = download_to_file(url, archive, context="coob", timeout=self.timeout, log=self.log)
            except HttpRequestError as exc:
                raise DownloadFailed(f"Failed to download coob {full_name}: {exc.reason}") from exc
            except OSError as exc:
                _discard(archive)
                raise DownloadFailed(f"Cannot write coob {full_name} to {archive}: {exc}") from exc
        self.log.debug("Downloaded %s (%d bytes in %d ms)", archive.name, size, t.duration_ms())

        _empty_dir(target)
        self.extractor.extract(archive, target)
        try:
            os.remove(archive)
        except OSError as exc:
            raise ExtractFailed(f"Cannot remove temporary archive {archive}: {exc}") from exc
        self.log.info("Coob %s restored into %s", full_name, target)
        return target


def _discard(path: Path) -> None:
    """Remove a partial archive; a directory in its place is left alone."""
    try:
        if path.is_file():
            path.unlink()
    except OSError:
        logger.warning("Could not remove partial archive %s", path)


def _empty_dir(path: Path) -> None:
    """Create ``path`` or remove everything inside it."""
    try:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
        path.mkdir(parents=True)
    except OSError as exc:
        raise ExtractFailed(f"Cannot prepare folder {path}: {exc}") from exc
