"""Error taxonomy for the restore pipeline.

Every stage raises a subclass of CoobError; the CLI maps the class to an
exit code through ``exit_code``. Library code never exits the process.
"""
from __future__ import annotations

from constants import ExitCodes


class CoobError(Exception):
    """Base class for all restore failures."""

    exit_code = ExitCodes.FILE_ERROR


class CatalogUnavailable(CoobError):
    """Catalog listing could not be fetched (network error or non-200)."""

    exit_code = ExitCodes.CONNECTION_ERROR


class CatalogMalformed(CoobError):
    """Catalog listing body is not a JSON object."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class NoVersionAvailable(CoobError):
    """No catalog entry qualifies for the requested package."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class InvalidVersion(CoobError):
    """Explicitly requested version does not follow the version grammar."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class DownloadFailed(CoobError):
    """Archive download failed."""

    exit_code = ExitCodes.CONNECTION_ERROR


class ExtractFailed(CoobError):
    """Downloaded archive is corrupt, unreadable or unsafe to extract."""


class NameParseFailed(CoobError):
    """``<name>.<version>`` string does not split into name and version."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class ManifestNotFound(CoobError):
    """Package manifest file is missing."""


class ManifestMalformed(CoobError):
    """Manifest is not well-formed XML or lacks a required field."""


class DependencyMalformed(CoobError):
    """A dependency descriptor in the manifest cannot be parsed."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class HttpRequestError(Exception):
    """Transport-level failure raised by the shared HTTP helpers."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
