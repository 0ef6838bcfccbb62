"""Data models for versioning and package resolution."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from constants import Constants


def _valid_component(token: str) -> bool:
    """Digits only, no leading zero (except "0" itself), within int32."""
    if not token or not token.isascii() or not token.isdigit():
        return False
    if len(token) > 1 and token[0] == "0":
        return False
    return int(token) <= Constants.MAX_VERSION_COMPONENT


@dataclass(frozen=True, order=True)
class PackageVersion:
    """Immutable 2-4 component numeric version.

    Ordering is plain tuple ordering over the components: no zero-extension,
    so a version that is a strict prefix of another sorts first.
    """
    components: Tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> "PackageVersion":
        """Parse ``text`` or raise ValueError."""
        parsed = parse_version(text)
        if parsed is None:
            raise ValueError(f"Invalid version '{text}'")
        return parsed

    @property
    def precision(self) -> int:
        """Number of declared components."""
        return len(self.components)

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)


def parse_version(text: str) -> Optional[PackageVersion]:
    """Return a PackageVersion for ``text`` or None when it is not valid."""
    if not isinstance(text, str):
        return None
    parts = text.split(".", 4)
    if len(parts) < 2 or len(parts) > 4:
        return None
    if not all(_valid_component(p) for p in parts):
        return None
    return PackageVersion(tuple(int(p) for p in parts))


def is_valid_version(text: str) -> bool:
    """Check ``text`` against the version grammar."""
    return parse_version(text) is not None


def compare_versions(a: PackageVersion, b: PackageVersion) -> int:
    """Return -1, 0 or 1 comparing ``a`` to ``b`` component-wise."""
    if a.components < b.components:
        return -1
    if a.components > b.components:
        return 1
    return 0


@dataclass(frozen=True)
class PackageReference:
    """A package id paired with one version."""
    package_id: str
    version: PackageVersion

    @property
    def archive_name(self) -> str:
        """Catalog file name, e.g. ``Coral.Common.1.4.2.coob``."""
        return f"{self.package_id}.{self.version}{Constants.COOB_EXTENSION}"

    def __str__(self) -> str:
        return f"{self.package_id}.{self.version}"


@dataclass
class CoobManifest:
    """Identity and declared dependencies read from ``coob.props``."""
    package_id: str
    version: str
    dependencies: List[PackageReference] = field(default_factory=list)


@dataclass
class RestoreRequest:
    """Restore input; consumed once by the orchestrator."""
    package_id: str
    catalog_url: str
    out_dir: Path
    version: Optional[str] = None
    ceiling: Optional[PackageVersion] = None


@dataclass
class RestoreResult:
    """Restore outcome, produced only when every fetch succeeded."""
    package_id: str
    version: str
    fetched: List[str] = field(default_factory=list)
