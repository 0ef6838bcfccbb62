"""Manifest reader for ``coob.props`` (MSBuild-style XML project file)."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union

from constants import Constants
from common.errors import DependencyMalformed, ManifestMalformed, ManifestNotFound
from versioning.models import CoobManifest, PackageReference
from versioning.parser import parse_reference

logger = logging.getLogger(__name__)

_NS = "{" + Constants.MSBUILD_NAMESPACE + "}"


def _findall(root: ET.Element, path: str) -> List[ET.Element]:
    """Find ``path`` with the MSBuild namespace, falling back to no namespace."""
    qualified = "/".join(_NS + part for part in path.split("/"))
    found = root.findall(qualified)
    return found if found else root.findall(path)


def _single_text(root: ET.Element, path: str, manifest_file: Path) -> str:
    for element in _findall(root, path):
        text = (element.text or "").strip()
        if text:
            return text
    raise ManifestMalformed(f"Manifest {manifest_file} has no value for {path.rsplit('/', 1)[-1]}")


def read_manifest(package_dir: Union[str, Path], log: Optional[logging.Logger] = None) -> CoobManifest:
    """Read identity and dependencies from ``package_dir/coob.props``.

    Raises:
        ManifestNotFound: File is missing.
        ManifestMalformed: Not well-formed XML or a required field is missing.
        DependencyMalformed: A CoobReference descriptor does not parse.
    """
    log = log or logger
    manifest_file = Path(package_dir) / Constants.MANIFEST_FILE
    if not manifest_file.is_file():
        raise ManifestNotFound(f"Manifest not found: {manifest_file}")

    try:
        root = ET.parse(manifest_file).getroot()
    except ET.ParseError as exc:
        raise ManifestMalformed(f"Manifest {manifest_file} is not well-formed XML: {exc}") from exc
    except OSError as exc:
        raise ManifestNotFound(f"Manifest {manifest_file} cannot be read: {exc}") from exc

    package_id = _single_text(root, "PropertyGroup/CoobId", manifest_file)
    version = _single_text(root, "PropertyGroup/CoobVersion", manifest_file)

    dependencies: List[PackageReference] = []
    for element in _findall(root, "ItemGroup/CoobReference"):
        descriptor = element.get("Include")
        if not descriptor:
            raise ManifestMalformed(f"Manifest {manifest_file} has a CoobReference without Include")
        reference = parse_reference(descriptor)
        if reference is None:
            raise DependencyMalformed(
                f"Manifest {manifest_file} declares malformed dependency '{descriptor}'"
            )
        dependencies.append(reference)

    log.info("Manifest of %s %s declares %d dependencies.", package_id, version, len(dependencies))
    return CoobManifest(package_id=package_id, version=version, dependencies=dependencies)


def read_coob_versions(manifest: CoobManifest) -> Dict[str, str]:
    """Map lower-cased coob ids to versions for the package and its dependencies."""
    versions = {manifest.package_id.lower(): manifest.version}
    for reference in manifest.dependencies:
        versions[reference.package_id.lower()] = str(reference.version)
    return versions
