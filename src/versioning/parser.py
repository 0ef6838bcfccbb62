"""Token parsing utilities for package names and versions."""

import re
from typing import Optional, Tuple

from constants import Constants
from .models import PackageReference, PackageVersion, parse_version

# Dependency descriptor: "<packageId>.<major>.<minor>.<patch>"
_DESCRIPTOR_RE = re.compile(r"^(?P<package_id>[^;/\\]+)\.(?P<version>\d+\.\d+\.\d+)$")

# Combined archive name: "<name>.<major>.<minor>.<patch>[.<more>]"
_NAME_VERSION_RE = re.compile(r"^(?P<name>[^/\\]+?)\.(?P<version>\d+\.\d+\.\d+(?:\.\d+)*)$")


def parse_reference(descriptor: str) -> Optional[PackageReference]:
    """Parse a manifest dependency descriptor, or return None on mismatch.

    The version part must also satisfy the version grammar (no leading
    zeros, int32 range).
    """
    match = _DESCRIPTOR_RE.match(descriptor.strip())
    if not match or not is_safe_name(match.group("package_id")):
        return None
    version = parse_version(match.group("version"))
    if version is None:
        return None
    return PackageReference(match.group("package_id"), version)


def is_safe_name(name: str) -> bool:
    """True when ``name`` can be used as a single folder name.

    Rejects separators and empty dot-separated parts, which covers ``.``,
    ``..`` and names starting or ending with a dot.
    """
    if not name or "/" in name or "\\" in name:
        return False
    return all(part for part in name.split("."))


def parse_catalog_key(key: str, package_id: str) -> Optional[PackageVersion]:
    """Return the version of ``package_id`` a catalog key names, if any.

    Keys look like ``<packageId>.<version>.coob``. Keys for other packages
    and keys with an invalid version yield None.
    """
    prefix = package_id + "."
    suffix = Constants.COOB_EXTENSION
    if not (key.startswith(prefix) and key.endswith(suffix)):
        return None
    token = key[len(prefix):len(key) - len(suffix)]
    return parse_version(token)


def split_name_version(text: str) -> Optional[Tuple[str, str]]:
    """Split ``<name>.<version>`` into (name, version), or None on mismatch.

    The name is the shortest prefix followed by a numeric version of at
    least three components.
    """
    match = _NAME_VERSION_RE.match(text)
    if not match or not is_safe_name(match.group("name")):
        return None
    return match.group("name"), match.group("version")
