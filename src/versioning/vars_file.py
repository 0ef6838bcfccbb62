"""Coob versions variables file.

Writes the versions of a restored coob set as a ``Settings`` XML document
with one ``VariableDefinition`` and one ``Variable`` per coob, for the
configuration tooling that consumes variable files.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Mapping, Union


def variable_name(coob_id: str) -> str:
    """``coral.common`` -> ``Coral.Common.CoobVersion``."""
    parts = [part[:1].upper() + part[1:].lower() for part in coob_id.split(".")]
    return ".".join(parts + ["CoobVersion"])


def build_vars_document(versions: Mapping[str, str]) -> ET.ElementTree:
    settings = ET.Element("Settings")
    definition = ET.SubElement(settings, "Definition")
    configuration = ET.SubElement(settings, "Configuration")
    for coob_id, version in versions.items():
        name = variable_name(coob_id)
        ET.SubElement(definition, "VariableDefinition", {"name": name})
        ET.SubElement(configuration, "Variable", {"name": name}).text = version
    return ET.ElementTree(settings)


def save_vars_file(versions: Mapping[str, str], out_file: Union[str, Path]) -> Path:
    """Write the variables document, creating the parent directory."""
    out_file = Path(out_file)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    tree = build_vars_document(versions)
    ET.indent(tree)
    tree.write(out_file, encoding="utf-8", xml_declaration=True)
    return out_file
