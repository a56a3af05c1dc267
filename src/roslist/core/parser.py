"""Read the few package.xml fields needed to name and classify a package."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from roslist.core.errors import ManifestParseError

MANIFEST_FILENAME = "package.xml"


@dataclass
class PackageManifest:
    """Identity and build hints parsed from a package.xml."""

    name: str
    path: Path
    format: int = 1
    build_type: str | None = None  # <export><build_type>, if declared
    buildtool_depends: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.buildtool_depends = list(dict.fromkeys(self.buildtool_depends))


def _manifest_format(root: ET.Element) -> int:
    raw = root.get("format", "1").strip()
    try:
        return int(raw)
    except ValueError:
        return 1


def parse_package_xml(path: Path) -> PackageManifest:
    """
    Parse a package.xml and return its name, format, declared build type and buildtool deps.

    Raises ManifestParseError if the file cannot be read, is not well-formed XML,
    is not a <package> document, or has no non-empty <name>.
    """
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise ManifestParseError(path, f"malformed XML ({e})") from e
    except OSError as e:
        raise ManifestParseError(path, f"unreadable ({e.strerror or e})") from e
    root = tree.getroot()
    if root.tag != "package":
        raise ManifestParseError(path, f"root element is <{root.tag}>, expected <package>")

    name = ""
    for child in root:
        if child.tag == "name" and child.text:
            name = child.text.strip()
            break
    if not name:
        raise ManifestParseError(path, "missing <name>")

    build_type = None
    elem = root.find("./export/build_type")
    if elem is not None and elem.text and elem.text.strip():
        build_type = elem.text.strip()

    buildtool = [
        e.text.strip() for e in root.findall("./buildtool_depend") if e.text and e.text.strip()
    ]

    return PackageManifest(
        name=name,
        path=path,
        format=_manifest_format(root),
        build_type=build_type,
        buildtool_depends=buildtool,
    )
