"""Decide whether a directory is a package and infer its build type."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from roslist.core.errors import ManifestParseError
from roslist.core.parser import MANIFEST_FILENAME, PackageManifest, parse_package_xml

logger = logging.getLogger(__name__)

# Bump when a member is added to BuildType.
BUILD_TYPE_TAXONOMY_VERSION = 2

CMAKE_DESCRIPTOR = "CMakeLists.txt"
PYTHON_DESCRIPTOR = "setup.py"


class BuildType(str, Enum):
    """Closed set of build types a package can be classified as."""

    AMENT_CMAKE = "ament_cmake"
    CMAKE = "cmake"
    AMENT_PYTHON = "ament_python"
    CATKIN = "catkin"  # since taxonomy v2, only via an explicit export
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageRecord:
    """A discovered package: one line of `roslist list` output."""

    name: str
    path: Path
    build_type: BuildType

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "name": self.name,
            "path": str(self.path),
            "build_type": self.build_type.value,
        }


@dataclass(frozen=True)
class BuildFacts:
    """What a package directory says about how it is built."""

    declared_build_type: str | None = None
    has_cmake: bool = False
    cmake_exports_ament: bool = False
    has_python: bool = False
    python_exports_ament: bool = False


def _declared(facts: BuildFacts) -> BuildType | None:
    try:
        return BuildType(facts.declared_build_type) if facts.declared_build_type else None
    except ValueError:
        return None


# Evaluated in order; the first rule returning a build type wins.
BUILD_TYPE_RULES: tuple[Callable[[BuildFacts], BuildType | None], ...] = (
    _declared,
    lambda f: BuildType.AMENT_CMAKE if f.has_cmake and f.cmake_exports_ament else None,
    lambda f: BuildType.CMAKE if f.has_cmake else None,
    lambda f: BuildType.AMENT_PYTHON if f.has_python and f.python_exports_ament else None,
)


def infer_build_type(facts: BuildFacts) -> BuildType:
    """Apply BUILD_TYPE_RULES to facts; UNKNOWN when no rule matches."""
    for rule in BUILD_TYPE_RULES:
        build_type = rule(facts)
        if build_type is not None:
            return build_type
    return BuildType.UNKNOWN


def _read_text(path: Path) -> str:
    """Read a small text file; empty string if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return ""


def gather_build_facts(directory: Path, name: str, manifest: PackageManifest | None) -> BuildFacts:
    """Collect the BuildFacts for a package directory (filesystem reads only)."""
    buildtool = manifest.buildtool_depends if manifest else []

    cmake = directory / CMAKE_DESCRIPTOR
    has_cmake = cmake.is_file()
    cmake_ament = has_cmake and (
        any(dep.startswith("ament_cmake") for dep in buildtool)
        or "ament_package(" in _read_text(cmake)
    )

    setup_py = directory / PYTHON_DESCRIPTOR
    has_python = setup_py.is_file()
    python_ament = has_python and (
        "ament_python" in buildtool
        or (directory / "resource" / name).is_file()
        or "ament_index" in _read_text(setup_py)
    )

    return BuildFacts(
        declared_build_type=manifest.build_type if manifest else None,
        has_cmake=has_cmake,
        cmake_exports_ament=cmake_ament,
        has_python=has_python,
        python_exports_ament=python_ament,
    )


def classify_directory(directory: Path) -> PackageRecord | None:
    """
    Classify a candidate directory.

    Returns a PackageRecord if the directory holds a package.xml, else None.
    A package.xml that cannot be parsed still makes the directory a package,
    named after the directory itself.
    """
    manifest_path = directory / MANIFEST_FILENAME
    if not manifest_path.is_file():
        return None

    manifest: PackageManifest | None
    try:
        manifest = parse_package_xml(manifest_path)
        name = manifest.name
    except ManifestParseError as e:
        logger.warning("%s; using directory name", e)
        manifest = None
        name = directory.resolve().name if directory.name in ("", ".", "..") else directory.name

    facts = gather_build_facts(directory, name, manifest)
    if manifest and manifest.build_type and _declared(facts) is None:
        logger.debug("%s: unrecognized build type %r, inferring", name, manifest.build_type)
    return PackageRecord(name=name, path=directory, build_type=infer_build_type(facts))
