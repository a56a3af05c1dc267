"""Public API: use roslist from Python or from other tools."""

from __future__ import annotations

from pathlib import Path

from roslist.core.classifier import BuildType, PackageRecord
from roslist.core.errors import ConfigError, ManifestParseError, ReadError
from roslist.core.finder import DiscoveryConfig, DiscoveryResult, discover_packages
from roslist.core.walker import PathPolicy


def _as_strings(paths: list[str | Path] | None) -> tuple[str, ...]:
    return tuple(str(p) for p in paths) if paths else ()


def list_packages(
    base_paths: list[str | Path] | None = None,
    *,
    paths: list[str | Path] | None = None,
    name_filter: str | None = None,
    exact_match: bool = False,
    max_depth: int | None = None,
    jobs: int = 1,
) -> list[PackageRecord]:
    """
    List packages under base_paths (default: the current directory), sorted by name.

    paths are checked as package directories themselves, without recursion.
    Raises ConfigError if a base path is missing.
    """
    config = DiscoveryConfig(
        base_paths=_as_strings(base_paths),
        paths=_as_strings(paths),
        name_filter=name_filter,
        exact_match=exact_match,
        max_depth=max_depth,
        jobs=jobs,
    )
    return discover_packages(config).packages


def list_package_names(base_paths: list[str | Path] | None = None) -> list[str]:
    """Sorted package names under base_paths."""
    return [r.name for r in list_packages(base_paths)]


def find_package(
    name: str,
    base_paths: list[str | Path] | None = None,
) -> PackageRecord | None:
    """Return the package called name under base_paths, or None."""
    found = list_packages(base_paths, name_filter=name, exact_match=True)
    return found[0] if found else None


__all__ = [
    "BuildType",
    "ConfigError",
    "DiscoveryConfig",
    "DiscoveryResult",
    "ManifestParseError",
    "PackageRecord",
    "PathPolicy",
    "ReadError",
    "discover_packages",
    "find_package",
    "list_package_names",
    "list_packages",
]
