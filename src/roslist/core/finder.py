"""Discover packages under base paths: validate, walk, filter, dedup and sort."""

from __future__ import annotations

import glob
import os
import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from roslist.core.classifier import PackageRecord, classify_directory
from roslist.core.errors import ConfigError, ReadError
from roslist.core.walker import DEFAULT_POLICY, PathPolicy, check_paths, walk_packages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryConfig:
    """
    What to discover and how to filter it.

    base_paths are crawled recursively; paths (glob patterns allowed) are each
    checked as a single package. With neither, the current directory is crawled.
    """

    base_paths: tuple[str, ...] = ()
    paths: tuple[str, ...] = ()
    name_filter: str | None = None
    exact_match: bool = False
    max_depth: int | None = None
    jobs: int = 1
    policy: PathPolicy = DEFAULT_POLICY

    def effective_base_paths(self) -> tuple[str, ...]:
        if not self.base_paths and not self.paths:
            return (".",)
        return self.base_paths

    def matches(self, name: str) -> bool:
        """True if name passes the name filter (always True without a filter)."""
        if self.name_filter is None:
            return True
        if self.exact_match:
            return name == self.name_filter
        return self.name_filter in name


@dataclass
class DiscoveryResult:
    """Final ordered packages plus the non-fatal read errors hit on the way."""

    packages: list[PackageRecord] = field(default_factory=list)
    warnings: list[ReadError] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self):
        return iter(self.packages)


def _dedup_paths(raw: Iterable[str]) -> list[Path]:
    """Drop repeated entries (by canonical path), keeping first occurrence and the given spelling."""
    seen: set[Path] = set()
    out: list[Path] = []
    for p in raw:
        path = Path(p)
        canonical = path.resolve()
        if canonical in seen:
            continue
        seen.add(canonical)
        out.append(path)
    return out


def _expand_globs(patterns: Iterable[str]) -> list[str]:
    expanded: list[str] = []
    for pattern in patterns:
        if any(c in pattern for c in "*?["):
            expanded.extend(sorted(glob.glob(pattern)))
        else:
            expanded.append(pattern)
    return expanded


def validate_config(config: DiscoveryConfig) -> tuple[list[Path], list[Path]]:
    """
    Check the configuration before any traversal.

    Returns (base paths, single package paths), deduplicated.
    Raises ConfigError for a missing, non-directory or unreadable base path, or bad limits.
    """
    if config.jobs < 1:
        raise ConfigError(f"jobs must be at least 1, got {config.jobs}")
    if config.max_depth is not None and config.max_depth < 0:
        raise ConfigError(f"max_depth must not be negative, got {config.max_depth}")

    base_paths = _dedup_paths(config.effective_base_paths())
    for base in base_paths:
        if not base.exists():
            raise ConfigError(f"base path does not exist: {base}")
        if not base.is_dir():
            raise ConfigError(f"base path is not a directory: {base}")
        if not os.access(base, os.R_OK | os.X_OK):
            raise ConfigError(f"base path is not readable: {base}")

    paths = _dedup_paths(_expand_globs(config.paths))
    for p in paths:
        if not p.exists():
            raise ConfigError(f"path does not exist: {p}")
    return base_paths, paths


def _walk_one(base: Path, config: DiscoveryConfig) -> tuple[list[PackageRecord], list[ReadError]]:
    errors: list[ReadError] = []
    records = list(
        walk_packages(
            base,
            classify_directory,
            policy=config.policy,
            max_depth=config.max_depth,
            errors=errors,
        )
    )
    logger.debug("Found %d package(s) under %s", len(records), base)
    return records, errors


def collect_packages(
    records: Iterable[PackageRecord],
    config: DiscoveryConfig | None = None,
) -> list[PackageRecord]:
    """
    Filter by name, keep the first record seen for each name, sort by (name, path).

    records must be in discovery order.
    """
    config = config or DiscoveryConfig()
    kept: dict[str, PackageRecord] = {}
    for record in records:
        if not config.matches(record.name):
            continue
        first = kept.get(record.name)
        if first is not None:
            logger.debug(
                "Duplicate package %s at %s (keeping %s)", record.name, record.path, first.path
            )
            continue
        kept[record.name] = record
    return sorted(kept.values(), key=lambda r: (r.name, str(r.path)))


def discover_packages(config: DiscoveryConfig) -> DiscoveryResult:
    """
    Run one discovery: validate, walk every path, then collect.

    Raises ConfigError before any traversal if the configuration is invalid.
    Read errors during the walk are logged and returned in the result.
    """
    base_paths, paths = validate_config(config)

    errors: list[ReadError] = []
    ordered: list[PackageRecord] = list(
        check_paths(paths, classify_directory, policy=config.policy, errors=errors)
    )

    if config.jobs > 1 and len(base_paths) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            walks = list(pool.map(lambda b: _walk_one(b, config), base_paths))
    else:
        walks = [_walk_one(b, config) for b in base_paths]
    # pool.map keeps input order, so discovery order is the base path order.
    for records, walk_errors in walks:
        ordered.extend(records)
        errors.extend(walk_errors)

    result = DiscoveryResult(packages=collect_packages(ordered, config), warnings=errors)
    if not result.packages:
        logger.warning("No packages found")
    return result
