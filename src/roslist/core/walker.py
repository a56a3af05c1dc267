"""Depth-first walk of base directories that yields discovered packages."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from roslist.core.classifier import PackageRecord
from roslist.core.errors import ReadError

logger = logging.getLogger(__name__)

VCS_DIRS = frozenset({".git", ".hg", ".svn", ".bzr", "_darcs", "CVS"})
HARD_IGNORE_MARKERS = ("COLCON_IGNORE", "CATKIN_IGNORE", "AMENT_IGNORE")
SOFT_IGNORE_MARKERS = ("ROSLIST_NO_PACKAGE",)


@dataclass(frozen=True)
class PathPolicy:
    """Naming conventions the walker applies to directory entries."""

    hidden_prefix: str = "."
    skip_names: frozenset[str] = VCS_DIRS
    hard_ignore_markers: tuple[str, ...] = HARD_IGNORE_MARKERS
    soft_ignore_markers: tuple[str, ...] = SOFT_IGNORE_MARKERS

    def is_skipped(self, name: str) -> bool:
        """True for hidden and VCS metadata directories."""
        return name in self.skip_names or (
            bool(self.hidden_prefix) and name.startswith(self.hidden_prefix)
        )

    def hard_ignored(self, entries: set[str]) -> bool:
        return any(m in entries for m in self.hard_ignore_markers)

    def soft_ignored(self, entries: set[str]) -> bool:
        return any(m in entries for m in self.soft_ignore_markers)


DEFAULT_POLICY = PathPolicy()


@dataclass(frozen=True)
class Candidate:
    """A directory under evaluation; path is the base path joined with the relative part."""

    path: Path
    depth: int = 0


class Outcome(Enum):
    FOUND = "found"
    IGNORED = "ignored"
    RECURSE = "recurse"


@dataclass
class _Inspection:
    outcome: Outcome
    record: PackageRecord | None = None
    subdirs: list[str] = field(default_factory=list)


Classify = Callable[[Path], "PackageRecord | None"]


def _list_dir(path: Path, errors: list[ReadError]) -> tuple[set[str], list[str]] | None:
    """Return (all entry names, sorted sub-directory names), or None if unreadable."""
    names: set[str] = set()
    subdirs: list[str] = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                names.add(entry.name)
                try:
                    if entry.is_dir():
                        subdirs.append(entry.name)
                except OSError:
                    continue
    except OSError as e:
        err = ReadError(path, e)
        logger.warning("%s; skipping", err)
        errors.append(err)
        return None
    subdirs.sort()
    return names, subdirs


def inspect_candidate(
    candidate: Candidate,
    classify: Classify,
    *,
    policy: PathPolicy = DEFAULT_POLICY,
    errors: list[ReadError] | None = None,
) -> _Inspection:
    """Check markers, then classify. Unreadable directories count as ignored."""
    listing = _list_dir(candidate.path, errors if errors is not None else [])
    if listing is None:
        return _Inspection(Outcome.IGNORED)
    names, subdirs = listing
    if policy.hard_ignored(names):
        logger.debug("Ignoring %s (ignore marker)", candidate.path)
        return _Inspection(Outcome.IGNORED)
    if not policy.soft_ignored(names):
        record = classify(candidate.path)
        if record is not None:
            return _Inspection(Outcome.FOUND, record=record)
    return _Inspection(Outcome.RECURSE, subdirs=subdirs)


def walk_packages(
    base: Path,
    classify: Classify,
    *,
    policy: PathPolicy = DEFAULT_POLICY,
    max_depth: int | None = None,
    errors: list[ReadError] | None = None,
) -> Iterator[PackageRecord]:
    """
    Yield packages under base in depth-first order, children visited by sorted name.

    The base directory itself is a candidate. Packages are not descended into.
    Symlinked directories are followed once per real path within this walk.
    Read failures are appended to errors and the walk continues.
    """
    if errors is None:
        errors = []
    visited: set[str] = set()
    stack: list[Candidate] = [Candidate(path=base, depth=0)]

    while stack:
        candidate = stack.pop()
        real = os.path.realpath(candidate.path)
        if real in visited:
            logger.debug("Already visited %s via another path", candidate.path)
            continue
        visited.add(real)

        result = inspect_candidate(candidate, classify, policy=policy, errors=errors)
        if result.outcome is Outcome.FOUND:
            yield result.record
            continue
        if result.outcome is Outcome.IGNORED:
            continue
        if max_depth is not None and candidate.depth >= max_depth:
            continue
        for name in reversed(result.subdirs):
            if policy.is_skipped(name):
                continue
            stack.append(Candidate(path=candidate.path / name, depth=candidate.depth + 1))


def check_paths(
    paths: list[Path],
    classify: Classify,
    *,
    policy: PathPolicy = DEFAULT_POLICY,
    errors: list[ReadError] | None = None,
) -> Iterator[PackageRecord]:
    """Yield packages for paths that are package directories themselves (no recursion)."""
    for path in paths:
        if not path.is_dir():
            continue
        result = inspect_candidate(Candidate(path=path), classify, policy=policy, errors=errors)
        if result.outcome is Outcome.FOUND:
            yield result.record
