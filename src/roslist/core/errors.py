"""Error types raised or reported by the discovery engine."""

from __future__ import annotations

from pathlib import Path


class RoslistError(Exception):
    """Base class for all roslist errors."""


class ConfigError(RoslistError):
    """Invalid discovery configuration (e.g. a base path that does not exist).

    Always raised before any traversal starts.
    """


class ReadError(RoslistError):
    """A directory could not be read during the walk. Reported, never raised."""

    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"cannot read {path}: {error.strerror or error}")


class ManifestParseError(RoslistError):
    """package.xml exists but its content could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
