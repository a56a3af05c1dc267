"""roslist: fast package listing for ROS 2 source workspaces (library, CLI, TUI)."""

from importlib.metadata import version, PackageNotFoundError

from roslist.api import (
    BuildType,
    ConfigError,
    DiscoveryConfig,
    PackageRecord,
    discover_packages,
    find_package,
    list_package_names,
    list_packages,
)

__all__ = [
    "BuildType",
    "ConfigError",
    "DiscoveryConfig",
    "PackageRecord",
    "discover_packages",
    "find_package",
    "list_package_names",
    "list_packages",
    "__version__",
]

try:
    __version__ = version("roslist")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
