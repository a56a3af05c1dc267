"""Core library: directory walk, package classification, result collection."""

from roslist.core.classifier import (
    BUILD_TYPE_TAXONOMY_VERSION,
    BuildType,
    PackageRecord,
    classify_directory,
    infer_build_type,
)
from roslist.core.errors import ConfigError, ManifestParseError, ReadError, RoslistError
from roslist.core.finder import (
    DiscoveryConfig,
    DiscoveryResult,
    collect_packages,
    discover_packages,
)
from roslist.core.parser import PackageManifest, parse_package_xml
from roslist.core.walker import PathPolicy, walk_packages

__all__ = [
    "BUILD_TYPE_TAXONOMY_VERSION",
    "BuildType",
    "PackageRecord",
    "classify_directory",
    "infer_build_type",
    "ConfigError",
    "ManifestParseError",
    "ReadError",
    "RoslistError",
    "DiscoveryConfig",
    "DiscoveryResult",
    "collect_packages",
    "discover_packages",
    "PackageManifest",
    "parse_package_xml",
    "PathPolicy",
    "walk_packages",
]
