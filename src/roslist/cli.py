"""Command-line interface for roslist: a fast `colcon list` replacement."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from roslist.core.classifier import PackageRecord
from roslist.core.errors import ConfigError
from roslist.core.finder import DiscoveryConfig, discover_packages, validate_config
from roslist.log import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CANCELLED = 130


def format_record(record: PackageRecord, *, names_only: bool = False, paths_only: bool = False) -> str:
    """One output line: name<TAB>path<TAB>(build_type), or just the name or path."""
    if names_only:
        return record.name
    if paths_only:
        return str(record.path)
    return f"{record.name}\t{record.path}\t({record.build_type})"


def _config_from_args(args: argparse.Namespace) -> DiscoveryConfig:
    return DiscoveryConfig(
        base_paths=tuple(args.base_paths or ()),
        paths=tuple(args.paths or ()),
        name_filter=args.filter,
        exact_match=args.exact,
        max_depth=args.max_depth,
        jobs=args.jobs,
    )


def cmd_list(args: argparse.Namespace) -> int:
    """List packages found under the base paths."""
    if args.topological_order:
        logger.warning("--topological-order is not supported; listing by name")
    try:
        result = discover_packages(_config_from_args(args))
    except ConfigError as e:
        print(f"roslist: error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.json:
        output = json.dumps([r.to_dict() for r in result.packages], indent=2) + "\n"
    else:
        output = "".join(
            format_record(r, names_only=args.names_only, paths_only=args.paths_only) + "\n"
            for r in result.packages
        )
    # Single write after everything is computed: no partial listings.
    sys.stdout.write(output)
    sys.stdout.flush()
    return EXIT_OK


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive package picker and print the selection."""
    from roslist.tui.app import PackagePickerApp

    try:
        config = _config_from_args(args)
        # Fail before starting the app if the configuration is unusable.
        validate_config(config)
    except ConfigError as e:
        print(f"roslist: error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    app = PackagePickerApp(config, initial_query=args.query or "")
    selected = app.run()
    if selected is None:
        return EXIT_CANCELLED
    print(format_record(selected, names_only=args.names_only, paths_only=args.paths_only))
    return EXIT_OK


def _add_discovery_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--base-paths",
        nargs="*",
        metavar="PATH",
        help="The base paths to recursively crawl for packages (default: .)",
    )
    parser.add_argument(
        "--paths",
        nargs="*",
        metavar="PATH",
        help="Paths to check for a package, no recursion. Shell wildcards (e.g. 'src/*') are expanded",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum directory depth below each base path (default: unlimited)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Walk base paths in parallel with this many threads (default: 1)",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-n",
        "--names-only",
        action="store_true",
        help="Output only the name of each package but not the path",
    )
    output.add_argument(
        "-p",
        "--paths-only",
        action="store_true",
        help="Output only the path of each package but not the name",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details to stderr",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the roslist CLI."""
    parser = argparse.ArgumentParser(
        prog="roslist",
        description="Fast colcon list replacement: find packages in a source workspace.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--log-base",
        metavar="PATH",
        help="Accepted for colcon compatibility; nothing is logged to files",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # roslist list
    list_parser = subparsers.add_parser(
        "list",
        help="List packages",
        description="List packages found under the base paths, sorted by name.",
    )
    _add_discovery_arguments(list_parser)
    list_parser.add_argument(
        "-t",
        "--topological-order",
        action="store_true",
        help="Not implemented, packages are always sorted by name",
    )
    list_parser.add_argument(
        "--filter",
        metavar="TEXT",
        default=None,
        help="Only list packages whose name contains TEXT (case-sensitive)",
    )
    list_parser.add_argument(
        "--exact",
        action="store_true",
        help="With --filter, require the name to equal TEXT",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    list_parser.set_defaults(func=cmd_list)

    # roslist tui (default if no command)
    tui_parser = subparsers.add_parser(
        "tui",
        help="Pick a package interactively",
        description="Fuzzy-filter discovered packages and print the selected one.",
    )
    _add_discovery_arguments(tui_parser)
    tui_parser.add_argument(
        "query",
        nargs="?",
        help="Optional: start with this filter text",
    )
    tui_parser.set_defaults(func=cmd_tui, filter=None, exact=False)

    args = parser.parse_args(argv)

    configure_logging(verbose=getattr(args, "verbose", False))

    # Default to TUI if no command specified
    if args.command is None:
        raw = list(sys.argv[1:] if argv is None else argv)
        return cmd_tui(parser.parse_args([*raw, "tui"]))

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
