"""Textual TUI to fuzzy-pick a package from a source workspace."""

from __future__ import annotations

from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Input, LoadingIndicator, Static, Tree
from textual.worker import Worker, WorkerState

from roslist.core.classifier import BuildType, PackageRecord
from roslist.core.finder import DiscoveryConfig, DiscoveryResult, discover_packages

# Cap leaves per build type so huge workspaces stay responsive
MAX_PACKAGES_PER_GROUP = 200

# Colors per build type
BUILD_TYPE_COLORS = {
    BuildType.AMENT_CMAKE: "bold green",
    BuildType.AMENT_PYTHON: "bold yellow",
    BuildType.CMAKE: "bold cyan",
    BuildType.CATKIN: "bold magenta",
    BuildType.UNKNOWN: "dim",
}
COLOR_HEADER = "bold magenta"
COLOR_PATH = "dim"


def fuzzy_match(query: str, name: str) -> bool:
    """True if the characters of query appear in name in order (case-insensitive)."""
    if not query:
        return True
    it = iter(name.lower())
    return all(ch in it for ch in query.lower())


def filter_records(records: list[PackageRecord], query: str) -> list[PackageRecord]:
    """Records matching query: substring matches first, then fuzzy ones, each in input order."""
    q = query.strip()
    if not q:
        return list(records)
    lowered = q.lower()
    substring = [r for r in records if lowered in r.name.lower()]
    seen = {r.name for r in substring}
    fuzzy = [r for r in records if r.name not in seen and fuzzy_match(q, r.name)]
    return substring + fuzzy


def group_by_build_type(records: list[PackageRecord]) -> dict[BuildType, list[PackageRecord]]:
    """Group records by build type, in BuildType declaration order, skipping empty groups."""
    groups: dict[BuildType, list[PackageRecord]] = {bt: [] for bt in BuildType}
    for r in records:
        groups[r.build_type].append(r)
    return {bt: rs for bt, rs in groups.items() if rs}


def format_details(record: PackageRecord) -> str:
    color = BUILD_TYPE_COLORS.get(record.build_type, "white")
    return "\n".join(
        [
            f"[{COLOR_HEADER}]Package[/]  {record.name}",
            f"[{COLOR_HEADER}]Build type[/]  [{color}]{record.build_type}[/]",
            f"[{COLOR_HEADER}]Path[/]  [{COLOR_PATH}]{record.path}[/]",
        ]
    )


class PackagePickerApp(App[PackageRecord | None]):
    """Type to filter, Enter to pick. The picked record is the app's return value."""

    TITLE = "roslist"
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+r", "refresh", "Rescan"),
    ]

    DEFAULT_CSS = """
    #query {
        margin: 0 1;
    }
    #loading {
        height: 3;
        display: none;
    }
    #loading.loading {
        display: block;
    }
    #details {
        padding: 0 2;
        border: solid $primary;
        height: auto;
        min-height: 5;
    }
    """

    def __init__(self, config: DiscoveryConfig, initial_query: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._config = config
        self._initial_query = initial_query
        self._records: list[PackageRecord] = []
        self._matches: list[PackageRecord] = []
        self._loading = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield Input(value=self._initial_query, placeholder="filter packages...", id="query")
        with Container(id="loading"):
            yield LoadingIndicator()
        yield Tree("Packages", id="pkg_tree")
        yield Static("[dim]Type to filter  ·  Enter = pick  ·  Esc = cancel[/]", id="details")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = "Package picker"
        self.query_one("#query", Input).focus()
        self._start_scan()

    def _start_scan(self) -> None:
        if self._loading:
            return
        self._loading = True
        self.query_one("#loading").add_class("loading")
        self.run_worker(self._scan_worker, thread=True)

    def _scan_worker(self) -> DiscoveryResult:
        """Worker that discovers packages in a background thread."""
        return discover_packages(self._config)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            result: DiscoveryResult = event.worker.result
            self._records = result.packages
            self._finish_scan()
            if result.warnings:
                self.notify(
                    f"{len(result.warnings)} director(ies) could not be read",
                    severity="warning",
                    timeout=3,
                )
        elif event.state == WorkerState.ERROR:
            self._records = []
            self._finish_scan()
            self.query_one("#details", Static).update(f"[red]Error: {event.worker.error}[/]")

    def _finish_scan(self) -> None:
        self._loading = False
        self.query_one("#loading").remove_class("loading")
        self._apply_filter(self.query_one("#query", Input).value)

    def _apply_filter(self, query: str) -> None:
        self._matches = filter_records(self._records, query)
        tree = self.query_one("#pkg_tree", Tree)
        tree.clear()
        tree.root.label = f"[{COLOR_HEADER}]Packages ({len(self._matches)}/{len(self._records)})[/]"
        for build_type, records in group_by_build_type(self._matches).items():
            color = BUILD_TYPE_COLORS.get(build_type, "white")
            section = tree.root.add(f"[{color}]{build_type} ({len(records)})[/]", expand=True)
            for record in records[:MAX_PACKAGES_PER_GROUP]:
                leaf = section.add_leaf(f"{record.name}  [{COLOR_PATH}]{record.path}[/]")
                leaf.data = record
            if len(records) > MAX_PACKAGES_PER_GROUP:
                section.add_leaf(f"[dim]… and {len(records) - MAX_PACKAGES_PER_GROUP} more[/]")
        tree.root.expand()
        if self._matches:
            self.query_one("#details", Static).update(format_details(self._matches[0]))
        elif not self._loading:
            self.query_one("#details", Static).update("[dim]No matching packages[/]")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "query":
            self._apply_filter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the filter box picks the best match."""
        if event.input.id == "query" and self._matches:
            self.exit(self._matches[0])

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        if isinstance(event.node.data, PackageRecord):
            self.query_one("#details", Static).update(format_details(event.node.data))

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if isinstance(event.node.data, PackageRecord):
            self.exit(event.node.data)

    def action_refresh(self) -> None:
        self._start_scan()

    def action_cancel(self) -> None:
        self.exit(None)
