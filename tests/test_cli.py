"""Tests for roslist CLI."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from unittest import mock

import pytest

from roslist.cli import (
    EXIT_CANCELLED,
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    cmd_list,
    format_record,
    main,
)
from roslist.core.classifier import BuildType, PackageRecord


def _make_ws(root: Path) -> Path:
    """Workspace with an ament_cmake, an ament_python and an ignored package."""
    src = root / "src"
    a = src / "alpha"
    a.mkdir(parents=True)
    (a / "package.xml").write_text("<package><name>alpha</name></package>")
    (a / "CMakeLists.txt").write_text("ament_package()\n")
    b = src / "group" / "beta"
    b.mkdir(parents=True)
    (b / "package.xml").write_text("<package><name>beta</name></package>")
    (b / "setup.py").write_text("setup()\n")
    (b / "resource").mkdir()
    (b / "resource" / "beta").write_text("")
    ignored = src / "ignored"
    ignored.mkdir()
    (ignored / "COLCON_IGNORE").write_text("")
    (ignored / "package.xml").write_text("<package><name>gamma</name></package>")
    return src


def _list_args(**overrides) -> argparse.Namespace:
    defaults = dict(
        base_paths=None,
        paths=None,
        filter=None,
        exact=False,
        max_depth=None,
        jobs=1,
        names_only=False,
        paths_only=False,
        topological_order=False,
        json=False,
        verbose=False,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


class TestFormatRecord:
    """Tests for format_record."""

    record = PackageRecord(name="pkg", path=Path("src/pkg"), build_type=BuildType.AMENT_CMAKE)

    def test_full_line(self) -> None:
        assert format_record(self.record) == "pkg\tsrc/pkg\t(ament_cmake)"

    def test_names_only(self) -> None:
        assert format_record(self.record, names_only=True) == "pkg"

    def test_paths_only(self) -> None:
        assert format_record(self.record, paths_only=True) == "src/pkg"


class TestCmdList:
    """Tests for cmd_list."""

    def test_lists_packages(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        result = cmd_list(_list_args(base_paths=[str(src)]))
        assert result == EXIT_OK
        out = capsys.readouterr().out
        assert out.splitlines() == [
            f"alpha\t{src / 'alpha'}\t(ament_cmake)",
            f"beta\t{src / 'group' / 'beta'}\t(ament_python)",
        ]

    def test_names_only(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        cmd_list(_list_args(base_paths=[str(src)], names_only=True))
        assert capsys.readouterr().out == "alpha\nbeta\n"

    def test_paths_only(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        cmd_list(_list_args(base_paths=[str(src)], paths_only=True))
        assert capsys.readouterr().out.splitlines() == [
            str(src / "alpha"),
            str(src / "group" / "beta"),
        ]

    def test_json(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        cmd_list(_list_args(base_paths=[str(src)], json=True))
        data = json.loads(capsys.readouterr().out)
        assert [d["name"] for d in data] == ["alpha", "beta"]
        assert data[1]["build_type"] == "ament_python"

    def test_filter(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        cmd_list(_list_args(base_paths=[str(src)], filter="bet", names_only=True))
        assert capsys.readouterr().out == "beta\n"

    def test_exact_filter(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        cmd_list(_list_args(base_paths=[str(src)], filter="bet", exact=True, names_only=True))
        assert capsys.readouterr().out == ""

    def test_missing_base_path(self, tmp_path: Path, capsys) -> None:
        result = cmd_list(_list_args(base_paths=[str(tmp_path / "missing")]))
        assert result == EXIT_CONFIG_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "does not exist" in captured.err

    def test_unreadable_base_path(self, tmp_path: Path, capsys) -> None:
        _make_ws(tmp_path)
        with mock.patch("roslist.core.finder.os.access", return_value=False):
            result = cmd_list(_list_args(base_paths=[str(tmp_path)]))
        assert result == EXIT_CONFIG_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "not readable" in captured.err

    def test_zero_packages_is_success(self, tmp_path: Path, capsys) -> None:
        result = cmd_list(_list_args(base_paths=[str(tmp_path)]))
        assert result == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_exit_codes_are_distinct(self) -> None:
        assert len({EXIT_OK, EXIT_CONFIG_ERROR, EXIT_CANCELLED}) == 3

    def test_output_written_once(self, tmp_path: Path) -> None:
        src = _make_ws(tmp_path)
        with mock.patch("roslist.cli.sys.stdout") as stdout:
            cmd_list(_list_args(base_paths=[str(src)], names_only=True))
        stdout.write.assert_called_once_with("alpha\nbeta\n")

    def test_nothing_written_on_config_error(self, tmp_path: Path) -> None:
        with mock.patch("roslist.cli.sys.stdout") as stdout:
            cmd_list(_list_args(base_paths=[str(tmp_path / "missing")]))
        stdout.write.assert_not_called()


class TestMain:
    """Tests for main entry point."""

    def test_list_command(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        result = main(["list", "--base-paths", str(src), "-n"])
        assert result == EXIT_OK
        assert capsys.readouterr().out == "alpha\nbeta\n"

    def test_multiple_base_paths(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path / "ws1")
        other = tmp_path / "ws2" / "delta"
        other.mkdir(parents=True)
        (other / "package.xml").write_text("<package><name>delta</name></package>")
        result = main(["list", "-n", "-j", "2", "--base-paths", str(src), str(tmp_path / "ws2")])
        assert result == EXIT_OK
        assert capsys.readouterr().out == "alpha\nbeta\ndelta\n"

    def test_paths_option(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        main(["list", "-n", "--paths", str(src / "*")])
        # group/ is not itself a package and --paths does not recurse
        assert capsys.readouterr().out == "alpha\n"

    def test_log_base_is_accepted(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        result = main(["--log-base", "/dev/null", "list", "-n", "--base-paths", str(src)])
        assert result == EXIT_OK

    def test_topological_order_warns(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        result = main(["list", "-t", "-n", "--base-paths", str(src)])
        assert result == EXIT_OK
        captured = capsys.readouterr()
        assert captured.out == "alpha\nbeta\n"
        assert "topological" in captured.err

    def test_names_and_paths_conflict(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["list", "-n", "-p", "--base-paths", str(tmp_path)])
        assert exc_info.value.code == 2

    def test_missing_base_path(self, tmp_path: Path, capsys) -> None:
        result = main(["list", "--base-paths", str(tmp_path / "nope")])
        assert result == EXIT_CONFIG_ERROR
        assert "roslist: error:" in capsys.readouterr().err

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "roslist" in capsys.readouterr().out

    def test_tui_prints_selection(self, tmp_path: Path, capsys) -> None:
        src = _make_ws(tmp_path)
        picked = PackageRecord(name="alpha", path=src / "alpha", build_type=BuildType.AMENT_CMAKE)
        with mock.patch("roslist.tui.app.PackagePickerApp") as app_cls:
            app_cls.return_value.run.return_value = picked
            result = main(["tui", "--base-paths", str(src), "-n", "alp"])
        assert result == EXIT_OK
        assert capsys.readouterr().out == "alpha\n"
        _, kwargs = app_cls.call_args
        assert kwargs["initial_query"] == "alp"

    def test_tui_cancelled(self, tmp_path: Path, capsys) -> None:
        with mock.patch("roslist.tui.app.PackagePickerApp") as app_cls:
            app_cls.return_value.run.return_value = None
            result = main(["tui", "--base-paths", str(tmp_path)])
        assert result == EXIT_CANCELLED
        assert capsys.readouterr().out == ""

    def test_tui_missing_base_path(self, tmp_path: Path, capsys) -> None:
        with mock.patch("roslist.tui.app.PackagePickerApp") as app_cls:
            result = main(["tui", "--base-paths", str(tmp_path / "nope")])
        assert result == EXIT_CONFIG_ERROR
        app_cls.assert_not_called()

    def test_default_is_tui(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        with mock.patch("roslist.tui.app.PackagePickerApp") as app_cls:
            app_cls.return_value.run.return_value = None
            result = main([])
        assert result == EXIT_CANCELLED
        app_cls.assert_called_once()
