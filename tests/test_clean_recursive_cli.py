"""End-to-end tests for clean_recursive/cli.py."""

from __future__ import annotations

import errno
import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from clean_recursive import discovery
from clean_recursive.args_parser import parse_args
from clean_recursive.cleaner import CleanAction
from clean_recursive.cli import EXIT_SETUP_ERROR, build_runner, main, run
from clean_recursive.config import Settings
from clean_recursive.reports import EXIT_INTERRUPTED, EXIT_OK, EXIT_PARTIAL_FAILURE
from clean_recursive.runner import CargoCleanRunner, DirectRemovalRunner
from tests.assertions import assert_equal
from tests.cargo_tree_test_utils import RecordingRunner, make_project


def _snapshot(path: Path) -> list[str]:
    return sorted(str(p.relative_to(path)) for p in path.rglob("*"))


def test_dry_run_reports_total_without_deleting(tmp_path, scenario_tree, capsys):
    """Test a dry run measures both projects and leaves the tree untouched."""
    before = _snapshot(tmp_path)

    exit_code = main([str(tmp_path), "--dry-run"])

    assert_equal(exit_code, EXIT_OK)
    assert_equal(_snapshot(tmp_path), before)
    out = capsys.readouterr().out
    assert "Dry run: nothing will be deleted." in out
    assert "Processed 2 project(s)." in out
    assert "Total space that will be saved: 1.5KiB" in out


def test_dry_run_with_json_report(tmp_path, scenario_tree):
    report_path = tmp_path.parent / f"{tmp_path.name}-report.json"

    main([str(tmp_path), "-n", "--report-json", str(report_path)])

    rows = json.loads(report_path.read_text())
    assert_equal(
        sorted((row["path"], row["size_bytes"], row["action"]) for row in rows),
        sorted(
            [
                (str(scenario_tree["a"]), 1000, "measured"),
                (str(scenario_tree["b"]), 500, "measured"),
            ]
        ),
    )
    report_path.unlink()


def test_direct_clean_removes_project_artifacts_only(tmp_path, scenario_tree, capsys):
    """Test a real run removes both target dirs and leaves the manifest-less dir alone."""
    exit_code = main([str(tmp_path), "--direct"])

    assert_equal(exit_code, EXIT_OK)
    assert not (scenario_tree["a"] / "target").exists()
    assert not (scenario_tree["b"] / "target").exists()
    assert (scenario_tree["a"] / "Cargo.toml").exists()
    assert (scenario_tree["b"] / "Cargo.toml").exists()
    assert (scenario_tree["c"] / "target" / "debug" / "keep.bin").exists()
    assert "Total space saved: 1.5KiB" in capsys.readouterr().out


def test_direct_release_clean_keeps_debug(tmp_path, scenario_tree):
    main([str(tmp_path), "--direct", "--release"])

    assert (scenario_tree["a"] / "target" / "debug" / "app").exists()
    assert not (scenario_tree["a"] / "target" / "release").exists()
    assert (scenario_tree["b"] / "target" / "debug" / "libb.rlib").exists()


def test_cargo_runner_invoked_per_project(tmp_path, scenario_tree, capsys):
    """Test the default runner shells out to cargo once per project."""
    completed = subprocess.CompletedProcess(
        args=["cargo", "clean"], returncode=0, stdout=None, stderr=b"Removed 3 files, 2.0KiB total\n"
    )
    with patch("clean_recursive.runner.subprocess.run", return_value=completed) as mock_run:
        exit_code = main([str(tmp_path)])

    assert_equal(exit_code, EXIT_OK)
    assert_equal(mock_run.call_count, 2)
    cwds = sorted(call.kwargs["cwd"] for call in mock_run.call_args_list)
    assert_equal(cwds, sorted([scenario_tree["a"], scenario_tree["b"]]))
    assert "Total space saved: 4.0KiB" in capsys.readouterr().out


def test_cargo_binary_from_environment(tmp_path, monkeypatch):
    make_project(tmp_path, "app")
    monkeypatch.setenv("CARGO", "/custom/cargo")
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=None, stderr=b"")
    with patch("clean_recursive.runner.subprocess.run", return_value=completed) as mock_run:
        main([str(tmp_path), "-d"])

    assert_equal(mock_run.call_args[0][0], ["/custom/cargo", "clean", "--doc"])


def test_cargo_failure_gives_partial_failure(tmp_path, scenario_tree, capsys):
    completed = subprocess.CompletedProcess(
        args=[], returncode=101, stdout=None, stderr=b"error: could not compile\n"
    )
    with patch("clean_recursive.runner.subprocess.run", return_value=completed):
        exit_code = main([str(tmp_path)])

    assert_equal(exit_code, EXIT_PARTIAL_FAILURE)
    out = capsys.readouterr().out
    assert "2 project(s) failed:" in out
    assert "error: could not compile" in out


def test_unreadable_directory_gives_partial_failure(tmp_path, scenario_tree, monkeypatch, capsys):
    """Test an unreadable subtree is reported while the rest is still processed."""
    locked = tmp_path / "locked"
    locked.mkdir()
    original = discovery._list_dir  # pylint: disable=protected-access

    def failing_list_dir(path):
        if Path(path) == locked:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return original(path)

    monkeypatch.setattr(discovery, "_list_dir", failing_list_dir)

    exit_code = main([str(tmp_path), "--dry-run"])

    assert_equal(exit_code, EXIT_PARTIAL_FAILURE)
    out = capsys.readouterr().out
    assert f"{locked}: Permission denied" in out
    assert "Processed 2 project(s)." in out


def test_missing_start_path_is_setup_error(tmp_path):
    assert_equal(main([str(tmp_path / "missing")]), EXIT_SETUP_ERROR)


def test_configuration_error_is_setup_error(tmp_path, monkeypatch):
    monkeypatch.setenv("CARGO_CLEAN_RECURSIVE_DEPTH", "deep")
    assert_equal(main([str(tmp_path)]), EXIT_SETUP_ERROR)


def test_empty_tree_reports_zero(tmp_path, capsys):
    assert_equal(main([str(tmp_path), "-n"]), EXIT_OK)
    out = capsys.readouterr().out
    assert "Processed 0 project(s)." in out
    assert "Total space that will be saved: 0B" in out


def test_run_failure_isolation(tmp_path):
    """Test one failing project does not stop the others."""
    start = tmp_path.resolve()
    bad = make_project(start, "bad")
    good = make_project(start, "good")
    args = parse_args([str(start)], Settings())

    report = run(args, RecordingRunner(failing={bad}))

    by_path = {result.path: result for result in report.results}
    assert_equal(set(by_path), {bad, good})
    assert by_path[bad].failed
    assert_equal(by_path[good].action, CleanAction.CLEANED)
    assert_equal(report.exit_code, EXIT_PARTIAL_FAILURE)


def test_keyboard_interrupt_keeps_partial_report(tmp_path, capsys):
    """Test Ctrl-C prints and writes the results gathered so far."""
    make_project(tmp_path, "one")
    make_project(tmp_path, "two")
    report_path = tmp_path / "reports" / "partial.json"

    class InterruptingRunner(RecordingRunner):
        def __call__(self, root, targets):
            if self.calls:
                raise KeyboardInterrupt
            return super().__call__(root, targets)

    with patch("clean_recursive.cli.build_runner", return_value=InterruptingRunner()):
        exit_code = main([str(tmp_path), "--report-json", str(report_path)])

    assert_equal(exit_code, EXIT_INTERRUPTED)
    out = capsys.readouterr().out
    assert "Aborted by user." in out
    assert "Processed 1 project(s)." in out
    rows = json.loads(report_path.read_text())
    assert_equal(len(rows), 1)
    assert_equal(rows[0]["action"], "cleaned")


@pytest.mark.parametrize("direct,expected", [(True, DirectRemovalRunner), (False, CargoCleanRunner)])
def test_build_runner(direct, expected):
    args = parse_args(["/src"] + (["--direct"] if direct else []), Settings())
    assert isinstance(build_runner(args, Settings()), expected)
