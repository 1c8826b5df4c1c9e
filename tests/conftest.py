"""Shared pytest fixtures for test files."""

from __future__ import annotations

import pytest

from tests.cargo_tree_test_utils import RecordingRunner, build_scenario_tree


@pytest.fixture(name="scenario_tree")
def fixture_scenario_tree(tmp_path):
    """Provide the a / a/vendor/b / c tree used by the end-to-end tests."""
    return build_scenario_tree(tmp_path)


@pytest.fixture(name="recording_runner")
def fixture_recording_runner():
    return RecordingRunner()
