"""Pytest configuration and shared fixtures for cargo-clean-recursive."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from clean_recursive import config


@pytest.fixture(autouse=True)
def isolated_env_file(tmp_path, monkeypatch):
    """Point the settings loader at an empty .env so a developer's overrides never leak into tests."""
    env_file = tmp_path / ".env"
    env_file.write_text("")
    monkeypatch.setenv(config.ENV_FILE_VAR, str(env_file))
    for name in (config.DEPTH_VAR, config.SKIPS_VAR, config.CARGO_VAR):
        # setenv first so values loaded from a dotenv file are removed on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield env_file
