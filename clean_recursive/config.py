"""
Configuration and environment resolution for clean_recursive.

Holds the cargo layout constants and loads overridable defaults from the
environment (optionally seeded from a dotenv file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

MANIFEST_FILE_NAME = "Cargo.toml"
ARTIFACT_DIR_NAME = "target"

DEFAULT_MAX_DEPTH = 64
DEFAULT_SKIP_DIR_NAMES: tuple[str, ...] = (".git", ".rustup", ".cargo")
DEFAULT_CARGO_BINARY = "cargo"

ENV_FILE_VAR = "CARGO_CLEAN_RECURSIVE_ENV_FILE"
DEPTH_VAR = "CARGO_CLEAN_RECURSIVE_DEPTH"
SKIPS_VAR = "CARGO_CLEAN_RECURSIVE_SKIPS"
CARGO_VAR = "CARGO"


class ConfigurationError(RuntimeError):
    """Raised when an environment override is invalid."""


@dataclass(frozen=True)
class Settings:
    """Defaults resolved from the environment before CLI flags are applied."""

    max_depth: int = DEFAULT_MAX_DEPTH
    skip_names: tuple[str, ...] = DEFAULT_SKIP_DIR_NAMES
    cargo_binary: str = DEFAULT_CARGO_BINARY


def _resolve_env_path(env_path: Optional[str] = None) -> Path | None:
    """
    Determine which dotenv file should seed the environment.

    Priority order:
      1. Explicit parameter
      2. CARGO_CLEAN_RECURSIVE_ENV_FILE environment variable
      3. ~/.cargo-clean-recursive.env (only if it exists)
    """
    if env_path:
        return Path(env_path).expanduser()
    configured = os.environ.get(ENV_FILE_VAR)
    if configured:
        return Path(configured).expanduser()
    default = Path.home() / ".cargo-clean-recursive.env"
    if default.is_file():
        return default
    return None


def _parse_depth(raw: str) -> int:
    try:
        depth = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{DEPTH_VAR} must be an integer, got {raw!r}") from exc
    if depth <= 0:
        raise ConfigurationError(f"{DEPTH_VAR} must be positive, got {depth}")
    return depth


def _parse_skips(raw: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def load_settings(env_path: Optional[str] = None) -> Settings:
    """Load settings from the process environment, seeded from a dotenv file if one is found.

    Values already present in the environment win over the dotenv file.

    Raises:
        ConfigurationError: If an explicitly named dotenv file is missing or a value is invalid.
    """
    resolved = _resolve_env_path(env_path)
    if resolved is not None:
        if not resolved.is_file():
            raise ConfigurationError(f"Environment file {resolved} does not exist")
        load_dotenv(resolved, override=False)

    max_depth = DEFAULT_MAX_DEPTH
    raw_depth = os.environ.get(DEPTH_VAR)
    if raw_depth:
        max_depth = _parse_depth(raw_depth)

    skip_names = DEFAULT_SKIP_DIR_NAMES
    raw_skips = os.environ.get(SKIPS_VAR)
    if raw_skips is not None:
        skip_names = _parse_skips(raw_skips)

    cargo_binary = os.environ.get(CARGO_VAR) or DEFAULT_CARGO_BINARY

    return Settings(max_depth=max_depth, skip_names=skip_names, cargo_binary=cargo_binary)
