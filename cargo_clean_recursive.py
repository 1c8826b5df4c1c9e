#!/usr/bin/env python3
"""
Recursively find cargo projects and clean their build artifacts.

This is a thin wrapper around the clean_recursive package.
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure the repository root is importable even when this script is run via an absolute path.
REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT) not in sys.path:  # pragma: no cover - import context dependent
    sys.path.insert(0, str(REPO_ROOT))

from clean_recursive.cli import main  # noqa: E402  pylint: disable=wrong-import-position

if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(main())
