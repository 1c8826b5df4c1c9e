"""Size measurement of artifact directories without following symlinks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable


class MeasurementError(RuntimeError):
    """Raised when part of an artifact directory cannot be sized."""


def measure_tree(path: Path) -> int:
    """Sum the sizes of all files below path without following symlinks.

    A missing path measures as zero bytes.

    Raises:
        MeasurementError: If a directory or file below path cannot be read.
    """
    if not os.path.lexists(path):
        return 0
    if not path.is_dir() or path.is_symlink():
        try:
            return path.lstat().st_size
        except OSError as exc:
            raise MeasurementError(f"Unable to stat {path}: {exc}") from exc

    errors: list[OSError] = []
    total = 0
    for dirpath, dirnames, filenames in os.walk(path, onerror=errors.append):
        # Symlinked directories are reported in dirnames but never walked.
        for name in [*filenames, *(d for d in dirnames if os.path.islink(os.path.join(dirpath, d)))]:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError as exc:
                errors.append(exc)
    if errors:
        first = errors[0]
        raise MeasurementError(
            f"Unable to measure {path}: {len(errors)} error(s), first: {first}"
        ) from first
    return total


def measure_targets(paths: Iterable[Path]) -> int:
    """Total size of every target path."""
    return sum(measure_tree(path) for path in paths)
