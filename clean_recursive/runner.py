"""
External clean operations for clean_recursive.

`CargoCleanRunner` shells out to `cargo clean`; `DirectRemovalRunner` removes the
artifact directories itself for machines without a cargo toolchain.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from .config import DEFAULT_CARGO_BINARY
from .discovery import ProjectRoot
from .measure import MeasurementError, measure_tree
from .reports import format_size, parse_size
from .scope import ArtifactKind, target_paths

MIN_SUMMARY_TOKENS = 4


class CleanOperationError(RuntimeError):
    """Raised when the external clean operation cannot be started."""


@dataclass(frozen=True)
class CleanOutcome:
    """What the external clean operation reported for one project."""

    success: bool
    freed_bytes: int | None = None
    output: str = ""
    reason: str | None = None


class CleanRunner(Protocol):
    """Callable that cleans the given artifact kinds of one project."""

    def __call__(self, root: ProjectRoot, targets: frozenset[ArtifactKind]) -> CleanOutcome: ...


def build_cargo_args(targets: frozenset[ArtifactKind]) -> list[str]:
    """Translate a target set into `cargo clean` selector flags."""
    args: list[str] = []
    if ArtifactKind.RELEASE in targets:
        args.append("--release")
    if ArtifactKind.DOC in targets:
        args.append("--doc")
    return args


def parse_cargo_summary(output: str) -> int | None:
    """Extract the freed byte count from cargo's first summary line.

    Cargo prints e.g. ``Removed 2020 files, 986.5MiB total``; an already clean
    project prints ``Removed 0 files``. Returns None when no size can be read.
    """
    first_line = output.strip().split("\n", 1)[0].strip()
    if not first_line:
        return None
    if first_line in ("Removed 0 files", "Summary 0 files"):
        return 0
    tokens = first_line.split()
    if len(tokens) < MIN_SUMMARY_TOKENS:
        return None
    try:
        return parse_size(tokens[3])
    except ValueError:
        logging.warning("Failed to parse size of cargo clean output: %s", first_line)
        return None


class CargoCleanRunner:
    """Run `cargo clean` inside a project root."""

    def __init__(self, cargo_binary: str = DEFAULT_CARGO_BINARY):
        self.cargo_binary = cargo_binary

    def command(self, targets: frozenset[ArtifactKind]) -> list[str]:
        return [self.cargo_binary, "clean", *build_cargo_args(targets)]

    def __call__(self, root: ProjectRoot, targets: frozenset[ArtifactKind]) -> CleanOutcome:
        command = self.command(targets)
        logging.debug("Running %s in %s", " ".join(command), root.path)
        try:
            completed = subprocess.run(
                command,
                cwd=root.path,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise CleanOperationError(f"failed to spawn `{' '.join(command)}`: {exc}") from exc

        # cargo writes its summary to stderr
        output = completed.stderr.decode("utf-8", errors="replace").strip()
        if completed.returncode != 0:
            reason = output or f"`cargo clean` exited with status {completed.returncode}"
            return CleanOutcome(success=False, output=output, reason=reason)
        return CleanOutcome(success=True, freed_bytes=parse_cargo_summary(output), output=output)


class DirectRemovalRunner:
    """Remove artifact directories with shutil instead of invoking cargo."""

    def __call__(self, root: ProjectRoot, targets: frozenset[ArtifactKind]) -> CleanOutcome:
        """Remove each target path in turn, stopping at the first error.

        freed_bytes counts the paths fully removed, so a failed outcome still
        reports what an earlier path freed.
        """
        removed: list[str] = []
        freed = 0
        for path in target_paths(root.artifact_dir, targets):
            if not os.path.lexists(path):
                continue
            try:
                size = measure_tree(path)
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except (MeasurementError, OSError, shutil.Error) as exc:
                return CleanOutcome(
                    success=False,
                    freed_bytes=freed,
                    output="\n".join(removed),
                    reason=f"Error deleting {path}: {exc}",
                )
            logging.debug("Deleted %s", path)
            freed += size
            removed.append(f"Removed {path} ({format_size(size)})")
        return CleanOutcome(success=True, freed_bytes=freed, output="\n".join(removed))
