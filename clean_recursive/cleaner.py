"""
Per-project clean-or-measure logic for clean_recursive.

Each discovered project becomes exactly one CleanResult. Failures stay inside
that result so the remaining projects are still processed.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .discovery import ProjectRoot
from .measure import MeasurementError, measure_targets
from .runner import CleanOperationError, CleanRunner
from .scope import CleanScope, target_paths


class CleanAction(enum.Enum):
    """What happened to a project."""

    CLEANED = "cleaned"
    MEASURED = "measured"
    FAILED = "failed"


@dataclass
class CleanResult:
    """Outcome of cleaning or measuring one project.

    size_bytes holds what was freed (or would be) even for a failed clean that
    removed part of its targets. error on a non-failed result is a note that the
    byte count may be incomplete.
    """

    path: Path
    action: CleanAction
    size_bytes: int = 0
    error: str | None = None
    output: str = ""

    @property
    def failed(self) -> bool:
        return self.action is CleanAction.FAILED


class Cleaner:
    """Apply a CleanScope to project roots one at a time."""

    def __init__(self, scope: CleanScope, runner: CleanRunner):
        self.scope = scope
        self.runner = runner
        self.targets = scope.targets()

    def _measure(self, root: ProjectRoot) -> CleanResult:
        size = measure_targets(target_paths(root.artifact_dir, self.targets))
        return CleanResult(path=root.path, action=CleanAction.MEASURED, size_bytes=size)

    def _clean(self, root: ProjectRoot) -> CleanResult:
        measure_error: MeasurementError | None = None
        try:
            before = measure_targets(target_paths(root.artifact_dir, self.targets))
        except MeasurementError as exc:
            logging.warning("Cannot measure %s before cleaning: %s", root.path, exc)
            measure_error = exc
            before = 0

        outcome = self.runner(root, self.targets)
        if not outcome.success:
            return CleanResult(
                path=root.path,
                action=CleanAction.FAILED,
                size_bytes=outcome.freed_bytes or 0,
                error=outcome.reason,
                output=outcome.output,
            )

        note = None
        if outcome.freed_bytes is not None:
            freed = outcome.freed_bytes
        else:
            freed = before
            if measure_error is not None:
                note = f"freed size unknown: {measure_error}"
        return CleanResult(
            path=root.path,
            action=CleanAction.CLEANED,
            size_bytes=freed,
            error=note,
            output=outcome.output,
        )

    def process(self, root: ProjectRoot) -> CleanResult:
        """Clean or measure one project; never raises for project-level failures."""
        logging.info("Checking %s", root.path)
        try:
            if self.scope.dry_run:
                result = self._measure(root)
            else:
                result = self._clean(root)
        except (MeasurementError, CleanOperationError, OSError, subprocess.SubprocessError) as exc:
            logging.error("Failed to process %s: %s", root.path, exc)
            return CleanResult(path=root.path, action=CleanAction.FAILED, error=str(exc))
        if result.failed:
            logging.error("Failed to clean %s: %s", root.path, result.error)
        return result

    def process_all(self, roots: Iterable[ProjectRoot]) -> Iterator[CleanResult]:
        """Pull roots lazily, finishing each before requesting the next."""
        for root in roots:
            yield self.process(root)
