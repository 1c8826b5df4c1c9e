"""
Result aggregation and report output for clean_recursive.

Folds per-project results and traversal warnings into a RunReport, prints the
summary, and optionally writes the per-project rows as JSON or CSV.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from clean_recursive.cleaner import CleanResult
    from clean_recursive.discovery import TraversalWarning

BYTES_PER_KIB = 1024
BYTES_PER_MIB = BYTES_PER_KIB**2
BYTES_PER_GIB = BYTES_PER_KIB**3
BYTES_PER_TIB = BYTES_PER_KIB**4

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_INTERRUPTED = 130

_SIZE_UNITS = {
    "b": 1,
    "kib": BYTES_PER_KIB,
    "mib": BYTES_PER_MIB,
    "gib": BYTES_PER_GIB,
    "tib": BYTES_PER_TIB,
}

REPORT_FIELDS = ["path", "action", "size_bytes", "size_human", "error"]


def parse_size(text: str) -> int:
    """Parse cargo's compact size strings (e.g. 986.5MiB, 12B) into bytes.

    Raises:
        ValueError: If the string has no recognised unit or number.
    """
    raw = text.strip().rstrip(",").lower()
    if not raw:
        raise ValueError("Size string cannot be empty")
    # Longest suffix first so "mib" is not read as "b".
    for suffix in sorted(_SIZE_UNITS, key=len, reverse=True):
        if raw.endswith(suffix):
            number_part = raw[: -len(suffix)]
            try:
                return int(float(number_part) * _SIZE_UNITS[suffix])
            except ValueError as exc:
                raise ValueError(f"Cannot parse size: {text}") from exc
    raise ValueError(f"Unknown size unit in: {text}")


def format_size(num_bytes: int | None) -> str:
    """Format a byte count with binary units, matching cargo's own output."""
    if num_bytes is None:
        return "n/a"
    units = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]
    value = float(num_bytes)
    for unit in units:
        if value < BYTES_PER_KIB or unit == units[-1]:
            if unit == "B":
                return f"{int(value)}{unit}"
            return f"{value:.1f}{unit}"
        value /= BYTES_PER_KIB
    return f"{value:.1f}PiB"


@dataclass
class RunReport:
    """Everything that happened during one run."""

    dry_run: bool
    results: list[CleanResult] = field(default_factory=list)
    warnings: list[TraversalWarning] = field(default_factory=list)
    interrupted: bool = False

    def add(self, result: CleanResult) -> None:
        self.results.append(result)

    @property
    def project_count(self) -> int:
        return len(self.results)

    @property
    def total_bytes(self) -> int:
        # failed cleans may still have removed part of their targets
        return sum(result.size_bytes for result in self.results)

    @property
    def failures(self) -> list[CleanResult]:
        return [result for result in self.results if result.failed]

    @property
    def incomplete(self) -> list[CleanResult]:
        """Successful results whose byte count could not be fully determined."""
        return [result for result in self.results if not result.failed and result.error]

    @property
    def has_errors(self) -> bool:
        return bool(self.failures or self.warnings)

    @property
    def exit_code(self) -> int:
        if self.interrupted:
            return EXIT_INTERRUPTED
        return EXIT_PARTIAL_FAILURE if self.has_errors else EXIT_OK


def print_report(report: RunReport, *, verbose: bool = False) -> None:
    """Print per-project output (when verbose), problems, and the totals."""
    if verbose:
        for result in report.results:
            if result.output:
                print(f"==== {result.path} ====\n{result.output}")

    if report.failures:
        print(f"\n{len(report.failures)} project(s) failed:")
        for result in report.failures:
            print(f"  - {result.path}: {result.error}")

    if report.incomplete:
        print(f"\n{len(report.incomplete)} project(s) cleaned with an incomplete size:")
        for result in report.incomplete:
            print(f"  - {result.path}: {result.error}")

    if report.warnings:
        print(f"\n{len(report.warnings)} director(ies) could not be scanned:")
        for warning in report.warnings:
            print(f"  - {warning}")

    print(f"\nProcessed {report.project_count} project(s).")
    total = format_size(report.total_bytes)
    if report.dry_run:
        print(f"Total space that will be saved: {total}")
    else:
        print(f"Total space saved: {total}")


def _report_rows(results: Iterable[CleanResult]) -> list[dict[str, object]]:
    return [
        {
            "path": str(r.path),
            "action": r.action.value,
            "size_bytes": r.size_bytes,
            "size_human": format_size(r.size_bytes),
            "error": r.error,
        }
        for r in results
    ]


def write_reports(
    results: list[CleanResult],
    *,
    json_path: Path | None,
    csv_path: Path | None,
) -> None:
    """Write per-project rows to JSON and/or CSV report files."""
    rows = _report_rows(results)
    if json_path:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(json.dumps(rows, indent=2))
    if csv_path:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        with csv_path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=REPORT_FIELDS)
            writer.writeheader()
            writer.writerows(rows)
