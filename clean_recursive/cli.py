"""
Command-line interface and main entry point for clean_recursive.

Wires discovery, cleaning and reporting together and maps the outcome to an
exit status.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .args_parser import parse_args
from .cleaner import Cleaner
from .config import ConfigurationError, Settings, load_settings
from .discovery import ProjectDiscoverer
from .reports import RunReport, print_report, write_reports
from .runner import CargoCleanRunner, CleanRunner, DirectRemovalRunner
from .scope import CleanScope

EXIT_SETUP_ERROR = 1


def build_runner(args: argparse.Namespace, settings: Settings) -> CleanRunner:
    if args.direct:
        return DirectRemovalRunner()
    return CargoCleanRunner(settings.cargo_binary)


def run(args: argparse.Namespace, runner: CleanRunner) -> RunReport:
    """Discover and process every project under args.path sequentially.

    Ctrl-C stops the run and marks the report as interrupted; the results
    gathered so far are kept.
    """
    scope = CleanScope(release_only=args.release, doc_only=args.doc, dry_run=args.dry_run)
    discoverer = ProjectDiscoverer(
        start=args.path,
        max_depth=args.depth,
        skip_names=frozenset(args.skips),
        io_error_handling=args.io_error_handling,
    )
    cleaner = Cleaner(scope, runner)
    report = RunReport(dry_run=scope.dry_run, warnings=discoverer.warnings)
    try:
        for result in cleaner.process_all(discoverer.iter_roots()):
            report.add(result)
    except KeyboardInterrupt:
        print("\nAborted by user.")
        report.interrupted = True
    return report


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the cargo-clean-recursive CLI."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
        logging.error("%s", exc)
        return EXIT_SETUP_ERROR

    args = parse_args(sys.argv[1:] if argv is None else argv, settings)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    if not args.path.is_dir():
        logging.error("Start path %s is not a directory.", args.path)
        return EXIT_SETUP_ERROR

    if args.dry_run:
        print("Dry run: nothing will be deleted.\n")

    report = run(args, build_runner(args, settings))
    print_report(report, verbose=args.verbose)
    write_reports(report.results, json_path=args.report_json, csv_path=args.report_csv)
    return report.exit_code
