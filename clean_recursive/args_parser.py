"""
Argument parsing for the clean_recursive CLI.

Handles command-line argument definition, parsing, and validation.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import Settings
from .discovery import IoErrorHandling

CARGO_SUBCOMMAND_NAME = "clean-recursive"


def add_scope_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the artifact selection and dry-run flags."""
    parser.add_argument("-d", "--doc", action="store_true", help="Delete documentation artifacts.")
    parser.add_argument("-r", "--release", action="store_true", help="Delete release artifacts.")
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Report how much space would be freed without deleting anything.",
    )


def add_traversal_arguments(parser: argparse.ArgumentParser, settings: Settings) -> None:
    """Add search depth, skip list and IO error policy arguments."""
    parser.add_argument(
        "--depth",
        type=int,
        default=settings.max_depth,
        help=f"Recursive search depth limit (default: {settings.max_depth}).",
    )
    parser.add_argument(
        "--skips",
        nargs="*",
        default=list(settings.skip_names),
        metavar="NAME",
        help=(
            "Directory names not to descend into, the start directory included "
            f"(default: {' '.join(settings.skip_names)})."
        ),
    )
    parser.add_argument(
        "--io-error-handling",
        choices=[mode.value for mode in IoErrorHandling],
        default=IoErrorHandling.RAISE_UNEXPECTED.value,
        help=(
            "Which unreadable directories to warn about while scanning "
            "(default: raise-unexpected, i.e. everything but permission denied)."
        ),
    )


def add_action_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments choosing how projects are cleaned."""
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Remove artifact directories directly instead of running `cargo clean`.",
    )


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output and reporting arguments."""
    parser.add_argument("--report-json", type=Path, help="Optional path to write per-project results as JSON.")
    parser.add_argument("--report-csv", type=Path, help="Optional path to write per-project results as CSV.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print cargo output and debug logging.")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-clean-recursive",
        description="Recursively find cargo projects and clean their build artifacts.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Directory to scan (default: current directory).",
    )
    add_scope_arguments(parser)
    add_traversal_arguments(parser, settings)
    add_action_arguments(parser)
    add_output_arguments(parser)
    return parser


def strip_cargo_subcommand(argv: list[str]) -> list[str]:
    """Drop the subcommand name cargo passes when run as `cargo clean-recursive`."""
    if argv and argv[0] == CARGO_SUBCOMMAND_NAME:
        return argv[1:]
    return argv


def parse_args(argv: list[str], settings: Settings) -> argparse.Namespace:
    """Parse and validate command-line arguments."""
    parser = build_parser(settings)
    args = parser.parse_args(strip_cargo_subcommand(argv))
    if args.depth <= 0:
        parser.error("--depth must be positive.")
    args.path = args.path.expanduser() if args.path else Path.cwd()
    args.io_error_handling = IoErrorHandling(args.io_error_handling)
    return args
