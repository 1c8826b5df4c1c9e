"""
Recursive cargo artifact cleaner.

Find every cargo project below a directory and clean (or measure) its build
artifacts.
"""

from . import args_parser, cleaner, cli, config, discovery, measure, reports, runner, scope
from .cleaner import CleanAction, Cleaner, CleanResult
from .discovery import IoErrorHandling, ProjectDiscoverer, ProjectRoot, TraversalWarning
from .measure import MeasurementError, measure_tree
from .reports import RunReport
from .runner import CargoCleanRunner, CleanOutcome, DirectRemovalRunner
from .scope import ArtifactKind, CleanScope, resolve_targets

__all__ = [
    "ArtifactKind",
    "CargoCleanRunner",
    "CleanAction",
    "CleanOutcome",
    "CleanResult",
    "CleanScope",
    "Cleaner",
    "DirectRemovalRunner",
    "IoErrorHandling",
    "MeasurementError",
    "ProjectDiscoverer",
    "ProjectRoot",
    "RunReport",
    "TraversalWarning",
    "args_parser",
    "cleaner",
    "cli",
    "config",
    "discovery",
    "measure",
    "measure_tree",
    "reports",
    "resolve_targets",
    "runner",
    "scope",
]
