"""
Project discovery for clean_recursive.

Walks a directory tree depth-first and yields every directory holding a cargo
manifest, without descending into the artifact directory of a discovered
project.
"""

from __future__ import annotations

import enum
import errno
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .config import (
    ARTIFACT_DIR_NAME,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SKIP_DIR_NAMES,
    MANIFEST_FILE_NAME,
)


class IoErrorHandling(str, enum.Enum):
    """Which traversal errors are logged as warnings while scanning."""

    IGNORE = "ignore"
    RAISE_UNEXPECTED = "raise-unexpected"
    RAISE_ALL = "raise-all"


@dataclass(frozen=True)
class ProjectRoot:
    """A directory confirmed to contain a cargo manifest."""

    path: Path

    @property
    def artifact_dir(self) -> Path:
        return self.path / ARTIFACT_DIR_NAME


@dataclass(frozen=True)
class TraversalWarning:
    """A directory that could not be read during discovery."""

    path: Path
    message: str
    expected: bool

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _is_expected_error(exc: OSError) -> bool:
    """Permission problems are routine when scanning a home directory."""
    return isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM)


def _list_dir(path: Path) -> list[os.DirEntry]:
    with os.scandir(path) as entries:
        return list(entries)


@dataclass
class ProjectDiscoverer:
    """Depth-first, pre-order walker yielding cargo project roots.

    The walk uses an explicit stack so arbitrarily deep trees cannot exhaust the
    interpreter's recursion limit. Symlinked directories are never followed and
    each canonical directory is visited at most once.
    """

    start: Path
    max_depth: int = DEFAULT_MAX_DEPTH
    skip_names: frozenset[str] = frozenset(DEFAULT_SKIP_DIR_NAMES)
    io_error_handling: IoErrorHandling = IoErrorHandling.RAISE_UNEXPECTED
    warnings: list[TraversalWarning] = field(default_factory=list)

    def _record(self, path: Path, exc: OSError) -> None:
        expected = _is_expected_error(exc)
        message = exc.strerror or str(exc)
        self.warnings.append(TraversalWarning(path=path, message=message, expected=expected))
        if self.io_error_handling is IoErrorHandling.RAISE_ALL or (
            self.io_error_handling is IoErrorHandling.RAISE_UNEXPECTED and not expected
        ):
            logging.warning("Cannot read %s: %s", path, message)
        else:
            logging.debug("Cannot read %s: %s", path, message)

    def _classify(self, entries: Iterable[os.DirEntry], directory: Path) -> tuple[bool, list[Path]]:
        """Return (is_project_root, child directories in listing order)."""
        is_root = False
        subdirs: list[Path] = []
        for entry in entries:
            try:
                if entry.name == MANIFEST_FILE_NAME and entry.is_file():
                    is_root = True
                elif entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
            except OSError as exc:
                self._record(directory / entry.name, exc)
        return is_root, subdirs

    def iter_roots(self) -> Iterator[ProjectRoot]:
        """Yield project roots lazily; the generator cannot be restarted."""
        start = Path(os.path.abspath(self.start))
        visited: set[str] = set()
        stack: list[tuple[Path, int]] = [(start, self.max_depth)]

        while stack:
            directory, remaining = stack.pop()
            # The start directory is subject to the skip set as well.
            if remaining <= 0 or directory.name in self.skip_names:
                continue

            canonical = os.path.realpath(directory)
            if canonical in visited:
                continue
            visited.add(canonical)

            try:
                entries = _list_dir(directory)
            except OSError as exc:
                self._record(directory, exc)
                continue

            is_root, subdirs = self._classify(entries, directory)
            children = [
                child
                for child in subdirs
                if not (is_root and child.name == ARTIFACT_DIR_NAME)
            ]
            # Reversed so the first listed child is popped first.
            stack.extend((child, remaining - 1) for child in reversed(children))

            if is_root:
                yield ProjectRoot(path=directory)
