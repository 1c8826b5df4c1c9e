"""Clean scope selection and its resolution to concrete artifact kinds."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class ArtifactKind(enum.Enum):
    """Artifact groups a clean can target."""

    DEBUG = "debug"
    RELEASE = "release"
    DOC = "doc"


# Location of each kind relative to the artifact directory. A plain
# `cargo clean` removes the whole artifact directory, hence the empty path.
ARTIFACT_SUBDIRS: dict[ArtifactKind, tuple[str, ...]] = {
    ArtifactKind.DEBUG: (),
    ArtifactKind.RELEASE: ("release",),
    ArtifactKind.DOC: ("doc",),
}


@dataclass(frozen=True)
class CleanScope:
    """User selection of what to clean and whether to only measure."""

    release_only: bool = False
    doc_only: bool = False
    dry_run: bool = False

    def targets(self) -> frozenset[ArtifactKind]:
        return resolve_targets(self)


def resolve_targets(scope: CleanScope) -> frozenset[ArtifactKind]:
    """Map flags to artifact kinds; debug is only targeted when no flag is set."""
    kinds: set[ArtifactKind] = set()
    if scope.release_only:
        kinds.add(ArtifactKind.RELEASE)
    if scope.doc_only:
        kinds.add(ArtifactKind.DOC)
    if not kinds:
        kinds.add(ArtifactKind.DEBUG)
    return frozenset(kinds)


def target_paths(artifact_dir: Path, targets: frozenset[ArtifactKind]) -> list[Path]:
    """Return the directories a clean of targets would remove, in a stable order."""
    if ArtifactKind.DEBUG in targets:
        return [artifact_dir]
    return [
        artifact_dir.joinpath(*ARTIFACT_SUBDIRS[kind])
        for kind in sorted(targets, key=lambda k: k.value)
    ]
