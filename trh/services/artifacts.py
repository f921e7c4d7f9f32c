"""Release artifact naming and discovery.

The build leaves `{root}.zip` in the publish directory. before-release
renames it after the event:

    tag 1.2.0            -> {root}-1.2.0.zip
    main / master        -> {root}-latest.zip
    feature/new-thing    -> {root}-feature-new-thing-latest.zip

after-release finds it again by pattern, without knowing `root`.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable
from pathlib import Path

from trh.core.config import ArchiveConfig
from trh.core.event import GitRef
from trh.services.slug import slugify

__all__ = [
    "LATEST_RELEASE",
    "artifact_pattern",
    "branch_suffix",
    "find_release_artifact",
    "pick_last_match",
    "release_label",
    "source_zip_path",
    "target_zip_path",
]

LATEST_RELEASE = "latest"


def source_zip_path(publish_dir: Path, archive: ArchiveConfig) -> Path | None:
    """Where the build is expected to have written the zip."""
    name = archive.source_zip_name
    if name is None:
        return None
    return publish_dir / name


def branch_suffix(branch: str) -> str:
    """Slug for a branch name, with path separators kept as hyphens."""
    return slugify(branch.replace("/", "-"))


def target_zip_path(source: Path, ref: GitRef) -> Path:
    """Renamed artifact path for the given ref.

    Refs of unknown kind are named like non-default branches.
    """
    stem = source.stem
    if ref.is_tag:
        name = f"{stem}-{ref.name}.zip"
    elif ref.is_default_branch:
        name = f"{stem}-{LATEST_RELEASE}.zip"
    else:
        name = f"{stem}-{branch_suffix(ref.name)}-{LATEST_RELEASE}.zip"
    return source.with_name(name)


def release_label(ref: GitRef) -> str:
    """Release identifier used in download URLs: the tag, or "latest"."""
    return ref.name if ref.is_tag else LATEST_RELEASE


def artifact_pattern(ref: GitRef) -> str:
    """Glob pattern matching the renamed artifact for ref."""
    if ref.is_tag:
        return f"*-{glob.escape(ref.name)}.zip"
    return f"*{LATEST_RELEASE}.zip"


def pick_last_match(paths: Iterable[Path]) -> Path | None:
    """Pick "the" artifact among several matches.

    Matches are ordered by file name (code point order) and the last one wins,
    so the choice does not depend on directory scan order.
    """
    ordered = sorted(paths, key=lambda p: p.name)
    return ordered[-1] if ordered else None


def find_release_artifact(publish_dir: Path, ref: GitRef) -> Path | None:
    """Locate the renamed artifact, or None if absent."""
    if not publish_dir.is_dir():
        return None
    matches = (p for p in publish_dir.glob(artifact_pattern(ref)) if p.is_file())
    return pick_last_match(matches)
