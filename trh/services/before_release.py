"""Before-release step.

- Rename the build zip after the version tag or branch name
- Write release notes from commit messages since the previous version tag

Runs before the CI release upload, which picks up `publish/release.md` and the
renamed zip.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from trh.core.config import load_project_config
from trh.core.event import EventMeta, read_event_meta
from trh.core.result import Err, Ok, Result
from trh.core.settings import PUBLISH_DIR, RELEASE_NOTES_FILE
from trh.git.repository import Commit, Repository
from trh.output.console import ConsoleProtocol, Style
from trh.platform.files import truncate_text
from trh.services.artifacts import source_zip_path, target_zip_path
from trh.services.errors import ReleaseError
from trh.services.notes import render_release_notes

__all__ = ["BeforeReleaseOutcome", "collect_commits", "run_before_release"]


@dataclass(frozen=True, slots=True)
class BeforeReleaseOutcome:
    event: EventMeta
    skipped_reason: str | None = None
    release_notes_path: Path | None = None
    source_zip: Path | None = None
    target_zip: Path | None = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


def collect_commits(
    repo: Repository, event: EventMeta, console: ConsoleProtocol
) -> tuple[Commit, ...]:
    """Commits since the previous version tag; empty on any failure."""
    console.print("Gather commit messages since last version tag")

    tag_result = repo.previous_version_tag(exclude_head=event.ref.is_tag)
    if isinstance(tag_result, Err):
        console.warning(f"git describe failed: {tag_result.error.message}")
        return ()

    previous_tag = tag_result.value
    if previous_tag is None:
        console.print("No previous version tag found")
        return ()

    console.print(f"Since previous tag {previous_tag}")
    log_result = repo.commits_since(previous_tag)
    if isinstance(log_result, Err):
        console.warning(f"git log failed: {log_result.error.message}")
        return ()
    return log_result.value


def _notes_write_error(path: Path, error: OSError) -> ReleaseError:
    return ReleaseError(
        kind="write_failed",
        message=f"failed to write release notes: {error}",
        hint=str(path),
    )


def run_before_release(
    project_path: Path,
    *,
    console: ConsoleProtocol,
    env: Mapping[str, str] | None = None,
    repository: Repository | None = None,
) -> Result[BeforeReleaseOutcome, ReleaseError]:
    """Prepare the release: notes file and renamed artifact.

    Args:
        project_path: Project root (the CI working directory).
        console: Output sink.
        env: Environment for event context (defaults to os.environ).
        repository: Git repository to read history from (defaults to project_path).

    Returns:
        Ok(outcome), possibly skipped. Err if the notes file cannot be
        written or the artifact rename fails.
    """
    console.header("Prepare release")

    publish_dir = project_path / PUBLISH_DIR
    notes_path = publish_dir / RELEASE_NOTES_FILE

    event = read_event_meta(env)
    console.print(f"Repository {event.repo_full_name}")
    console.print(f"Event type {event.event_type}")
    console.print(f"Git ref {event.git_ref}")

    config = load_project_config(project_path)
    if config is None or config.archive is None:
        console.print("Config file or archive settings not found", Style.DIM)
        console.print("Skip zip archive release", Style.DIM)
        return Ok(BeforeReleaseOutcome(event=event, skipped_reason="no archive config"))

    source = source_zip_path(publish_dir, config.archive)
    if source is None:
        console.print("Archive config has neither root nor dest", Style.DIM)
        return Ok(BeforeReleaseOutcome(event=event, skipped_reason="no archive name"))

    if not source.is_file():
        console.print(f"Source zip file not found {source}")
        return Ok(
            BeforeReleaseOutcome(event=event, skipped_reason="source zip missing", source_zip=source)
        )

    console.print(f"Source zip file {source}")

    # The upload step expects the notes file even if the git queries fail.
    try:
        truncate_text(notes_path)
    except OSError as e:
        return Err(_notes_write_error(notes_path, e))

    repo = repository if repository is not None else Repository(project_path)
    commits = collect_commits(repo, event, console)

    if event.ref.is_tag:
        console.print(f"Release on tag {event.git_ref_name}")
    elif event.ref.is_default_branch:
        console.print("Release preview on main/master branch")
    else:
        console.print(f"Release preview on branch {event.git_ref_name}")

    notes = render_release_notes(
        ref=event.ref, repo_full_name=event.repo_full_name, commits=commits
    )
    console.print(f"Write release text {notes_path}")
    console.print(notes, Style.DIM)
    try:
        notes_path.write_text(notes, encoding="utf-8")
    except OSError as e:
        return Err(_notes_write_error(notes_path, e))

    target = target_zip_path(source, event.ref)
    console.print(f"Target zip file {target}")
    try:
        source.rename(target)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="rename_failed",
                message=f"failed to rename {source.name} to {target.name}: {e}",
                hint=str(source),
            )
        )

    console.success(f"Renamed {source.name} -> {target.name}")
    return Ok(
        BeforeReleaseOutcome(
            event=event,
            release_notes_path=notes_path,
            source_zip=source,
            target_zip=target,
        )
    )
