"""Git repository abstraction.

Only the read-only queries the release steps need: the previous version tag
and the commits since it. All operations return Result types; the caller
decides how loudly to report a failure.

Usage:
    repo = Repository(project_path)

    match repo.previous_version_tag(exclude_head=True):
        case Ok(None):
            print("No previous version tag found")
        case Ok(tag):
            commits = repo.commits_since(tag)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from trh.core.result import Err, Ok, Result
from trh.core.settings import GIT_TIMEOUT_SECONDS
from trh.platform.process import ProcessError
from trh.platform.process import run as run_process

__all__ = [
    "Commit",
    "GitError",
    "Repository",
    "VERSION_TAG_GLOB",
    "is_version_tag",
]

# Glob passed to `git describe --match`; is_version_tag() narrows further.
VERSION_TAG_GLOB = "*.*.*"

_VERSION_TAG_RE = re.compile(r"^v?\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+-]*)?$")

# git describe reports "no tag reachable" with these messages, not as an error.
_NO_TAG_MARKERS = (
    "no names found",
    "no tags can describe",
    "cannot describe",
)


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class Commit:
    """One line of `git log --pretty=format:'%h %s'`."""

    sha: str
    subject: str


def is_version_tag(name: str) -> bool:
    """True for N.N.N tags, optionally prefixed with "v" or suffixed (-rc.1)."""
    return bool(_VERSION_TAG_RE.match(name))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository working tree
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def previous_version_tag(self, *, exclude_head: bool) -> Result[str | None, GitError]:
        """Find the closest version tag reachable from HEAD.

        Args:
            exclude_head: Start from HEAD's parent. Used on tag events so the
                tag being released does not describe itself.

        Returns:
            Ok(tag), Ok(None) when history has no version tag,
            Err(GitError) on any other failure.
        """
        args = ["describe", "--tags", "--abbrev=0", "--match", VERSION_TAG_GLOB]
        if exclude_head:
            args.append("HEAD^")

        result = self._run(args)
        match result:
            case Err(e):
                text = f"{e.stderr}\n{e.stdout}".lower()
                if any(marker in text for marker in _NO_TAG_MARKERS):
                    return Ok(None)
                return Err(
                    GitError(
                        command="describe",
                        message=e.diagnostic,
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                tag = stdout.strip()
                if not tag or not is_version_tag(tag):
                    return Ok(None)
                return Ok(tag)

    def commits_since(self, since: str, until: str = "HEAD") -> Result[tuple[Commit, ...], GitError]:
        """List non-merge commits in since..until, newest first.

        Args:
            since: Exclusive lower bound (tag or sha).
            until: Inclusive upper bound.

        Returns:
            Ok(commits) on success, Err(GitError) on failure.
        """
        result = self._run(
            ["log", f"{since}..{until}", "--no-merges", "--pretty=format:%h %s"]
        )
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="log",
                        message=e.diagnostic,
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(self._parse_log(stdout))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", *args],
            cwd=self.path,
            timeout=GIT_TIMEOUT_SECONDS,
        )

    def _parse_log(self, output: str) -> tuple[Commit, ...]:
        commits: list[Commit] = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            sha, _, subject = line.partition(" ")
            commits.append(Commit(sha=sha, subject=subject))
        return tuple(commits)
