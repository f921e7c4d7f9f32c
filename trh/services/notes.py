"""Release notes written to `publish/release.md` by before-release.

A heading naming the release, then the commits since the previous version
tag as a Markdown list linking each short sha to its commit page:

    # Release tag 1.2.0

    - [abc1234](https://github.com/owner/repo/commit/abc1234) Add feature
"""

from __future__ import annotations

from collections.abc import Sequence

from trh.core.event import GitRef
from trh.core.settings import commit_url
from trh.git.repository import Commit


def release_heading(ref: GitRef) -> str:
    if ref.is_tag:
        return f"# Release tag {ref.name}"
    if ref.is_default_branch:
        return "# Release preview"
    return f"# Branch preview {ref.name}"


def format_commit_list(repo_full_name: str, commits: Sequence[Commit]) -> str:
    """Markdown list, one linked commit per line."""
    return "\n".join(
        f"- [{c.sha}]({commit_url(repo_full_name, c.sha)}) {c.subject}" for c in commits
    )


def render_release_notes(
    *, ref: GitRef, repo_full_name: str, commits: Sequence[Commit]
) -> str:
    """Heading, then (if any) a blank line and the commit list."""
    heading = release_heading(ref)
    if not commits:
        return heading
    return f"{heading}\n\n{format_commit_list(repo_full_name, commits)}"
