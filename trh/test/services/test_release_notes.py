from __future__ import annotations

from trh.core.event import GitRef
from trh.git.repository import Commit
from trh.services.notes import format_commit_list, release_heading, render_release_notes

REPO = "acme/example-plugin"


class TestReleaseHeading:
    def test_tag(self) -> None:
        assert release_heading(GitRef("tag", "1.2.0")) == "# Release tag 1.2.0"

    def test_default_branch(self) -> None:
        assert release_heading(GitRef("branch", "main")) == "# Release preview"
        assert release_heading(GitRef("branch", "master")) == "# Release preview"

    def test_other_branch(self) -> None:
        assert release_heading(GitRef("branch", "feature/x")) == "# Branch preview feature/x"

    def test_unknown_kind(self) -> None:
        assert release_heading(GitRef("unknown", "unknown")) == "# Branch preview unknown"


def test_format_commit_list_links_each_commit() -> None:
    commits = [Commit("abc1234", "Add thing"), Commit("def5678", "Fix [bug]")]
    assert format_commit_list(REPO, commits) == (
        "- [abc1234](https://github.com/acme/example-plugin/commit/abc1234) Add thing\n"
        "- [def5678](https://github.com/acme/example-plugin/commit/def5678) Fix [bug]"
    )


class TestRenderReleaseNotes:
    def test_no_commits_is_heading_only(self) -> None:
        notes = render_release_notes(ref=GitRef("branch", "main"), repo_full_name=REPO, commits=())
        assert notes == "# Release preview"

    def test_with_commits(self) -> None:
        notes = render_release_notes(
            ref=GitRef("tag", "1.0.0"),
            repo_full_name=REPO,
            commits=[Commit("abc1234", "Add thing")],
        )
        assert notes == (
            "# Release tag 1.0.0\n"
            "\n"
            "- [abc1234](https://github.com/acme/example-plugin/commit/abc1234) Add thing"
        )

    def test_keeps_commit_order(self) -> None:
        notes = render_release_notes(
            ref=GitRef("branch", "dev"),
            repo_full_name=REPO,
            commits=[Commit("bbb", "second"), Commit("aaa", "first")],
        )
        lines = notes.splitlines()
        assert lines[2].endswith("second")
        assert lines[3].endswith("first")
