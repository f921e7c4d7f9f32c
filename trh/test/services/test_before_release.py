from __future__ import annotations

import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from trh.core.result import Err, Ok, Result
from trh.git.repository import Commit, GitError
from trh.output.console import MockConsole
from trh.services.before_release import run_before_release


class FakeRepository:
    """Stands in for trh.git.Repository with canned answers."""

    def __init__(
        self,
        tag: Result[str | None, GitError] = Ok(None),
        commits: Result[tuple[Commit, ...], GitError] = Ok(()),
    ) -> None:
        self.tag = tag
        self.commits = commits
        self.describe_calls: list[bool] = []
        self.log_calls: list[str] = []

    def previous_version_tag(self, *, exclude_head: bool) -> Result[str | None, GitError]:
        self.describe_calls.append(exclude_head)
        return self.tag

    def commits_since(self, since: str, until: str = "HEAD") -> Result[tuple[Commit, ...], GitError]:
        self.log_calls.append(since)
        return self.commits


def _env(kind: str = "branch", name: str = "main") -> dict[str, str]:
    prefix = "refs/tags" if kind == "tag" else "refs/heads"
    return {
        "GITHUB_REPOSITORY": "acme/example-plugin",
        "GITHUB_REF_TYPE": kind,
        "GITHUB_REF": f"{prefix}/{name}",
        "GITHUB_REF_NAME": name,
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "tangible.config.toml").write_text(
        '[archive]\nroot = "example-plugin"\ndest = "publish/example-plugin.zip"\n'
    )
    publish = tmp_path / "publish"
    publish.mkdir()
    (publish / "example-plugin.zip").write_bytes(b"PK")
    return tmp_path


def _run(project: Path, env: dict[str, str], repo: FakeRepository | None = None):
    console = MockConsole()
    result = run_before_release(
        project,
        console=console,
        env=env,
        repository=repo or FakeRepository(),  # type: ignore[arg-type]
    )
    return result, console


class TestSkips:
    def test_no_config(self, tmp_path: Path) -> None:
        (tmp_path / "publish").mkdir()
        (tmp_path / "publish" / "x.zip").write_bytes(b"PK")

        result, console = _run(tmp_path, _env())

        assert isinstance(result, Ok)
        assert result.value.skipped
        assert (tmp_path / "publish" / "x.zip").exists()
        assert not (tmp_path / "publish" / "release.md").exists()
        assert console.find("Skip zip archive release")

    def test_config_without_archive(self, tmp_path: Path) -> None:
        (tmp_path / "tangible.config.toml").write_text('name = "x"\n')
        result, _ = _run(tmp_path, _env())
        assert isinstance(result, Ok)
        assert result.value.skipped_reason == "no archive config"

    def test_invalid_config_is_like_no_config(self, tmp_path: Path) -> None:
        (tmp_path / "tangible.config.toml").write_text("[archive\n")
        result, _ = _run(tmp_path, _env())
        assert isinstance(result, Ok)
        assert result.value.skipped

    def test_empty_archive_table(self, tmp_path: Path) -> None:
        (tmp_path / "tangible.config.toml").write_text("[archive]\n")
        result, _ = _run(tmp_path, _env())
        assert isinstance(result, Ok)
        assert result.value.skipped_reason == "no archive name"

    def test_source_zip_missing(self, project: Path) -> None:
        (project / "publish" / "example-plugin.zip").unlink()
        result, console = _run(project, _env())

        assert isinstance(result, Ok)
        assert result.value.skipped_reason == "source zip missing"
        assert not (project / "publish" / "release.md").exists()
        assert console.find("Source zip file not found")


class TestRelease:
    def test_default_branch_without_tags(self, project: Path) -> None:
        repo = FakeRepository(tag=Ok(None))
        result, console = _run(project, _env("branch", "main"), repo)

        assert isinstance(result, Ok)
        publish = project / "publish"
        assert (publish / "example-plugin-latest.zip").read_bytes() == b"PK"
        assert not (publish / "example-plugin.zip").exists()
        assert (publish / "release.md").read_text() == "# Release preview"
        assert repo.describe_calls == [False]
        assert repo.log_calls == []
        assert console.find("No previous version tag found")

    def test_tag_with_history(self, project: Path) -> None:
        repo = FakeRepository(
            tag=Ok("1.0.0"),
            commits=Ok((Commit("abc1234", "Add feature"), Commit("def5678", "Fix bug"))),
        )
        result, _ = _run(project, _env("tag", "1.1.0"), repo)

        assert isinstance(result, Ok)
        outcome = result.value
        assert outcome.target_zip == project / "publish" / "example-plugin-1.1.0.zip"
        assert outcome.target_zip.exists()
        assert repo.describe_calls == [True]
        assert repo.log_calls == ["1.0.0"]
        assert (project / "publish" / "release.md").read_text() == (
            "# Release tag 1.1.0\n"
            "\n"
            "- [abc1234](https://github.com/acme/example-plugin/commit/abc1234) Add feature\n"
            "- [def5678](https://github.com/acme/example-plugin/commit/def5678) Fix bug"
        )

    def test_feature_branch(self, project: Path) -> None:
        result, _ = _run(project, _env("branch", "feature/new-thing"))

        assert isinstance(result, Ok)
        assert (project / "publish" / "example-plugin-feature-new-thing-latest.zip").exists()
        assert (project / "publish" / "release.md").read_text() == (
            "# Branch preview feature/new-thing"
        )

    def test_unknown_ref_kind(self, project: Path) -> None:
        result, _ = _run(project, {"GITHUB_REPOSITORY": "acme/example-plugin"})

        assert isinstance(result, Ok)
        assert (project / "publish" / "example-plugin-unknown-latest.zip").exists()

    def test_unknown_ref_kind_on_main_is_release_preview(self, project: Path) -> None:
        env = {"GITHUB_REPOSITORY": "acme/example-plugin", "GITHUB_REF_NAME": "main"}
        result, _ = _run(project, env)

        assert isinstance(result, Ok)
        assert (project / "publish" / "example-plugin-latest.zip").exists()
        assert (project / "publish" / "release.md").read_text() == "# Release preview"

    def test_source_name_from_dest_only(self, tmp_path: Path) -> None:
        (tmp_path / "tangible.config.json").write_text(
            '{"archive": {"dest": "publish/bundle.zip"}}'
        )
        (tmp_path / "publish").mkdir()
        (tmp_path / "publish" / "bundle.zip").write_bytes(b"PK")

        result, _ = _run(tmp_path, _env("tag", "2.0.0"))

        assert isinstance(result, Ok)
        assert (tmp_path / "publish" / "bundle-2.0.0.zip").exists()

    def test_git_failure_still_releases(self, project: Path) -> None:
        repo = FakeRepository(tag=Err(GitError("describe", "fatal: not a git repository", 128)))
        result, console = _run(project, _env("branch", "main"), repo)

        assert isinstance(result, Ok)
        assert console.has_warning()
        assert (project / "publish" / "release.md").read_text() == "# Release preview"
        assert (project / "publish" / "example-plugin-latest.zip").exists()

    def test_log_failure_writes_heading_only(self, project: Path) -> None:
        repo = FakeRepository(tag=Ok("1.0.0"), commits=Err(GitError("log", "bad revision", 128)))
        result, console = _run(project, _env("tag", "1.1.0"), repo)

        assert isinstance(result, Ok)
        assert console.has_warning()
        assert (project / "publish" / "release.md").read_text() == "# Release tag 1.1.0"

    def test_stale_notes_are_replaced(self, project: Path) -> None:
        (project / "publish" / "release.md").write_text("old notes from a previous run")
        _run(project, _env("branch", "main"))
        assert (project / "publish" / "release.md").read_text() == "# Release preview"

    def test_rename_failure(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail_rename(self: Path, target: Path) -> Path:
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "rename", fail_rename)
        result, _ = _run(project, _env("branch", "main"))

        assert isinstance(result, Err)
        assert result.error.kind == "rename_failed"
        assert "example-plugin.zip" in result.error.message
        assert (project / "publish" / "release.md").exists()

    def test_logs_context(self, project: Path) -> None:
        _, console = _run(project, _env("tag", "1.1.0"))
        assert console.find("Repository acme/example-plugin")
        assert console.find("Event type tag")
        assert console.find("Git ref refs/tags/1.1.0")
        assert console.find("Release on tag 1.1.0")


class TestJsConfig:
    @pytest.fixture
    def js_project(self, tmp_path: Path) -> Path:
        (tmp_path / "tangible.config.js").write_text(
            "module.exports = {\n"
            "  archive: { root: 'example-plugin', dest: 'publish/example-plugin.zip' },\n"
            "}\n"
        )
        (tmp_path / "publish").mkdir()
        (tmp_path / "publish" / "example-plugin.zip").write_bytes(b"PK")
        return tmp_path

    @patch("subprocess.run")
    def test_release_for_commit(self, mock_run: MagicMock, js_project: Path) -> None:
        mock_run.return_value = MagicMock(
            returncode=0,
            stdout='{"archive":{"root":"example-plugin","dest":"publish/example-plugin.zip"}}',
            stderr="",
        )

        result, _ = _run(js_project, _env("branch", "main"))

        assert isinstance(result, Ok)
        assert not result.value.skipped
        assert (js_project / "publish" / "example-plugin-latest.zip").exists()
        assert (js_project / "publish" / "release.md").read_text() == "# Release preview"
        assert mock_run.call_args[0][0][0] == "node"

    @patch("subprocess.run")
    def test_node_missing_skips(self, mock_run: MagicMock, js_project: Path) -> None:
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory: 'node'")

        result, _ = _run(js_project, _env("branch", "main"))

        assert isinstance(result, Ok)
        assert result.value.skipped_reason == "no archive config"
        assert (js_project / "publish" / "example-plugin.zip").exists()

    @pytest.mark.skipif(shutil.which("node") is None, reason="node not installed")
    def test_release_for_tag_with_real_node(self, js_project: Path) -> None:
        result, _ = _run(js_project, _env("tag", "1.0.0"))

        assert isinstance(result, Ok)
        assert (js_project / "publish" / "example-plugin-1.0.0.zip").exists()
        assert (js_project / "publish" / "release.md").read_text() == "# Release tag 1.0.0"
