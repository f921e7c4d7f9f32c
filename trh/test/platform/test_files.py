from __future__ import annotations

import os
from pathlib import Path

import pytest

from trh.platform.files import atomic_write_text, truncate_text


def test_atomic_write_text_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "deploy-meta.json"
    atomic_write_text(path, '{"type": "git"}\n')

    assert path.read_text(encoding="utf-8") == '{"type": "git"}\n'


def test_atomic_write_text_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "deploy-meta.json"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "new"
    assert [p.name for p in tmp_path.iterdir()] == ["deploy-meta.json"]


def test_atomic_write_text_keeps_old_content_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "deploy-meta.json"
    path.write_text("old", encoding="utf-8")

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "old"
    assert [p.name for p in tmp_path.iterdir()] == ["deploy-meta.json"]


def test_truncate_text_creates_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "publish" / "release.md"
    truncate_text(path)
    assert path.read_text(encoding="utf-8") == ""


def test_truncate_text_empties_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "release.md"
    path.write_text("# Old notes\n", encoding="utf-8")
    truncate_text(path)
    assert path.read_text(encoding="utf-8") == ""
