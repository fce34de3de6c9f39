"""Tests for repository root discovery."""

from __future__ import annotations

from pathlib import Path

from pathfence import locate_repo


def _make_repo(root: Path) -> Path:
    (root / ".git").mkdir(parents=True)
    return root


def test_locate_at_start_dir(tmp_path: Path):
    repo = _make_repo(tmp_path / "repo")
    (repo / ".gitignore").write_text("*.log\n")

    info = locate_repo(repo)
    assert info is not None
    assert info.root == repo
    assert info.ignore_paths == (repo / ".gitignore",)


def test_locate_walks_up_and_orders_root_first(tmp_path: Path):
    repo = _make_repo(tmp_path / "repo")
    (repo / ".gitignore").write_text("build/\n")
    deep = repo / "a" / "b"
    deep.mkdir(parents=True)
    (deep / ".gitignore").write_text("x\n")

    info = locate_repo(deep)
    assert info is not None
    assert info.root == repo
    # `a` has no ignore file and is skipped.
    assert info.ignore_paths == (repo / ".gitignore", deep / ".gitignore")


def test_locate_stops_at_nearest_root(tmp_path: Path):
    outer = _make_repo(tmp_path / "outer")
    (outer / ".gitignore").write_text("*.tmp\n")
    inner = _make_repo(outer / "inner")

    info = locate_repo(inner)
    assert info is not None
    assert info.root == inner
    assert info.ignore_paths == ()


def test_locate_without_marker_returns_none(tmp_path: Path):
    work = tmp_path / "work"
    work.mkdir()
    (work / ".gitignore").write_text("*.log\n")
    assert locate_repo(work) is None


def test_marker_must_be_a_directory(tmp_path: Path):
    work = tmp_path / "work"
    work.mkdir()
    (work / ".git").write_text("gitdir: ../elsewhere\n")
    assert locate_repo(work) is None


def test_ignore_file_must_be_a_file(tmp_path: Path):
    repo = _make_repo(tmp_path / "repo")
    (repo / ".gitignore").mkdir()
    info = locate_repo(repo)
    assert info is not None
    assert info.ignore_paths == ()


def test_custom_marker_and_ignore_filename(tmp_path: Path):
    repo = tmp_path / "repo"
    (repo / ".hg").mkdir(parents=True)
    (repo / ".hgignore").write_text("*.orig\n")
    (repo / ".gitignore").write_text("*.log\n")

    info = locate_repo(repo, ignore_filename=".hgignore", marker=".hg")
    assert info is not None
    assert info.root == repo
    assert info.ignore_paths == (repo / ".hgignore",)
