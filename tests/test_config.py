"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from pathfence import ConfigError, PatternError
from pathfence.cli import Options
from pathfence.config import (
    ExclusionConfig,
    PathfenceConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)


def test_find_config_pathfence_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text('filter = ["*.py"]\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_pathfence_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "pathfence.toml").write_text('filter = ["*.py"]\n')
    dot_config = tmp_path / ".pathfence.toml"
    dot_config.write_text('filter = ["*.md"]\n')
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.pathfence]\nignore = ["*.tmp"]\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text('filter = ["*.py"]\n')
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_load_config_unset_fields_are_none(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text('ignore = ["*.tmp", "*.bak"]\n')
    config = load_config(config_file)
    assert config.ignore == ["*.tmp", "*.bak"]
    assert config.filter is None
    assert config.respect_gitignore is None


def test_load_config_kebab_case_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text(
        'filter = ["src/**"]\n'
        "respect-gitignore = false\n"
        'ignore-filename = ".hgignore"\n'
        'vcs-marker = ".hg"\n'
    )
    config = load_config(config_file)
    assert config.filter == ["src/**"]
    assert config.respect_gitignore is False
    assert config.ignore_filename == ".hgignore"
    assert config.vcs_marker == ".hg"


@pytest.mark.parametrize(
    "content, reason",
    [
        ("unknown-key = 1\n", "unknown key 'unknown-key'"),
        ('[patterns]\nfilter = ["src/**"]\n', "unknown key 'patterns'"),
        ('filter = "src"\n', "'filter' must be a list"),
        ("ignore = [1, 2]\n", "'ignore' must be a list of strings"),
        ('respect-gitignore = "no"\n', "'respect-gitignore' must be a bool"),
        ("vcs-marker = 3\n", "'vcs-marker' must be a str"),
        ("ignore = [\n", "not valid TOML"),
    ],
)
def test_load_config_rejects_bad_content(tmp_path: Path, content: str, reason: str) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text(content)
    with pytest.raises(ConfigError) as exc:
        load_config(config_file)
    assert reason in exc.value.reason
    assert exc.value.path == config_file


def test_load_config_rejects_undecodable_file(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_bytes(b"filter = ['\xff']\n")
    with pytest.raises(ConfigError, match="cannot read file"):
        load_config(config_file)


def test_load_config_pyproject_tool_entry_must_be_table(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool]\npathfence = "yes"\n')
    assert find_config_file(tmp_path) == config_file
    with pytest.raises(ConfigError, match=r"\[tool.pathfence\] must be a table"):
        load_config(config_file)


def test_find_config_skips_broken_pyproject(tmp_path: Path) -> None:
    config_file = tmp_path / "pathfence.toml"
    config_file.write_text('filter = ["*.py"]\n')
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "pyproject.toml").write_text("[tool.pathfence\n")
    assert find_config_file(sub) == config_file


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[project]\nname = "x"\n\n[tool.pathfence]\nfilter = ["*.md"]\n')
    assert load_config(config_file).filter == ["*.md"]


def _options(**overrides: object) -> Options:
    values: dict[str, object] = dict(
        paths=["."],
        filter=[],
        ignore=[],
        respect_gitignore=True,
        ignore_filename=".gitignore",
        vcs_marker=".git",
        cwd=None,
        verbose=False,
        version=False,
    )
    values.update(overrides)
    return Options(**values)  # pyright: ignore[reportArgumentType]


def test_merge_config_fills_unset_options() -> None:
    config = PathfenceConfig(ignore=["*.tmp"], respect_gitignore=False)
    merged = merge_cli_with_config(_options(), config, explicit_flags=set())
    assert merged.ignore == ["*.tmp"]
    assert merged.respect_gitignore is False
    assert merged.filter == []


def test_merge_explicit_cli_flags_win() -> None:
    config = PathfenceConfig(ignore=["*.tmp"], filter=["*.py"])
    merged = merge_cli_with_config(
        _options(ignore=["*.bak"]), config, explicit_flags={"ignore"}
    )
    assert merged.ignore == ["*.bak"]
    assert merged.filter == ["*.py"]


def test_merge_without_config_is_noop() -> None:
    opts = _options(filter=["*.md"])
    assert merge_cli_with_config(opts, None, explicit_flags=set()) is opts


def test_exclusion_config_build(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".gitignore").write_text("*.log\n")

    glob_filter, ignore = ExclusionConfig(filter=["*.py", "*.log"], ignore=["test_*"]).build(repo)
    assert len(glob_filter.filters) == 2
    assert len(glob_filter.ignores) == 1
    assert glob_filter.is_excluded(repo / "test_main.py")
    assert not glob_filter.is_excluded(repo / "main.py")
    assert ignore.is_excluded(repo / "app.log")


def test_exclusion_config_without_gitignore(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".gitignore").write_text("*.log\n")

    _, ignore = ExclusionConfig(filter=[], ignore=[], respect_gitignore=False).build(repo)
    assert ignore.root is None
    assert not ignore.is_excluded(repo / "app.log")


def test_exclusion_config_bad_pattern(tmp_path: Path) -> None:
    with pytest.raises(PatternError):
        ExclusionConfig(filter=["[oops"], ignore=[]).build(tmp_path)
