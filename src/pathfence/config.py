"""
Exclusion settings from a TOML config file.

The nearest `.pathfence.toml`, `pathfence.toml`, or `pyproject.toml` holding a
`[tool.pathfence]` table (searched from the working directory upward) may set:

    filter = ["src/**"]           # allow-list globs
    ignore = ["**/*.tmp"]         # deny globs
    respect-gitignore = true
    ignore-filename = ".gitignore"
    vcs-marker = ".git"

Keys sit at the top level of the file (or of `[tool.pathfence]`). Explicit
CLI flags take precedence over the file, which takes precedence over defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, TypeVar

from pathfence.defaults import DEFAULT_IGNORE_FILENAME, DEFAULT_VCS_MARKER
from pathfence.errors import ConfigError
from pathfence.glob_filter import Filter
from pathfence.ignore import Ignore
from pathfence.paths import PathLike, is_file, walk_up

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)

CONFIG_FILENAMES = (".pathfence.toml", "pathfence.toml", "pyproject.toml")

# TOML key -> (field name, expected type). Lists hold strings.
_KEYS: dict[str, tuple[str, type]] = {
    "filter": ("filter", list),
    "ignore": ("ignore", list),
    "respect-gitignore": ("respect_gitignore", bool),
    "ignore-filename": ("ignore_filename", str),
    "vcs-marker": ("vcs_marker", str),
}


@dataclass
class PathfenceConfig:
    """Settings read from a config file. `None` means the key was absent."""

    filter: list[str] | None = None
    ignore: list[str] | None = None
    respect_gitignore: bool | None = None
    ignore_filename: str | None = None
    vcs_marker: str | None = None

    def present(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass
class ExclusionConfig:
    """
    Effective settings for building a `Filter` and an `Ignore`, after config
    and CLI values have been merged.
    """

    filter: list[str]
    ignore: list[str]
    respect_gitignore: bool = True
    ignore_filename: str = DEFAULT_IGNORE_FILENAME
    vcs_marker: str = DEFAULT_VCS_MARKER

    def build(self, cwd: PathLike) -> tuple[Filter, Ignore]:
        """
        Compile the glob filter and load ignore rules for `cwd`. Raises
        `PatternError` or a `LoadError` subclass.
        """
        glob_filter = Filter(cwd)
        for pattern in self.filter:
            glob_filter.add_filter(pattern)
        for pattern in self.ignore:
            glob_filter.add_ignore(pattern)

        if self.respect_gitignore:
            ignore = Ignore.load(cwd, ignore_filename=self.ignore_filename, marker=self.vcs_marker)
        else:
            ignore = Ignore.disabled(cwd)
        return glob_filter, ignore


def find_config_file(start_dir: PathLike) -> Path | None:
    """
    Nearest config file at or above `start_dir`, or `None`. Within one
    directory the order of `CONFIG_FILENAMES` decides; a `pyproject.toml`
    only counts if it has a `[tool.pathfence]` table.
    """
    for directory in walk_up(start_dir):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if not is_file(candidate):
                continue
            if name != "pyproject.toml" or _has_tool_table(candidate):
                return candidate
    return None


def _has_tool_table(pyproject: Path) -> bool:
    # Another tool's broken pyproject.toml is not ours to report.
    try:
        tool = _read_toml(pyproject).get("tool")
    except ConfigError as e:
        log.debug("Skipping %s: %s", pyproject, e.reason)
        return False
    return isinstance(tool, dict) and "pathfence" in tool


def load_config(config_path: Path) -> PathfenceConfig:
    """Read and validate a config file. Raises `ConfigError`."""
    data = _read_toml(config_path)
    if config_path.name == "pyproject.toml":
        tool = data.get("tool", {})
        data = tool.get("pathfence", {}) if isinstance(tool, dict) else None
        if not isinstance(data, dict):
            raise ConfigError(config_path, "[tool.pathfence] must be a table")
    return parse_config(data, config_path)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(path, f"cannot read file ({e})") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, f"not valid TOML ({e})") from e


def parse_config(data: dict[str, Any], source: Path) -> PathfenceConfig:
    """Build a `PathfenceConfig` from a TOML table, checking every key and value type."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _KEYS:
            raise ConfigError(source, f"unknown key {key!r}")
        name, expected = _KEYS[key]
        if not isinstance(value, expected):
            raise ConfigError(source, f"{key!r} must be a {expected.__name__}")
        if expected is list and not all(isinstance(item, str) for item in value):
            raise ConfigError(source, f"{key!r} must be a list of strings")
        values[name] = value
    return PathfenceConfig(**values)


_T = TypeVar("_T")


def merge_cli_with_config(cli_opts: _T, config: PathfenceConfig | None, explicit_flags: set[str]) -> _T:
    """
    Copy of the `cli_opts` dataclass with config values filled in for every
    setting the user did not pass explicitly.
    """
    if config is None:
        return cli_opts
    updates = {k: v for k, v in config.present().items() if k not in explicit_flags}
    return replace(cli_opts, **updates)  # type: ignore[type-var]
