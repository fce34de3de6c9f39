"""Exception types raised while building or querying exclusion rules."""

from __future__ import annotations

from pathlib import Path


class PathfenceError(Exception):
    """Base class for all pathfence errors."""


class PatternError(PathfenceError, ValueError):
    """A glob pattern given to `Filter` has malformed syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")
        self.pattern: str = pattern
        self.reason: str = reason


class UnrepresentablePathError(PathfenceError, ValueError):
    """A path cannot be converted to text for matching."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Path is not representable as text: {path!r}")
        self.path: object = path


class LoadError(PathfenceError):
    """Loading ignore rules for a working directory failed."""


class IgnoreFileError(LoadError):
    """An ignore file could not be opened, read, or decoded."""

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Could not read ignore file {path}: {cause}")
        self.path: Path = path


class RuleBuildError(LoadError):
    """The rule engine rejected a rewritten ignore pattern."""

    def __init__(self, pattern: str, source: Path | None, cause: Exception) -> None:
        where = f" (from {source})" if source is not None else ""
        super().__init__(f"Invalid ignore rule {pattern!r}{where}: {cause}")
        self.pattern: str = pattern
        self.source: Path | None = source


class ConfigError(PathfenceError):
    """A config file is unreadable, is not valid TOML, or holds a bad setting."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid config file {path}: {reason}")
        self.path: Path = path
        self.reason: str = reason
