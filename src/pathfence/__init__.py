"""
Path-exclusion decisions for file-system traversal tools.

Two independent checks, meant to be combined by the caller with a logical OR:
a glob allow/deny `Filter`, and an `Ignore` that applies the `.gitignore`
files of the enclosing repository.

Usage::

    from pathfence import Filter, Ignore

    glob_filter = Filter(cwd)
    glob_filter.add_ignore("**/*.tmp")
    ignore = Ignore.load(cwd)

    skip = glob_filter.is_excluded(path) or ignore.is_excluded(path)
"""

from pathfence.config import ExclusionConfig
from pathfence.errors import (
    ConfigError,
    IgnoreFileError,
    LoadError,
    PathfenceError,
    PatternError,
    RuleBuildError,
    UnrepresentablePathError,
)
from pathfence.glob_filter import CompiledPattern, Filter, compile_glob
from pathfence.ignore import Ignore, IgnoreMatcher, IgnoreMatcherBuilder, MatchVerdict, load
from pathfence.repo import RepoInfo, locate_repo
from pathfence.rules import IgnoreRule, rewrite_line

__all__ = [
    "CompiledPattern",
    "ConfigError",
    "ExclusionConfig",
    "Filter",
    "Ignore",
    "IgnoreFileError",
    "IgnoreMatcher",
    "IgnoreMatcherBuilder",
    "IgnoreRule",
    "LoadError",
    "MatchVerdict",
    "PathfenceError",
    "PatternError",
    "RepoInfo",
    "RuleBuildError",
    "UnrepresentablePathError",
    "compile_glob",
    "load",
    "locate_repo",
    "rewrite_line",
]
