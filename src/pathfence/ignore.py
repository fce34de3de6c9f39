"""
Gitignore-style exclusion rooted at the nearest repository.

`Ignore.load()` finds the repository root above the working directory, reads
every ignore file between the two, rewrites their lines into root-relative
rules, and compiles the rules into a read-only `IgnoreMatcher`. Rules are
evaluated in order and the last matching rule decides, so a later `!` rule
re-includes a path an earlier rule ignored.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

import pathspec
from pathspec.util import lookup_pattern

from pathfence.defaults import DEFAULT_IGNORE_FILENAME, DEFAULT_VCS_MARKER
from pathfence.errors import RuleBuildError
from pathfence.paths import PathLike, path_text, resolve_against
from pathfence.repo import locate_repo
from pathfence.rules import IgnoreRule, read_rules, rewrite_line

log = logging.getLogger(__name__)

_gitignore_pattern = lookup_pattern("gitignore")


class MatchVerdict(Enum):
    NO_MATCH = "no_match"
    WHITELISTED = "whitelisted"
    IGNORED = "ignored"


class IgnoreMatcher:
    """
    Ordered, compiled ignore rules for one repository root. Built by
    `IgnoreMatcherBuilder` and never modified afterwards.
    """

    def __init__(self, root: Path, rules: Iterable[IgnoreRule], spec: pathspec.PathSpec) -> None:
        self._root: Path = root
        self._rules: tuple[IgnoreRule, ...] = tuple(rules)
        self._spec: pathspec.PathSpec = spec

    @property
    def root(self) -> Path:
        return self._root

    @property
    def rules(self) -> tuple[IgnoreRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def matched(self, path: PathLike, *, is_dir: bool = False) -> MatchVerdict:
        """
        Verdict for `path`, which is resolved against the root if relative.
        Paths outside the root (and the root itself) never match.
        """
        resolved = resolve_against(self._root, path)
        try:
            rel_path = resolved.relative_to(self._root)
        except ValueError:
            return MatchVerdict.NO_MATCH
        rel = path_text(rel_path)
        if rel == ".":
            return MatchVerdict.NO_MATCH
        if is_dir:
            rel += "/"

        include = self._spec.check_file(rel).include
        if include is None:
            return MatchVerdict.NO_MATCH
        return MatchVerdict.IGNORED if include else MatchVerdict.WHITELISTED


class IgnoreMatcherBuilder:
    """
    Accumulates rules for a root, compiling each as it is added so a bad
    pattern fails at once with `RuleBuildError`.
    """

    def __init__(self, root: PathLike) -> None:
        self._root: Path = Path(os.path.abspath(root))
        self._rules: list[IgnoreRule] = []
        self._patterns: list[pathspec.Pattern] = []

    def add(self, rule: IgnoreRule) -> IgnoreMatcherBuilder:
        try:
            compiled = _gitignore_pattern(rule.pattern)
        except (ValueError, re.error) as e:
            raise RuleBuildError(rule.pattern, rule.source, e) from e
        self._rules.append(rule)
        self._patterns.append(compiled)
        return self

    def add_line(self, line: str, source: Path | None = None, subdir: str = "") -> IgnoreMatcherBuilder:
        """Rewrite a raw ignore-file line for `subdir` and add the resulting rules."""
        for rule in rewrite_line(line, subdir, source):
            self.add(rule)
        return self

    def build(self) -> IgnoreMatcher:
        return IgnoreMatcher(self._root, self._rules, pathspec.PathSpec(self._patterns))


class Ignore:
    """
    Exclusion decisions from the ignore files of the enclosing repository.
    Without a repository (or with ignore files disabled) nothing is excluded.
    """

    def __init__(self, matcher: IgnoreMatcher | None, cwd: PathLike) -> None:
        self._matcher: IgnoreMatcher | None = matcher
        self._cwd: Path = Path(os.path.abspath(cwd))

    @classmethod
    def load(
        cls,
        cwd: PathLike,
        *,
        ignore_filename: str = DEFAULT_IGNORE_FILENAME,
        marker: str = DEFAULT_VCS_MARKER,
    ) -> Ignore:
        """
        Locate the repository above `cwd` and compile its ignore rules. Raises
        `IgnoreFileError` or `RuleBuildError`; there is no partial load.
        """
        info = locate_repo(cwd, ignore_filename=ignore_filename, marker=marker)
        if info is None:
            return cls(None, cwd)

        builder = IgnoreMatcherBuilder(info.root)
        for rule in read_rules(info):
            builder.add(rule)
        matcher = builder.build()
        log.debug("Loaded %d ignore rule(s) rooted at %s", len(matcher), info.root)
        return cls(matcher, cwd)

    @classmethod
    def disabled(cls, cwd: PathLike) -> Ignore:
        return cls(None, cwd)

    @property
    def root(self) -> Path | None:
        return self._matcher.root if self._matcher is not None else None

    @property
    def rules(self) -> tuple[IgnoreRule, ...]:
        return self._matcher.rules if self._matcher is not None else ()

    def matched(self, path: PathLike, *, is_dir: bool = False) -> MatchVerdict:
        if self._matcher is None:
            return MatchVerdict.NO_MATCH
        return self._matcher.matched(resolve_against(self._cwd, path), is_dir=is_dir)

    def is_excluded(self, path: PathLike, *, is_dir: bool = False) -> bool:
        if self._matcher is None:
            return False
        return self.matched(path, is_dir=is_dir) is MatchVerdict.IGNORED


def load(
    cwd: PathLike,
    *,
    ignore_filename: str = DEFAULT_IGNORE_FILENAME,
    marker: str = DEFAULT_VCS_MARKER,
) -> Ignore:
    """Shorthand for `Ignore.load()`."""
    return Ignore.load(cwd, ignore_filename=ignore_filename, marker=marker)
