"""
Allow/deny filtering of absolute paths with glob patterns.

Patterns are resolved against the working directory and matched segment by
segment against `/`-separated absolute path text. Each segment is an
`fnmatch` pattern, so `*` never crosses a path separator; a `**` segment
matches zero or more whole segments.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from pathfence.errors import PatternError
from pathfence.paths import PathLike, is_dir, path_text, resolve_against

log = logging.getLogger(__name__)

_SEP = "/"
_RECURSIVE = "**"


@dataclass(frozen=True)
class CompiledPattern:
    """
    A compiled glob over absolute path text. `segments` holds one compiled
    `fnmatch` regex per pattern segment, or `None` for a `**` segment.
    """

    pattern: str
    segments: tuple[re.Pattern[str] | None, ...] = field(repr=False)

    def matches(self, text: str) -> bool:
        parts = text.split(_SEP)
        failed: set[tuple[int, int]] = set()

        def rec(i: int, j: int) -> bool:
            if j == len(self.segments):
                return i == len(parts)
            if (i, j) in failed:
                return False
            seg = self.segments[j]
            if seg is None:
                ok = rec(i, j + 1) or (i < len(parts) and rec(i + 1, j))
            else:
                ok = i < len(parts) and seg.match(parts[i]) is not None and rec(i + 1, j + 1)
            if not ok:
                failed.add((i, j))
            return ok

        return rec(0, 0)


def compile_glob(pattern: str) -> CompiledPattern:
    """
    Compile a glob, raising `PatternError` on malformed syntax. Supported:
    `?`, `*` and `[abc]` / `[a-z]` / `[!abc]` within a segment, and `**` as a
    whole segment.
    """
    check_syntax(pattern)
    segments = tuple(
        None if seg == _RECURSIVE else re.compile(fnmatch.translate(seg))
        for seg in pattern.split(_SEP)
    )
    return CompiledPattern(pattern, segments)


def check_syntax(pattern: str) -> None:
    """
    Reject what `fnmatch` would quietly accept: `**` inside a segment, and
    character classes that are unterminated, empty, span a `/`, or hold a
    reversed range.
    """
    for seg in pattern.split(_SEP):
        if _RECURSIVE in seg and seg != _RECURSIVE:
            raise PatternError(pattern, "'**' must form a whole path segment")

    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        start = i + 1
        if start < n and pattern[start] == "!":
            start += 1
        j = start
        # A `]` right after the opening bracket is a literal member.
        if j < n and pattern[j] == "]":
            j += 1
        while j < n and pattern[j] not in "]/":
            j += 1
        if j < n and pattern[j] == _SEP:
            raise PatternError(pattern, "a character class cannot contain '/'")
        if j >= n:
            if start == n - 1 and pattern[start] == "]":
                raise PatternError(pattern, "empty character class")
            raise PatternError(pattern, "unterminated character class")
        body = pattern[start:j]
        for k in range(len(body) - 2):
            if body[k + 1] == "-" and body[k] > body[k + 2]:
                raise PatternError(pattern, f"reversed range {body[k]}-{body[k + 2]}")
        i = j + 1


class Filter:
    """
    User-configured allow (`filters`) and deny (`ignores`) glob patterns.

    With no filters every path not ignored is allowed. Once any filter is
    added, the filter list becomes an allow-list and unmatched paths are
    excluded. Ignores always take precedence over filters.
    """

    def __init__(self, cwd: PathLike) -> None:
        self._cwd: Path = Path(os.path.abspath(cwd))
        self._filters: list[CompiledPattern] = []
        self._ignores: list[CompiledPattern] = []

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def filters(self) -> tuple[CompiledPattern, ...]:
        return tuple(self._filters)

    @property
    def ignores(self) -> tuple[CompiledPattern, ...]:
        return tuple(self._ignores)

    def add_filter(self, pattern: str) -> CompiledPattern:
        compiled = self._pattern_for(pattern)
        self._filters.append(compiled)
        log.debug("Added filter pattern: %s", compiled.pattern)
        return compiled

    def add_ignore(self, pattern: str) -> CompiledPattern:
        compiled = self._pattern_for(pattern)
        self._ignores.append(compiled)
        log.debug("Added ignore pattern: %s", compiled.pattern)
        return compiled

    def _pattern_for(self, pattern: str) -> CompiledPattern:
        """
        Resolve `pattern` against the working directory. An existing directory
        is widened to its direct entries (one level, not recursive).
        """
        path = resolve_against(self._cwd, pattern)
        if is_dir(path):
            path = path / "*"
        return compile_glob(path_text(path))

    def is_excluded(self, path: PathLike) -> bool:
        text = path_text(resolve_against(self._cwd, path))

        if any(p.matches(text) for p in self._ignores):
            return True
        if any(p.matches(text) for p in self._filters):
            return False
        return len(self._filters) > 0
