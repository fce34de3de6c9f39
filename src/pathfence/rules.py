"""
Rewriting of ignore-file lines into root-relative rules.

Each ignore file only governs its own directory. A line read from
`a/b/.gitignore` is therefore rewritten to a pattern relative to the
repository root that can only match below `a/b`. Every line also yields a
second rule covering all descendants of whatever the first rule matches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pathfence.defaults import COMMENT_PREFIX, NEGATION_PREFIX
from pathfence.errors import IgnoreFileError
from pathfence.paths import path_text
from pathfence.repo import RepoInfo

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IgnoreRule:
    """One effective root-relative pattern and the ignore file it came from."""

    pattern: str
    source: Path | None = None

    @property
    def negated(self) -> bool:
        return self.pattern.startswith(NEGATION_PREFIX)


def read_rules(info: RepoInfo) -> list[IgnoreRule]:
    """
    Read and rewrite every ignore file in `info`, in root-first file order and
    line order within each file. Any unreadable file raises `IgnoreFileError`.
    """
    rules: list[IgnoreRule] = []
    for path in info.ignore_paths:
        log.debug("Found gitignore file: %s", path)
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IgnoreFileError(path, e) from e

        subdir = relative_subdir(path.parent, info.root)
        for line in contents.splitlines():
            rules.extend(rewrite_line(line, subdir, path))
    return rules


def relative_subdir(directory: Path, root: Path) -> str:
    """`directory` relative to `root` as `/`-separated text, `""` for the root itself."""
    rel = path_text(directory.relative_to(root))
    return "" if rel == "." else rel


def rewrite_line(line: str, subdir: str, source: Path | None = None) -> list[IgnoreRule]:
    """
    Rewrite one ignore-file line into zero, one, or two rules.

    Blank lines and comments give no rules. Otherwise the result is the scoped
    pattern followed by its descendant pattern, both carrying the line's
    negation marker. The descendant rule is left out when the scoped pattern
    already covers all descendants (ends with `/**`).
    """
    line = _strip_trailing_space(line)
    if not line or line.startswith(COMMENT_PREFIX):
        return []

    negated = line.startswith(NEGATION_PREFIX)
    body = line[len(NEGATION_PREFIX) :] if negated else line
    # A bare `/` names no path; git treats it as a no-op.
    if not body.strip("/"):
        return []
    prefix = NEGATION_PREFIX if negated else ""

    anchored = _anchor(body, subdir)
    scoped = anchored if subdir else body
    rules = [IgnoreRule(prefix + scoped, source)]

    base = anchored.rstrip("/")
    if base != "**" and not base.endswith("/**"):
        rules.append(IgnoreRule(f"{prefix}{base}/**", source))
    return rules


def _anchor(body: str, subdir: str) -> str:
    """
    Root-relative form of `body` as written in the ignore file of `subdir`.

    A pattern with no inner `/` matches at any depth below its own directory,
    so `**/` is inserted. A leading `/` or an inner `/` pins the pattern to
    the ignore file's directory.
    """
    is_rooted = body.startswith("/")
    trimmed = body.lstrip("/")
    name = trimmed.rstrip("/")
    if not is_rooted and "/" not in name and name != "**":
        trimmed = "**/" + trimmed
    return f"{subdir}/{trimmed}" if subdir else trimmed


def _strip_trailing_space(line: str) -> str:
    """Drop trailing whitespace unless the last space is escaped with `\\`."""
    stripped = line.rstrip(" \t")
    if stripped.endswith("\\") and len(stripped) < len(line):
        stripped += line[len(stripped)]
    return stripped
