"""Path normalization shared by the glob filter and the ignore matcher."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Union

from pathfence.errors import UnrepresentablePathError

PathLike = Union[str, "os.PathLike[str]"]


def resolve_against(cwd: Path, path: PathLike) -> Path:
    """
    Join `path` onto `cwd` if it is relative, then collapse `.` and `..`
    segments. This is purely lexical: symlinks are not followed and the path
    does not need to exist.
    """
    p = Path(path)
    if not p.is_absolute():
        p = cwd / p
    return Path(os.path.normpath(p))


def path_text(path: PathLike) -> str:
    """
    Text form of `path` with `/` separators, as used for pattern matching.

    Raises `UnrepresentablePathError` if the path holds bytes that do not
    decode as text (surrogate escapes from `os.fsdecode`).
    """
    text = Path(path).as_posix()
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise UnrepresentablePathError(path) from e
    return text


def walk_up(start_dir: PathLike) -> Iterator[Path]:
    """Yield `start_dir` (made absolute) and then each of its ancestors up to `/`."""
    current = Path(os.path.abspath(start_dir))
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def is_dir(path: Path) -> bool:
    """`Path.is_dir()`, with any `OSError` (e.g. a name too long) read as "no"."""
    try:
        return path.is_dir()
    except OSError:
        return False


def is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
