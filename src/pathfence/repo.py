"""Discovery of the repository root and the ignore files beneath it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pathfence.defaults import DEFAULT_IGNORE_FILENAME, DEFAULT_VCS_MARKER
from pathfence.paths import PathLike, is_dir, is_file, walk_up

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoInfo:
    """
    A repository root plus every ignore file found between the start
    directory and the root. `ignore_paths` is ordered from the root downward.
    """

    root: Path
    ignore_paths: tuple[Path, ...]


def locate_repo(
    start_dir: PathLike,
    *,
    ignore_filename: str = DEFAULT_IGNORE_FILENAME,
    marker: str = DEFAULT_VCS_MARKER,
) -> RepoInfo | None:
    """
    Walk up from `start_dir` to the nearest directory containing a `marker`
    directory, collecting `ignore_filename` files on the way (including the
    root's own). Returns `None` if the filesystem root is reached first.
    Existence checks that fail with `OSError` count as "absent".
    """
    found: list[Path] = []
    for current in walk_up(start_dir):
        candidate = current / ignore_filename
        if is_file(candidate):
            found.append(candidate)

        if is_dir(current / marker):
            found.reverse()
            log.debug("Found repository root %s with %d ignore file(s)", current, len(found))
            return RepoInfo(root=current, ignore_paths=tuple(found))

    log.debug("No %s directory above %s", marker, start_dir)
    return None
