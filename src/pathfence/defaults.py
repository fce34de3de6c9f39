"""
Default names used for ignore-root discovery.

The marker is a directory whose presence marks a repository root. Its
contents are never read.
"""

from __future__ import annotations

DEFAULT_IGNORE_FILENAME: str = ".gitignore"

DEFAULT_VCS_MARKER: str = ".git"

# Leading characters with special meaning in an ignore file line.
COMMENT_PREFIX: str = "#"
NEGATION_PREFIX: str = "!"
