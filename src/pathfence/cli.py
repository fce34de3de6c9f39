#!/usr/bin/env python3
"""
pathfence: Decide which paths a file-system walk should skip

Common usage:
  pathfence build/out.o src/main.py
  pathfence --filter 'src/**' --ignore '**/*.tmp' src/a.py src/b.tmp
  pathfence --no-respect-gitignore node_modules/pkg/index.js

Each path is printed with its verdict, `excluded` or `included`. A path is
excluded if either the glob filter or the repository's .gitignore files
exclude it.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from pathfence.config import ExclusionConfig, find_config_file, load_config, merge_cli_with_config
from pathfence.defaults import DEFAULT_IGNORE_FILENAME, DEFAULT_VCS_MARKER
from pathfence.errors import PathfenceError
from pathfence.paths import is_dir, resolve_against

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the pathfence tool."""

    paths: list[str]
    filter: list[str]
    ignore: list[str]
    respect_gitignore: bool
    ignore_filename: str
    vcs_marker: str
    cwd: str | None
    verbose: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` tracks which
    flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="pathfence",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        help="Paths to check (relative paths are resolved against --cwd)",
    )
    parser.add_argument(
        "-f",
        "--filter",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Allow-list glob. Once any is given, paths matching none are excluded. Can be repeated",
    )
    parser.add_argument(
        "-x",
        "--ignore",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Deny glob, applied before filters. Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        dest="no_respect_gitignore",
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--ignore-filename",
        type=str,
        default=None,
        metavar="NAME",
        help=f"Name of ignore files to read (default: {DEFAULT_IGNORE_FILENAME})",
    )
    parser.add_argument(
        "--vcs-marker",
        type=str,
        default=None,
        metavar="NAME",
        help=f"Directory name that marks the repository root (default: {DEFAULT_VCS_MARKER})",
    )
    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        metavar="DIR",
        help="Working directory for patterns and ignore-root discovery (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags: set[str] = set()
    if opts.filter is not None:
        explicit_flags.add("filter")
    if opts.ignore is not None:
        explicit_flags.add("ignore")
    if opts.no_respect_gitignore:
        explicit_flags.add("respect_gitignore")
    if opts.ignore_filename is not None:
        explicit_flags.add("ignore_filename")
    if opts.vcs_marker is not None:
        explicit_flags.add("vcs_marker")

    return (
        Options(
            paths=opts.paths,
            filter=opts.filter or [],
            ignore=opts.ignore or [],
            respect_gitignore=not opts.no_respect_gitignore,
            ignore_filename=opts.ignore_filename or DEFAULT_IGNORE_FILENAME,
            vcs_marker=opts.vcs_marker or DEFAULT_VCS_MARKER,
            cwd=opts.cwd,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the pathfence CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage errors, 2 for pattern or load errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if options.version:
        try:
            version = importlib.metadata.version("pathfence")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.paths:
        print(
            "Error: No paths specified. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    cwd = Path(os.path.abspath(options.cwd)) if options.cwd else Path.cwd()
    if not cwd.is_dir():
        print(f"Error: Not a directory: {cwd}", file=sys.stderr)
        return 1

    try:
        config_path = find_config_file(cwd)
        if config_path:
            log.debug("Using config file: %s", config_path)
            options = merge_cli_with_config(options, load_config(config_path), explicit_flags)

        exclusion = ExclusionConfig(
            filter=options.filter,
            ignore=options.ignore,
            respect_gitignore=options.respect_gitignore,
            ignore_filename=options.ignore_filename,
            vcs_marker=options.vcs_marker,
        )
        glob_filter, ignore = exclusion.build(cwd)
        for raw_path in options.paths:
            path = resolve_against(cwd, raw_path)
            excluded = glob_filter.is_excluded(path) or ignore.is_excluded(
                path, is_dir=is_dir(path)
            )
            print(f"{'excluded' if excluded else 'included'} {raw_path}")
    except PathfenceError as e:
        # Config, pattern, load, and unrepresentable-path errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
