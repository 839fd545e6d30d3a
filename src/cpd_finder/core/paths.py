"""Root-path classification and glob-expression expansion."""

from __future__ import annotations

import os
import stat
from typing import Iterable, Sequence


def _lstat_mode(path: str) -> int | None:
    try:
        return os.lstat(path).st_mode
    except OSError:
        # Missing or unreadable path: neither a file nor a symlink.
        return None


def is_file(path: str) -> bool:
    """True when *path* itself is a regular file (symlinks are not followed)."""
    mode = _lstat_mode(path)
    return mode is not None and stat.S_ISREG(mode)


def is_symlink(path: str) -> bool:
    """True when *path* is a symbolic link."""
    mode = _lstat_mode(path)
    return mode is not None and stat.S_ISLNK(mode)


def split_pattern(pattern: str) -> list[str]:
    """``"**/*.js,**/*.ts"`` -> ``["**/*.js", "**/*.ts"]``, order preserved."""
    return [p.strip() for p in pattern.split(",") if p.strip()]


def drop_symlinks(paths: Iterable[str]) -> list[str]:
    return [p for p in paths if not is_symlink(p)]


def join_pattern(root: str, pattern: str) -> str:
    """Join *root* and *pattern* with exactly one ``/`` between them."""
    return f"{root}{pattern}" if root.endswith("/") else f"{root}/{pattern}"


def expand_patterns(
    paths: Sequence[str],
    pattern: str,
    *,
    no_symlinks: bool = False,
) -> list[str]:
    """Build the glob expressions handed to the walker.

    For every root: its resolved path first when it is a regular file, then
    one ``root/sub-pattern`` expression per comma-separated sub-pattern.

    Raises ``FileNotFoundError`` (or another ``OSError``) when a root path
    cannot be resolved.
    """
    sub_patterns = split_pattern(pattern)
    roots = drop_symlinks(paths) if no_symlinks else list(paths)

    expressions: list[str] = []
    for root in roots:
        real = os.path.realpath(root, strict=True)
        if is_file(real):
            expressions.append(real)
        for sub in sub_patterns:
            expressions.append(join_pattern(root, sub))
    return expressions
