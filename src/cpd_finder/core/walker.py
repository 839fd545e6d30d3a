"""Walker — evaluate glob expressions against the filesystem.

Each expression is split into a literal base directory and a wildcard
remainder (``src/app/**/*.js`` -> ``src/app`` + ``**/*.js``).  The base is
walked top-down in sorted order and every path below it is matched
against the remainder, one path segment per pattern segment:

  - ``*``, ``?`` and ``[...]`` never cross a ``/``
  - a ``**`` segment spans zero or more directories
  - names starting with ``.`` match only when ``dot`` is set

Results keep expression order; a path reached by several expressions is
reported once, at its first occurrence.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from typing import Iterable, Iterator, Protocol, Sequence

from cpd_finder.core.ignore import IgnoreRules
from cpd_finder.model import Entry, EntryStats

_logger = logging.getLogger(__name__)

_MAGIC_CHARS = frozenset("*?[")


class Walker(Protocol):
    """Signature shared by ``glob_entries`` and test doubles."""

    def __call__(
        self,
        expressions: Sequence[str],
        *,
        ignore: IgnoreRules | Iterable[str] = (),
        only_files: bool = True,
        dot: bool = True,
        absolute: bool = False,
        follow_symlinks: bool = True,
    ) -> list[Entry]:
        ...


def has_magic(segment: str) -> bool:
    return any(ch in _MAGIC_CHARS for ch in segment)


def split_expression(expression: str) -> tuple[str, list[str]]:
    """Split *expression* into its literal base and wildcard segments.

    An expression without wildcards comes back with no segments.
    """
    parts = expression.split("/")
    for i, part in enumerate(parts):
        if has_magic(part):
            base = "/".join(parts[:i])
            if not base and expression.startswith("/"):
                base = "/"
            return base or ".", [p for p in parts[i:] if p]
    return expression, []


def match_segments(pattern: Sequence[str], parts: Sequence[str], *, dot: bool = True) -> bool:
    """Glob-match path *parts* against *pattern* segments."""
    if not pattern:
        return not parts
    head = pattern[0]
    if head == "**":
        if match_segments(pattern[1:], parts, dot=dot):
            return True
        if not parts or (not dot and parts[0].startswith(".")):
            return False
        return match_segments(pattern, parts[1:], dot=dot)
    if not parts:
        return False
    if not dot and parts[0].startswith(".") and not head.startswith("."):
        return False
    return fnmatch.fnmatchcase(parts[0], head) and match_segments(pattern[1:], parts[1:], dot=dot)


def _join(base: str, rel: str) -> str:
    if base in ("", "."):
        return rel
    return f"{base.rstrip('/')}/{rel}" if base != "/" else f"/{rel}"


def _log_walk_error(exc: OSError) -> None:
    _logger.debug("Cannot list %s: %s", exc.filename, exc)


def _walk(base: str, *, follow_symlinks: bool) -> Iterator[tuple[str, bool]]:
    """Yield ``(relative_path, is_dir)`` below *base*, sorted per directory."""
    # Real paths of each pending directory's ancestors; a repeat is a cycle.
    ancestors: dict[str, frozenset[str]] = {}
    for dirpath, dirnames, filenames in os.walk(
        base, onerror=_log_walk_error, followlinks=follow_symlinks
    ):
        dirnames.sort()
        if follow_symlinks:
            chain = ancestors.pop(dirpath, frozenset())
            real = os.path.realpath(dirpath)
            if real in chain:
                dirnames[:] = []
                continue
            chain = chain | {real}
            for name in dirnames:
                ancestors[os.path.join(dirpath, name)] = chain
        rel_dir = os.path.relpath(dirpath, base)
        prefix = "" if rel_dir == "." else rel_dir.replace(os.sep, "/") + "/"
        for name in dirnames:
            yield prefix + name, True
        for name in sorted(filenames):
            yield prefix + name, False


def _iter_candidates(
    expression: str,
    *,
    only_files: bool,
    dot: bool,
    follow_symlinks: bool,
) -> Iterator[tuple[str, str]]:
    """Yield ``(path, relative_to_base)`` for every match of *expression*."""
    base, pattern = split_expression(expression)
    if not pattern:
        if os.path.lexists(base):
            yield base, os.path.basename(base)
        return
    if not os.path.isdir(base):
        return
    for rel, is_dir in _walk(base, follow_symlinks=follow_symlinks):
        if is_dir and only_files:
            continue
        if match_segments(pattern, rel.split("/"), dot=dot):
            yield _join(base, rel), rel


def _stat(path: str, *, follow_symlinks: bool) -> os.stat_result | None:
    try:
        return os.stat(path, follow_symlinks=follow_symlinks)
    except OSError as exc:
        # Broken symlink or entry removed mid-walk: nothing to report.
        _logger.debug("Cannot stat %s: %s", path, exc)
        return None


def glob_entries(
    expressions: Sequence[str],
    *,
    ignore: IgnoreRules | Iterable[str] = (),
    only_files: bool = True,
    dot: bool = True,
    absolute: bool = False,
    follow_symlinks: bool = True,
) -> list[Entry]:
    """Evaluate *expressions* in order and return the matching entries.

    With ``follow_symlinks`` off, symlinked directories are not descended
    into and symlinked files are not reported as regular files.
    """
    rules = ignore if isinstance(ignore, IgnoreRules) else IgnoreRules(ignore)
    seen: set[str] = set()
    entries: list[Entry] = []

    for expression in expressions:
        for path, rel in _iter_candidates(
            expression,
            only_files=only_files,
            dot=dot,
            follow_symlinks=follow_symlinks,
        ):
            key = os.path.abspath(path)
            if key in seen:
                continue
            if rules and rules.matches(path, relative=rel):
                continue
            st = _stat(path, follow_symlinks=follow_symlinks)
            if st is None:
                continue
            stats = EntryStats.from_stat_result(st)
            if only_files and not stats.is_file:
                continue
            seen.add(key)
            entries.append(
                Entry(
                    path=key if absolute else path,
                    name=os.path.basename(path),
                    stats=stats,
                )
            )
    return entries
