"""Ignore rules — user ignore globs plus optional ``.gitignore`` files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

import pathspec

_logger = logging.getLogger(__name__)

GITIGNORE_FILE = ".gitignore"


def _normalize(path: str) -> str:
    path = path.replace(os.sep, "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def load_gitignore(root: Path) -> pathspec.PathSpec | None:
    """Read ``root/.gitignore`` into a matcher, or ``None`` if there is none."""
    gitignore_path = root / GITIGNORE_FILE
    if not gitignore_path.is_file():
        return None
    lines = gitignore_path.read_text(encoding="utf-8", errors="replace").splitlines()
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


class IgnoreRules:
    """Decides whether an enumerated path is excluded.

    User patterns are tried against the path as reported and against its
    path relative to the walked base.  Each ``.gitignore`` only applies to
    paths below the directory that holds it.
    """

    def __init__(
        self,
        patterns: Iterable[str] = (),
        gitignores: Sequence[tuple[Path, pathspec.PathSpec]] = (),
    ) -> None:
        self.patterns = tuple(patterns)
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)
        self._gitignores = tuple(gitignores)

    @classmethod
    def from_options(
        cls,
        patterns: Iterable[str],
        roots: Iterable[str],
        *,
        gitignore: bool = False,
    ) -> IgnoreRules:
        gitignores: list[tuple[Path, pathspec.PathSpec]] = []
        if gitignore:
            for root in roots:
                root_path = Path(os.path.abspath(root))
                if not root_path.is_dir():
                    continue
                spec = load_gitignore(root_path)
                if spec is not None:
                    _logger.debug("Loaded %s from %s", GITIGNORE_FILE, root_path)
                    gitignores.append((root_path, spec))
        return cls(patterns, gitignores)

    def __bool__(self) -> bool:
        return bool(self.patterns) or bool(self._gitignores)

    def matches(self, path: str, *, relative: str | None = None) -> bool:
        if self.patterns:
            if self._spec.match_file(_normalize(path)):
                return True
            if relative is not None and self._spec.match_file(_normalize(relative)):
                return True

        if self._gitignores:
            absolute = Path(os.path.abspath(path))
            for root, spec in self._gitignores:
                try:
                    rel = absolute.relative_to(root)
                except ValueError:
                    continue
                if spec.match_file(rel.as_posix()):
                    return True
        return False
