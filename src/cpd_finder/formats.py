"""Format classifier — map a file path to a tokenizer format identifier.

Identifiers are pygments lexer aliases (``javascript``, ``python``,
``typescript``...).  A ``formats_exts`` mapping such as
``{"javascript": ["es6", "jsx"]}`` takes precedence over the registry.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import PurePath
from typing import Iterable, Mapping

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

# Lexers that only highlight raw text: nothing to tokenize.
_PLAIN_TEXT_FORMATS = frozenset({"text", "output"})


def file_extension(path: str) -> str:
    """Extension of *path* without the leading dot (``"src/a.min.js" -> "js"``)."""
    return PurePath(path).suffix[1:]


def format_from_exts(ext: str, formats_exts: Mapping[str, Iterable[str]]) -> str:
    """Return the first format whose override list contains *ext*, else ``""``."""
    if not ext:
        return ""
    needle = ext.lower()
    for fmt, exts in formats_exts.items():
        if any(e.lstrip(".").lower() == needle for e in exts):
            return fmt
    return ""


@lru_cache(maxsize=1024)
def _format_from_registry(filename: str) -> str:
    try:
        lexer = get_lexer_for_filename(filename)
    except ClassNotFound:
        return ""
    fmt = lexer.aliases[0] if lexer.aliases else lexer.name.lower()
    if fmt in _PLAIN_TEXT_FORMATS:
        return ""
    return fmt


def get_format_by_file(
    path: str,
    formats_exts: Mapping[str, Iterable[str]] | None = None,
) -> str:
    """Classify *path*; returns ``""`` when the format is not recognized.

    Pure lookup on the file name, the filesystem is never touched.
    """
    if formats_exts:
        fmt = format_from_exts(file_extension(path), formats_exts)
        if fmt:
            return fmt
    return _format_from_registry(PurePath(path).name)
