"""
cpd_finder.api
==============

Programmatic entrypoints for feeding a duplicate-code detector.

Usage::

    from cpd_finder.api import find_files, summarize

    files = find_files(["src"], pattern="**/*.py", min_lines=3)
    print(summarize(files)["count"])
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Sequence

from cpd_finder.config_file import resolve_options
from cpd_finder.core.finder import get_files_to_detect
from cpd_finder.diagnostics import DiagnosticSink
from cpd_finder.formats import get_format_by_file
from cpd_finder.model import EntryWithContent
from cpd_finder.utils.json_norm import stable_json_dumps


def find_files(
    path: str | Path | Sequence[str | Path] | None = None,
    *,
    config_path: str | Path | None = None,
    search_dir: str | Path | None = None,
    sink: DiagnosticSink | None = None,
    **overrides: Any,
) -> list[EntryWithContent]:
    """Resolve options from keyword arguments (and an option file) and run.

    Parameters
    ----------
    path:
        One root path or a sequence of them.  ``None`` keeps the option
        file's (or the default) value.
    config_path:
        Explicit option file.
    search_dir:
        Directory searched for an option file when *config_path* is unset.
    sink:
        Diagnostic sink passed through to ``get_files_to_detect``.
    **overrides:
        Any finder option, e.g. ``pattern="**/*.js"``, ``min_lines=3``.
    """
    if path is not None:
        roots = [path] if isinstance(path, (str, Path)) else list(path)
        overrides["path"] = [str(p) for p in roots]
    options = resolve_options(overrides, config_path=config_path, search_dir=search_dir)
    return get_files_to_detect(options, sink=sink)


def summarize(
    entries: Iterable[EntryWithContent],
    formats_exts: dict[str, list[str]] | None = None,
) -> dict[str, Any]:
    """JSON-friendly totals for a finder result: count, bytes, lines, formats."""
    items = list(entries)
    formats = Counter(get_format_by_file(e.path, formats_exts) for e in items)
    return {
        "count": len(items),
        "total_bytes": sum(e.stats.size for e in items),
        "total_lines": sum(e.line_count for e in items),
        "formats": dict(sorted(formats.items())),
        "files": [e.to_dict() for e in items],
    }


def summary_json(entries: Iterable[EntryWithContent], **kwargs: Any) -> str:
    """``summarize`` rendered through the canonical JSON dumper."""
    return stable_json_dumps(summarize(entries, **kwargs))
