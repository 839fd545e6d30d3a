"""Finder — turn options into the content-loaded list of files to detect.

    options -> root paths -> glob expressions -> walker entries
            -> format filter -> size filter -> load -> line filter

The run is all-or-nothing: an unresolvable root path or an unreadable
file raises and no list is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from cpd_finder.core.config import FinderOptions, get_option
from cpd_finder.core.filters import FilterChain
from cpd_finder.core.ignore import IgnoreRules
from cpd_finder.core.paths import drop_symlinks, expand_patterns
from cpd_finder.core.walker import Walker, glob_entries
from cpd_finder.diagnostics import DiagnosticSink, default_sink
from cpd_finder.model import EntryWithContent

_logger = logging.getLogger(__name__)


def get_files_to_detect(
    options: FinderOptions | Mapping[str, Any] | None = None,
    *,
    sink: DiagnosticSink | None = None,
    walker: Walker = glob_entries,
) -> list[EntryWithContent]:
    """Select, load and filter the files a detector run should inspect.

    Parameters
    ----------
    options:
        A ``FinderOptions`` or a plain mapping of option values.
    sink:
        Where skipped-file diagnostics go.  Defaults to the console when
        ``debug`` or ``verbose`` is set, otherwise nowhere.
    walker:
        Glob engine; ``glob_entries`` unless a test substitutes one.

    Returns
    -------
    Entries in walker order, each with its decoded ``content``.

    Raises
    ------
    FileNotFoundError
        If a root path does not exist.
    OSError
        If a selected file cannot be read.
    """
    opts = options if isinstance(options, FinderOptions) else FinderOptions.from_mapping(
        options or {}
    )
    if sink is None:
        sink = default_sink(debug=opts.debug, verbose=opts.verbose)

    pattern = get_option("pattern", opts)
    no_symlinks = get_option("no_symlinks", opts)
    roots = list(get_option("path", opts))
    if no_symlinks:
        roots = drop_symlinks(roots)

    expressions = expand_patterns(roots, pattern)
    _logger.debug("Glob expressions: %s", expressions)

    ignore = IgnoreRules.from_options(
        get_option("ignore", opts),
        roots,
        gitignore=get_option("gitignore", opts),
    )
    entries = walker(
        expressions,
        ignore=ignore,
        only_files=True,
        dot=True,
        absolute=get_option("absolute", opts),
        follow_symlinks=not no_symlinks,
    )
    _logger.debug("Walker returned %d entries", len(entries))

    files = FilterChain.from_options(opts, sink).apply(entries)
    _logger.debug("Selected %d files to detect", len(files))
    return files
