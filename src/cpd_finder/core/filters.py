"""Filter chain — format, size, content load, line count.

Every filter is built once per run from a ``FinderOptions`` snapshot and
then applied per entry.  Cheap metadata checks run before any file is
read; the line-count check needs content and runs last.  Rejections are
not errors: they are reported to the diagnostic sink when the relevant
flag is set and the entry is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

from cpd_finder.core.config import FinderOptions, get_option
from cpd_finder.core.loader import load_content
from cpd_finder.diagnostics import DiagnosticSink, NullSink
from cpd_finder.formats import get_format_by_file
from cpd_finder.model import Entry, EntryWithContent
from cpd_finder.utils.byte_size import format_bytes, parse_bytes

EntryFilter = Callable[[Entry], bool]
ContentFilter = Callable[[EntryWithContent], bool]
ContentLoader = Callable[[Entry], EntryWithContent]

_logger = logging.getLogger(__name__)


def skip_not_supported_formats(options: FinderOptions, sink: DiagnosticSink) -> EntryFilter:
    """Keep entries whose format is recognized and, if restricted, accepted."""
    formats_exts = get_option("formats_exts", options)
    accepted = frozenset(get_option("format", options))
    report = get_option("debug", options) or get_option("verbose", options)

    def _filter(entry: Entry) -> bool:
        fmt = get_format_by_file(entry.path, formats_exts)
        keep = bool(fmt) and (not accepted or fmt in accepted)
        if report and not keep:
            sink.emit(
                f'File {entry.path} skipped! Format "{fmt}" is not included in supported formats.'
            )
        return keep

    return _filter


def skip_big_files(options: FinderOptions, sink: DiagnosticSink) -> EntryFilter:
    """Drop entries strictly larger than ``max_size``."""
    max_size = get_option("max_size", options)
    limit = parse_bytes(max_size)
    report = get_option("debug", options)

    def _filter(entry: Entry) -> bool:
        size = parse_bytes(entry.stats.size)
        too_big = size is not None and limit is not None and size > limit
        if report and too_big:
            sink.emit(
                f"File {entry.path} skipped! Size more than limit "
                f"({format_bytes(entry.stats.size)} > {max_size})"
            )
        return not too_big

    return _filter


def skip_files_if_lines_not_in_limits(
    options: FinderOptions, sink: DiagnosticSink
) -> ContentFilter:
    """Keep entries with ``min_lines <= lines <= max_lines``."""
    min_lines = get_option("min_lines", options)
    max_lines = get_option("max_lines", options)
    report = get_option("debug", options) or get_option("verbose", options)

    def _filter(entry: EntryWithContent) -> bool:
        lines = entry.line_count
        if lines < min_lines or lines > max_lines:
            if report:
                sink.emit(
                    f"File {entry.path} skipped! Code lines={lines} not in limits "
                    f"({min_lines}:{max_lines})",
                    style="grey50",
                )
            return False
        return True

    return _filter


@dataclass(frozen=True)
class FilterChain:
    """Fixed-order pipeline: ``before_load`` filters, load, ``after_load`` filters."""

    before_load: tuple[EntryFilter, ...]
    loader: ContentLoader
    after_load: tuple[ContentFilter, ...]

    @classmethod
    def from_options(
        cls, options: FinderOptions, sink: DiagnosticSink | None = None
    ) -> FilterChain:
        sink = sink if sink is not None else NullSink()
        return cls(
            before_load=(
                skip_not_supported_formats(options, sink),
                skip_big_files(options, sink),
            ),
            loader=partial(load_content, encoding=get_option("encoding", options)),
            after_load=(skip_files_if_lines_not_in_limits(options, sink),),
        )

    def apply(self, entries: Iterable[Entry]) -> list[EntryWithContent]:
        """Run the stages one after another; entry order is preserved."""
        candidates: list[Entry] = list(entries)
        for keep in self.before_load:
            candidates = [e for e in candidates if keep(e)]
            _logger.debug("%s kept %d entries", _stage_name(keep), len(candidates))

        loaded = [self.loader(e) for e in candidates]
        for keep_loaded in self.after_load:
            loaded = [e for e in loaded if keep_loaded(e)]
            _logger.debug("%s kept %d entries", _stage_name(keep_loaded), len(loaded))
        return loaded


def _stage_name(fn: Callable[..., bool]) -> str:
    return getattr(fn, "__qualname__", repr(fn)).split(".<locals>")[0]
