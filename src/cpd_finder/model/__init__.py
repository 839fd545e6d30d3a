"""Entry records shared by the walker, the filter chain and the loader."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class EntryStats:
    """Filesystem metadata captured when an entry is enumerated."""

    size: int
    mode: int = 0

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> EntryStats:
        return cls(size=st.st_size, mode=st.st_mode)


@dataclass(frozen=True, slots=True)
class Entry:
    """A filesystem match produced by enumeration, before content is loaded."""

    path: str
    name: str
    stats: EntryStats

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "size": self.stats.size,
        }


@dataclass(frozen=True, slots=True)
class EntryWithContent(Entry):
    """An ``Entry`` plus the full decoded text of the file.

    Built once by the content loader and never mutated afterwards.
    """

    content: str = field(default="", repr=False)

    @property
    def line_count(self) -> int:
        # Same count as splitting on "\n": a trailing newline adds an empty segment.
        return self.content.count("\n") + 1

    @classmethod
    def from_entry(cls, entry: Entry, content: str) -> EntryWithContent:
        return cls(
            path=entry.path,
            name=entry.name,
            stats=entry.stats,
            content=content,
        )

    def to_dict(self) -> dict:
        d = Entry.to_dict(self)
        d["lines"] = self.line_count
        return d


__all__ = ["Entry", "EntryStats", "EntryWithContent"]
