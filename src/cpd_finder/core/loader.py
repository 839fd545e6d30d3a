"""Content loader — attach a file's decoded text to its entry."""

from __future__ import annotations

from pathlib import Path

from cpd_finder.model import Entry, EntryWithContent

DEFAULT_ENCODING = "utf-8"


def load_content(entry: Entry, *, encoding: str = DEFAULT_ENCODING) -> EntryWithContent:
    """Read *entry* in full and return a new record carrying its text.

    Bytes that do not decode become U+FFFD; line endings are kept as-is.
    Read errors (``PermissionError``, ``FileNotFoundError``...) propagate.
    """
    data = Path(entry.path).read_bytes()
    return EntryWithContent.from_entry(entry, data.decode(encoding, errors="replace"))
