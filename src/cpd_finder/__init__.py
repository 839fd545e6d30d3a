"""cpd_finder — pick and load the source files a copy/paste detector inspects."""

__all__ = [
    "__version__",
    "get_files_to_detect",
    "get_option",
    "FinderOptions",
    "OptionsError",
    "DEFAULT_OPTIONS",
    "Entry",
    "EntryStats",
    "EntryWithContent",
    "find_files",
    "summarize",
]
__version__ = "0.1.0"

from cpd_finder.api import find_files, summarize  # noqa: E402, F401
from cpd_finder.core.config import (  # noqa: E402, F401
    DEFAULT_OPTIONS,
    FinderOptions,
    OptionsError,
    get_option,
)
from cpd_finder.core.finder import get_files_to_detect  # noqa: E402, F401
from cpd_finder.model import Entry, EntryStats, EntryWithContent  # noqa: E402, F401
