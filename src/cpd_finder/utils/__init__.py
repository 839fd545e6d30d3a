"""Shared utilities for cpd_finder."""

from cpd_finder.utils.byte_size import format_bytes, parse_bytes
from cpd_finder.utils.json_norm import stable_json_dumps

__all__ = [
    "format_bytes",
    "parse_bytes",
    "stable_json_dumps",
]
