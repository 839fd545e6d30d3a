"""Finder options — one frozen record, one place that knows the defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import MISSING, dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from cpd_finder.utils.byte_size import parse_bytes

_logger = logging.getLogger(__name__)

# Option-file / JS-style names accepted alongside the dataclass field names.
OPTION_ALIASES: dict[str, str] = {
    "formatsExts": "formats_exts",
    "maxSize": "max_size",
    "minLines": "min_lines",
    "maxLines": "max_lines",
    "noSymlinks": "no_symlinks",
}


class OptionsError(ValueError):
    """An option value that cannot drive a finder run."""


def _as_list(
    value: str | os.PathLike | Iterable[str | os.PathLike], *, split: bool
) -> tuple[str, ...]:
    if isinstance(value, (str, os.PathLike)):
        text = os.fspath(value)
        parts = text.split(",") if split else [text]
    else:
        parts = [os.fspath(v) for v in value]
    return tuple(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class FinderOptions:
    """Immutable snapshot of everything a finder run depends on.

    ``path`` entries may be files or directories.  ``format`` empty means
    every format the classifier recognizes.  ``min_lines`` and
    ``max_lines`` are both inclusive.
    """

    path: tuple[str, ...] = (".",)
    pattern: str = "**/*"
    ignore: tuple[str, ...] = ()
    format: tuple[str, ...] = ()
    formats_exts: Mapping[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    max_size: str | int = "100kb"
    min_lines: int = 5
    max_lines: int = 1000
    no_symlinks: bool = False
    absolute: bool = False
    gitignore: bool = False
    encoding: str = "utf-8"
    debug: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        # Accept lists / bare strings from callers; store tuples.
        object.__setattr__(self, "path", _as_list(self.path, split=False))
        object.__setattr__(self, "ignore", _as_list(self.ignore, split=False))
        object.__setattr__(self, "format", _as_list(self.format, split=True))
        if not (self.pattern or "").strip():
            object.__setattr__(self, "pattern", "**/*")
        exts = {fmt: _as_list(v, split=True) for fmt, v in (self.formats_exts or {}).items()}
        object.__setattr__(self, "formats_exts", MappingProxyType(exts))
        self._validate()

    def _validate(self) -> None:
        if not self.path:
            raise OptionsError("path: at least one root path is required")
        if parse_bytes(self.max_size) is None:
            raise OptionsError(f"max_size: cannot parse size {self.max_size!r}")
        if self.min_lines < 0 or self.max_lines < 0:
            raise OptionsError(
                f"line limits must be >= 0 (min_lines={self.min_lines}, max_lines={self.max_lines})"
            )
        if self.min_lines > self.max_lines:
            raise OptionsError(
                f"min_lines ({self.min_lines}) is greater than max_lines ({self.max_lines})"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> FinderOptions:
        """Build options from a plain dict (camelCase or snake_case keys).

        ``None`` values fall back to the defaults; unknown keys are dropped.
        """
        return cls(**normalize_option_keys(data))

    def with_overrides(self, overrides: Mapping[str, Any]) -> FinderOptions:
        """Copy of these options with *overrides* applied on top."""
        return replace(self, **normalize_option_keys(overrides))

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _field_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for f in fields(FinderOptions):
        if f.default is not MISSING:
            defaults[f.name] = f.default
        elif f.default_factory is not MISSING:
            defaults[f.name] = f.default_factory()
    return defaults


_DEFAULTS: dict[str, Any] = _field_defaults()
DEFAULT_OPTIONS = FinderOptions()


def normalize_option_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map aliases onto field names, dropping unknown keys and ``None`` values."""
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in _DEFAULTS:
            _logger.debug("Ignoring unknown option %r", key)
            continue
        if value is None:
            continue
        normalized[name] = value
    return normalized


def get_option(name: str, options: FinderOptions | Mapping[str, Any] | None = None) -> Any:
    """Central default lookup: the option's value, or its default when unset.

    *name* may be a field name or an alias (``"maxSize"``).  Raises
    ``KeyError`` for names that are not finder options.
    """
    key = OPTION_ALIASES.get(name, name)
    if key not in _DEFAULTS:
        raise KeyError(f"Unknown option: {name!r}")

    value: Any = None
    if isinstance(options, Mapping):
        for alias, target in OPTION_ALIASES.items():
            if target == key and options.get(alias) is not None:
                value = options[alias]
                break
        if value is None:
            value = options.get(key)
    elif options is not None:
        value = getattr(options, key, None)

    if value is None or (isinstance(value, str) and not value.strip()):
        return _DEFAULTS[key]
    return value
