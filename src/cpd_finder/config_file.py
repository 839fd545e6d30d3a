"""Option files — ``.cpd-finder.json`` / ``.cpd-finder.yaml`` next to the code.

Precedence when resolving options: defaults < option file < overrides.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from cpd_finder.contracts.load import validate_instance
from cpd_finder.core.config import FinderOptions

_logger = logging.getLogger(__name__)

OPTIONS_SCHEMA = "options.schema.json"
OPTION_FILE_NAMES: tuple[str, ...] = (
    ".cpd-finder.json",
    ".cpd-finder.yaml",
    ".cpd-finder.yml",
)


def find_options_file(start: str | Path = ".") -> Path | None:
    """Return the first option file present in *start*, JSON before YAML."""
    directory = Path(start)
    for name in OPTION_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def read_options_file(path: str | Path) -> dict[str, Any]:
    """Parse and schema-validate an option file, returning the raw mapping.

    Raises ``FileNotFoundError`` for a missing file and
    ``jsonschema.ValidationError`` for a malformed one.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        data = {}

    validate_instance(data, OPTIONS_SCHEMA)
    return data


def load_options_file(path: str | Path) -> FinderOptions:
    """Read *path* and build ``FinderOptions`` on top of the defaults."""
    return FinderOptions.from_mapping(read_options_file(path))


def resolve_options(
    overrides: Mapping[str, Any] | None = None,
    *,
    config_path: str | Path | None = None,
    search_dir: str | Path | None = None,
) -> FinderOptions:
    """Merge defaults, an option file and explicit *overrides*.

    *config_path* names the file explicitly; otherwise *search_dir* (when
    given) is searched for one of ``OPTION_FILE_NAMES``.
    """
    if config_path is None and search_dir is not None:
        config_path = find_options_file(search_dir)

    file_values: dict[str, Any] = {}
    if config_path is not None:
        _logger.debug("Reading options from %s", config_path)
        file_values = read_options_file(config_path)

    merged: dict[str, Any] = dict(file_values)
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return FinderOptions.from_mapping(merged)
