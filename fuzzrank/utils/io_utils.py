"""IO utilities: YAML settings loading and candidate file reading."""

import functools
import logging
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
import yaml

from fuzzrank.utils.logging_utils import get_logger

logger = get_logger(__name__)

# Settings loading counter for debugging
_settings_load_count = 0

TEXT_SUFFIXES = {".txt", ".lst", ""}


def _default_settings() -> dict[str, Any]:
    return {
        "scoring": {
            "full_process": True,
            "force_ascii": True,
            "subcost": None,
            "use_collator": False,
            "astral": False,
            "normalize": False,
            "ratio_alg": "default",
            "partial": False,
            "try_simple": False,
        },
        "extract": {
            "scorer": "ratio",
            "cutoff": None,
            "limit": None,
            "unsorted": False,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file": None,
        },
    }


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``update`` into ``base`` (in place) and return it."""
    for key, value in update.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


@functools.lru_cache(maxsize=8)
def load_settings(path: str) -> dict[str, Any]:
    """Load settings from YAML file with defaults.

    This function is cached to prevent repeated file I/O and parsing.
    Use reload_settings() to force a fresh load.

    Args:
        path: Path to settings YAML file

    Returns:
        Dictionary with settings (user config merged over defaults)

    """
    global _settings_load_count
    _settings_load_count += 1

    logger.debug(f"Settings loaded (count: {_settings_load_count}) from {path}")

    defaults = _default_settings()
    try:
        with open(path, encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"top-level YAML value must be a mapping, got {type(user_config).__name__}")
        return deep_merge(defaults, user_config)

    except FileNotFoundError:
        logger.warning(f"Settings file not found: {path}. Using defaults.")
        return defaults
    except Exception as e:
        logger.exception(f"Error loading settings: {e}. Using defaults.")
        return defaults


def reload_settings(path: str) -> dict[str, Any]:
    """Force reload settings from file (clears cache).

    Args:
        path: Path to settings YAML file

    Returns:
        Freshly loaded settings

    """
    load_settings.cache_clear()
    return load_settings(path)


def get_settings_load_count() -> int:
    """Get the total number of times settings have been loaded."""
    return _settings_load_count


def read_choices(
    path: Union[str, Path],
    column: Optional[str] = None,
) -> Union[list[str], pd.Series]:
    """Read candidate strings from a file.

    CSV files are read with pandas and ``column`` selects the candidate
    column (the first column when omitted); the returned Series keeps the
    row index as the extraction key. Any other file is read as one candidate
    per non-blank line.

    Args:
        path: Candidate file
        column: CSV column holding the candidates

    Returns:
        Series (CSV) or list of lines

    Raises:
        KeyError: ``column`` is not present in the CSV

    """
    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        if column is None:
            column = df.columns[0]
        elif column not in df.columns:
            raise KeyError(f"Column {column!r} not found in {path} (columns: {list(df.columns)})")
        logger.info(f"Read {len(df)} candidates from column {column!r} of {path}")
        return df[column]

    with open(path, encoding="utf-8") as f:
        lines = [line.rstrip("\n") for line in f if line.strip()]
    logger.info(f"Read {len(lines)} candidates from {path}")
    return lines
