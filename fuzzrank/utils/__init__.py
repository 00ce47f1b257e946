"""Utility modules for fuzzrank."""

from .io_utils import (
    deep_merge,
    get_settings_load_count,
    load_settings,
    read_choices,
    reload_settings,
)
from .logging_utils import get_logger, setup_logging
from .path_utils import get_config_path, get_project_root

__all__ = [
    # I/O utilities
    "deep_merge",
    "get_settings_load_count",
    "load_settings",
    "read_choices",
    "reload_settings",
    # Logging utilities
    "get_logger",
    "setup_logging",
    # Path utilities
    "get_config_path",
    "get_project_root",
]
