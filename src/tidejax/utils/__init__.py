"""Shared utility functions for tidejax.

Provides the angle conversion helper and data directory management.
"""

from tidejax.utils._angle import to_radians
from tidejax.utils.caching import (
    file_age_seconds,
    get_data_dir,
    get_eop_data_dir,
    is_file_stale,
    resolve_data_path,
)

__all__ = [
    "file_age_seconds",
    "get_data_dir",
    "get_eop_data_dir",
    "is_file_stale",
    "resolve_data_path",
    "to_radians",
]
