"""Data directory management and file freshness utilities.

The data root holds Earth orientation files, ocean tide models and other
inputs referenced by configuration.  It is determined by the
``TIDEJAX_DATA`` environment variable and defaults to ``~/.cache/tidejax``.
Configuration paths may reference it with the ``{dataDir}`` placeholder.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

_ENV_VAR = "TIDEJAX_DATA"
_DEFAULT_SUBDIR = ".cache/tidejax"
_PLACEHOLDER = "{dataDir}"


def get_data_dir(subdirectory: str | None = None) -> Path:
    """Return the tidejax data directory, creating it if needed.

    The root is ``$TIDEJAX_DATA`` if set, otherwise ``~/.cache/tidejax``.
    An optional *subdirectory* is appended and also created.

    Args:
        subdirectory: Optional subdirectory to append (e.g. ``"earthRotation"``).

    Returns:
        Resolved :class:`~pathlib.Path` to the data directory.
    """
    env = os.environ.get(_ENV_VAR)
    if env is not None:
        root = Path(env)
    else:
        root = Path.home() / _DEFAULT_SUBDIR

    if subdirectory is not None:
        root = root / subdirectory

    root.mkdir(parents=True, exist_ok=True)
    return root


def get_eop_data_dir() -> Path:
    """Return the Earth orientation data directory (``<data>/earthRotation``).

    Returns:
        Path to the Earth orientation data directory.
    """
    return get_data_dir("earthRotation")


def resolve_data_path(path: str | Path) -> Path:
    """Expand the ``{dataDir}`` placeholder in a configured file path.

    Args:
        path: File path, optionally starting with ``{dataDir}``.

    Returns:
        The path with the placeholder replaced by :func:`get_data_dir`.
    """
    text = str(path)
    if _PLACEHOLDER in text:
        text = text.replace(_PLACEHOLDER, str(get_data_dir()))
    return Path(text)


def file_age_seconds(filepath: str | Path) -> float:
    """Return the age of *filepath* in seconds since last modification.

    Args:
        filepath: Path to the file.

    Returns:
        Seconds elapsed since the file was last modified.

    Raises:
        FileNotFoundError: If *filepath* does not exist.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"No such file: '{filepath}'")
    return max(0.0, time.time() - filepath.stat().st_mtime)


def is_file_stale(filepath: str | Path, max_age_seconds: float) -> bool:
    """Check whether *filepath* is missing or older than *max_age_seconds*.

    Args:
        filepath: Path to the file.
        max_age_seconds: Maximum acceptable age in seconds.

    Returns:
        ``True`` if the file is missing or stale.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        return True
    return file_age_seconds(filepath) > max_age_seconds
