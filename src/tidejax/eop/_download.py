"""Download IERS Earth Orientation Parameter files.

Provides helpers to fetch the latest ``finals.all.iau2000.txt`` and the
EOP 14 C04 series.  Network errors are propagated to the caller so that
higher-level code (e.g. :func:`load_cached_eop`) can decide on fallback
behaviour.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

IERS_STANDARD_URL: str = (
    "https://datacenter.iers.org/data/latestVersion/finals.all.iau2000.txt"
)
"""Default URL for the IERS Standard Bulletin A finals file."""

IERS_C04_URL: str = "https://hpiers.obspm.fr/iers/eop/eopc04/eopc04_IAU2000.62-now"
"""Default URL for the IERS EOP 14 C04 series (IAU 2000, 1962 to now)."""

_STANDARD_FILENAME: str = "finals.all.iau2000.txt"
"""Canonical filename used for cached standard EOP data."""

_C04_FILENAME: str = "EOP_14C04_IAU2000.txt"
"""Canonical filename of the C04 series in the data directory."""

_DEFAULT_TIMEOUT: float = 120.0
"""Default HTTP timeout in seconds."""


def _download(filepath: str | Path, url: str, timeout: float) -> Path:
    """Fetch *url* and write the response text to *filepath*."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Downloading EOP data from %s", url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()

    filepath.write_text(response.text, encoding="utf-8")
    logger.info("EOP data written to %s", filepath)
    return filepath.resolve()


def download_standard_eop_file(
    filepath: str | Path,
    *,
    url: str = IERS_STANDARD_URL,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download an IERS standard EOP file to *filepath*.

    Creates parent directories if they do not exist.

    Args:
        filepath: Destination path for the downloaded file.
        url: URL to fetch.  Defaults to :data:`IERS_STANDARD_URL`.
        timeout: HTTP timeout in seconds.  Defaults to 120.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
    """
    return _download(filepath, url, timeout)


def download_c04_eop_file(
    filepath: str | Path,
    *,
    url: str = IERS_C04_URL,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download the IERS EOP 14 C04 series to *filepath*.

    Args:
        filepath: Destination path, typically
            ``<data>/earthRotation/EOP_14C04_IAU2000.txt``.
        url: URL to fetch.  Defaults to :data:`IERS_C04_URL`.
        timeout: HTTP timeout in seconds.  Defaults to 120.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
    """
    return _download(filepath, url, timeout)
