"""Constructors for :class:`EOPData` series.

- :func:`eop_from_table`: validate a raw EOP table and convert it to
  internal units (the single entry point every loader goes through).
- :func:`static_eop`: constant EOP values over a time span.
- :func:`load_eop_from_file`: parse a standard, C04 or column file.
- :func:`load_default_eop`: load the C04 series from the data directory.
- :func:`load_cached_eop`: load from a local cache, downloading fresh
  data from IERS when stale.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import jax.numpy as jnp
import numpy as np
import polars as pl

from tidejax.config import get_dtype
from tidejax.constants import DEG2RAD
from tidejax.eop._download import _C04_FILENAME, _STANDARD_FILENAME, download_standard_eop_file
from tidejax.eop._parsers import load_eop_table
from tidejax.eop._types import EOP_COLUMNS, EOPData
from tidejax.errors import MalformedInputError
from tidejax.time import gps_minus_utc
from tidejax.utils.caching import get_eop_data_dir, is_file_stale

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE_DAYS: float = 7.0
"""Default maximum age for cached EOP data in days."""

_ARCSEC_TO_RAD: float = DEG2RAD / 3600.0


def eop_from_table(table: pl.DataFrame) -> EOPData:
    """Build an :class:`EOPData` series from a raw EOP table.

    Pole coordinates and celestial pole offsets are converted from
    arcseconds to radians (``DEG2RAD / 3600``).  UT1-UTC is converted to
    UT1-GPS by subtracting GPS-UTC at each sample's UTC time, which
    removes the leap-second steps before interpolation.

    Args:
        table: DataFrame with the columns of
            :data:`~tidejax.eop._types.EOP_COLUMNS`, sorted by ``mjd``.

    Returns:
        EOPData in internal units.

    Raises:
        MalformedInputError: If columns are missing, the table is empty,
            values are not finite, or the MJDs are not strictly increasing.

    Examples:
        ```python
        import polars as pl
        from tidejax.eop import eop_from_table
        table = pl.DataFrame({
            "mjd": [58000.0, 58001.0], "pm_x": [0.1, 0.1], "pm_y": [0.3, 0.3],
            "ut1_utc": [0.2, 0.2], "lod": [0.0, 0.0], "dX": [0.0, 0.0], "dY": [0.0, 0.0],
        })
        eop = eop_from_table(table)
        ```
    """
    missing = [name for name in EOP_COLUMNS if name not in table.columns]
    if missing:
        raise MalformedInputError(f"EOP table is missing columns {missing}; got {table.columns}")
    if table.height == 0:
        raise MalformedInputError("EOP table is empty")

    data = table.select(EOP_COLUMNS).to_numpy().astype(np.float64)
    if not np.all(np.isfinite(data)):
        row = int(np.argmax(~np.all(np.isfinite(data), axis=1)))
        raise MalformedInputError(f"EOP table has non-finite values at MJD {data[row, 0]}")

    mjd = data[:, 0]
    steps = np.diff(mjd)
    if np.any(steps <= 0.0):
        idx = int(np.argmax(steps <= 0.0))
        raise MalformedInputError(
            f"EOP times must be strictly increasing: MJD {mjd[idx + 1]} follows {mjd[idx]}"
        )

    ut1_gps = data[:, 3] - np.asarray(gps_minus_utc(mjd), dtype=np.float64)

    dtype = get_dtype()
    return EOPData(
        mjd=jnp.asarray(mjd, dtype=dtype),
        pm_x=jnp.asarray(data[:, 1] * _ARCSEC_TO_RAD, dtype=dtype),
        pm_y=jnp.asarray(data[:, 2] * _ARCSEC_TO_RAD, dtype=dtype),
        ut1_gps=jnp.asarray(ut1_gps, dtype=dtype),
        lod=jnp.asarray(data[:, 4], dtype=dtype),
        dX=jnp.asarray(data[:, 5] * _ARCSEC_TO_RAD, dtype=dtype),
        dY=jnp.asarray(data[:, 6] * _ARCSEC_TO_RAD, dtype=dtype),
    )


def static_eop(
    pm_x: float = 0.0,
    pm_y: float = 0.0,
    ut1_utc: float = 0.0,
    lod: float = 0.0,
    dX: float = 0.0,
    dY: float = 0.0,
    mjd_min: float = 41317.0,
    mjd_max: float = 88069.0,
    step: float = 1.0,
) -> EOPData:
    """Create an EOPData with constant values across an MJD range.

    Samples are placed every *step* days so that interpolators of any
    moderate degree find enough support points.  The default range spans
    1972-01-01 to 2100-01-01.

    Args:
        pm_x: Polar motion x-component [arcsec].
        pm_y: Polar motion y-component [arcsec].
        ut1_utc: UT1-UTC offset [seconds].
        lod: Length of day excess [seconds].
        dX: Celestial pole offset X [arcsec].
        dY: Celestial pole offset Y [arcsec].
        mjd_min: Start of the valid MJD range (UTC).
        mjd_max: End of the valid MJD range (UTC).
        step: Sample spacing in days.

    Returns:
        EOPData with constant values.
    """
    mjd = np.arange(mjd_min, mjd_max + 0.5 * step, step, dtype=np.float64)
    n = mjd.shape[0]
    table = pl.DataFrame(
        {
            "mjd": mjd,
            "pm_x": np.full(n, pm_x),
            "pm_y": np.full(n, pm_y),
            "ut1_utc": np.full(n, ut1_utc),
            "lod": np.full(n, lod),
            "dX": np.full(n, dX),
            "dY": np.full(n, dY),
        }
    )
    return eop_from_table(table)


def load_eop_from_file(filepath: str | Path, fmt: str = "auto") -> EOPData:
    """Load EOP data from a file.

    Args:
        filepath: Path to an EOP file (IERS standard, C04 or plain columns).
        fmt: File layout, see :data:`~tidejax.eop._parsers.EOP_FORMATS`.

    Returns:
        EOPData ready for interpolation.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no valid EOP data is found.
        MalformedInputError: If the parsed table is not strictly increasing.

    Examples:
        ```python
        from tidejax.eop import load_eop_from_file
        eop = load_eop_from_file("path/to/EOP_14C04_IAU2000.txt")
        ```
    """
    table = load_eop_table(filepath, fmt)
    logger.info("Loaded %d EOP samples from %s", table.height, filepath)
    return eop_from_table(table)


def load_default_eop() -> EOPData:
    """Load the C04 series from the data directory.

    Reads ``<data>/earthRotation/EOP_14C04_IAU2000.txt``; see
    :func:`~tidejax.utils.caching.get_data_dir` for the data root.

    Returns:
        EOPData loaded from the default C04 file.

    Raises:
        FileNotFoundError: If the default file is not present.
    """
    return load_eop_from_file(get_eop_data_dir() / _C04_FILENAME, fmt="c04")


def load_cached_eop(
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> EOPData:
    """Load EOP data from a local cache, downloading fresh data when stale.

    Checks whether the cached file at *filepath* exists and is younger than
    *max_age_days*.  If the file is missing or stale, a fresh copy of
    ``finals.all.iau2000.txt`` is downloaded from IERS.  If the download
    fails, an existing (stale) cache file is used, otherwise the default
    C04 file of the data directory.

    Args:
        filepath: Path to the cached EOP file.  When ``None`` (the default),
            uses ``<data>/earthRotation/finals.all.iau2000.txt``.
        max_age_days: Maximum acceptable age of the cached file in days.

    Returns:
        EOPData loaded from the cached (or freshly downloaded) file.
    """
    if filepath is None:
        filepath = get_eop_data_dir() / _STANDARD_FILENAME
    else:
        filepath = Path(filepath)

    if is_file_stale(filepath, max_age_days * 86400.0):
        try:
            download_standard_eop_file(filepath)
        except (httpx.HTTPError, OSError):
            if not filepath.exists():
                logger.warning(
                    "Failed to download EOP data; falling back to the default C04 file.",
                    exc_info=True,
                )
                return load_default_eop()
            logger.warning(
                "Failed to refresh EOP data; using stale cache %s.", filepath, exc_info=True
            )

    return load_eop_from_file(filepath, fmt="standard")
