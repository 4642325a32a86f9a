"""Type definitions for Earth Orientation Parameters (EOP).

:class:`EOPData` is the immutable, load-time-converted EOP series consumed
by :class:`~tidejax.earth_rotation.EarthRotationIers2010`.  It is a
:class:`~typing.NamedTuple`, which JAX treats as a pytree automatically.

Raw tables travel between loaders and :func:`eop_from_table` as Polars
DataFrames with the columns listed in :data:`EOP_COLUMNS`.
"""

from __future__ import annotations

from typing import NamedTuple

from jax import Array

EOP_COLUMNS: tuple[str, ...] = ("mjd", "pm_x", "pm_y", "ut1_utc", "lod", "dX", "dY")
"""Columns of a raw EOP table.

Units: ``mjd`` UTC days, ``pm_x``/``pm_y`` arcseconds, ``ut1_utc`` seconds,
``lod`` seconds, ``dX``/``dY`` arcseconds.
"""


class EOPData(NamedTuple):
    """Earth Orientation Parameter series in internal units.

    Attributes:
        mjd: Strictly increasing UTC Modified Julian Dates, shape ``(N,)``.
        pm_x: Polar motion x-component [rad], shape ``(N,)``.
        pm_y: Polar motion y-component [rad], shape ``(N,)``.
        ut1_gps: UT1-GPS [seconds], shape ``(N,)``.  Unlike UT1-UTC this
            series has no leap-second steps and interpolates smoothly.
        lod: Length of day excess [seconds], shape ``(N,)``.
        dX: Celestial pole offset X [rad], shape ``(N,)``.
        dY: Celestial pole offset Y [rad], shape ``(N,)``.
    """

    mjd: Array
    pm_x: Array
    pm_y: Array
    ut1_gps: Array
    lod: Array
    dX: Array
    dY: Array

    @property
    def mjd_min(self) -> float:
        """First MJD (UTC) covered by the series."""
        return float(self.mjd[0])

    @property
    def mjd_max(self) -> float:
        """Last MJD (UTC) covered by the series."""
        return float(self.mjd[-1])

    @property
    def size(self) -> int:
        """Number of samples in the series."""
        return int(self.mjd.shape[0])
