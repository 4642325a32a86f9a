"""Short-period (diurnal and semidiurnal) Earth orientation models.

Each model is a harmonic series in the tidal arguments
``(chi, l, l', F, D, Omega)`` with ``chi = GMST + pi``:

    value_k(t) = sum_j  a_jk sin(theta_j) + b_jk cos(theta_j),
    theta_j = n_j . (chi, l, l', F, D, Omega)

Built-in series (IERS Conventions 2010, Chapter 5):

- :data:`PM_LIBRATION`: diurnal polar motion due to libration
  (Table 5.1a), outputs ``(x_p, y_p)`` in micro-arcseconds.
- :data:`UT_LIBRATION`: semidiurnal UT1 / LOD variations due to
  libration (Table 5.1b), outputs ``(UT1, LOD)`` in microseconds.

The diurnal and semidiurnal ocean tide EOP variations are loaded with
:func:`load_ocean_tide_eop_file`; their coefficients come from the
user-supplied table (e.g. IERS Conventions Tables 8.2 and 8.3).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from tidejax.config import get_dtype
from tidejax.constants import MJD2000
from tidejax.sofa import DJC, MJD_ZERO, delaunay_arguments, gmst82

logger = logging.getLogger(__name__)


class ShortPeriodSeries(NamedTuple):
    """Harmonic series in the tidal arguments.

    Attributes:
        multipliers: Integer argument multipliers of
            ``(chi, l, l', F, D, Omega)``, shape ``(N, 6)``.
        coefficients: ``(sin, cos)`` amplitude pairs for each output,
            shape ``(N, 2 * K)``.
    """

    multipliers: np.ndarray
    coefficients: np.ndarray

    @property
    def output_count(self) -> int:
        """Number of output quantities ``K``."""
        return self.coefficients.shape[1] // 2


def tidal_arguments(mjd: ArrayLike) -> Array:
    """Tidal arguments ``(GMST + pi, l, l', F, D, Omega)`` at *mjd*.

    Args:
        mjd: Modified Julian Date.

    Returns:
        Array of shape ``(6,)`` in radians.
    """
    mjd = jnp.asarray(mjd, dtype=get_dtype())
    t = (mjd - MJD2000) / DJC
    chi = gmst82(MJD_ZERO, mjd) + jnp.pi
    return jnp.concatenate([chi[None], delaunay_arguments(t)])


def evaluate_series(series: ShortPeriodSeries, mjd: ArrayLike) -> Array:
    """Evaluate a :class:`ShortPeriodSeries` at *mjd*.

    Args:
        series: Series to evaluate.
        mjd: Modified Julian Date.

    Returns:
        Array of shape ``(K,)`` in the series' native units.
    """
    dtype = get_dtype()
    if series.multipliers.shape[0] == 0:
        return jnp.zeros(series.output_count, dtype=dtype)
    theta = jnp.asarray(series.multipliers, dtype=dtype) @ tidal_arguments(mjd)
    coeffs = jnp.asarray(series.coefficients, dtype=dtype)
    return jnp.sin(theta) @ coeffs[:, 0::2] + jnp.cos(theta) @ coeffs[:, 1::2]


# IERS Conventions 2010, Table 5.1a: (chi, l, l', F, D, Omega),
# x_p sin, x_p cos, y_p sin, y_p cos [µas]
_PM_LIBRATION_TABLE = (
    ((1, -1, 0, -2, 0, -1), (-0.4, 0.3, -0.3, -0.4)),
    ((1, -1, 0, -2, 0, -2), (-2.3, 1.3, -1.3, -2.3)),
    ((1, 1, 0, -2, -2, -2), (-0.4, 0.3, -0.3, -0.4)),
    ((1, 0, 0, -2, 0, -1), (-2.1, 1.2, -1.2, -2.1)),
    ((1, 0, 0, -2, 0, -2), (-11.4, 6.5, -6.5, -11.4)),
    ((1, -1, 0, 0, 0, 0), (0.8, -0.5, 0.5, 0.8)),
    ((1, 0, 0, -2, 2, -2), (-4.8, 2.7, -2.7, -4.8)),
    ((1, 0, 0, 0, 0, 0), (14.3, -8.2, 8.2, 14.3)),
    ((1, 0, 0, 0, 0, -1), (1.9, -1.1, 1.1, 1.9)),
    ((1, 1, 0, 0, 0, 0), (0.8, -0.4, 0.4, 0.8)),
)

# IERS Conventions 2010, Table 5.1b: (chi, l, l', F, D, Omega),
# UT1 sin, UT1 cos, LOD sin, LOD cos [µs]
_UT_LIBRATION_TABLE = (
    ((2, -2, 0, -2, 0, -2), (0.05, -0.03, -0.3, -0.6)),
    ((2, 0, 0, -2, -2, -2), (0.06, -0.03, -0.4, -0.7)),
    ((2, -1, 0, -2, 0, -2), (0.35, -0.20, -2.4, -4.1)),
    ((2, 1, 0, -2, -2, -2), (0.07, -0.04, -0.5, -0.8)),
    ((2, 0, 0, -2, 0, -1), (-0.07, 0.04, 0.5, 0.8)),
    ((2, 0, 0, -2, 0, -2), (1.75, -1.01, -12.2, -21.3)),
    ((2, 1, 0, -2, 0, -2), (-0.05, 0.03, 0.3, 0.6)),
    ((2, 0, -1, -2, 2, -2), (0.04, -0.03, -0.3, -0.6)),
    ((2, 0, 0, -2, 2, -2), (0.76, -0.44, -5.5, -9.6)),
    ((2, 0, 0, 0, 0, 0), (0.21, -0.12, -1.5, -2.6)),
    ((2, 0, 0, 0, 0, -1), (0.06, -0.04, -0.4, -0.8)),
)


def _series_from_table(table) -> ShortPeriodSeries:
    multipliers = np.array([row[0] for row in table], dtype=np.int64)
    coefficients = np.array([row[1] for row in table], dtype=np.float64)
    return ShortPeriodSeries(multipliers, coefficients)


PM_LIBRATION: ShortPeriodSeries = _series_from_table(_PM_LIBRATION_TABLE)
"""Diurnal libration in polar motion, outputs ``(x_p, y_p)`` [µas]."""

UT_LIBRATION: ShortPeriodSeries = _series_from_table(_UT_LIBRATION_TABLE)
"""Semidiurnal libration in UT1 and LOD, outputs ``(UT1, LOD)`` [µs]."""


def load_ocean_tide_eop_file(filepath: str | Path) -> ShortPeriodSeries:
    """Load a diurnal / semidiurnal ocean tide EOP model.

    Each data line holds the six argument multipliers
    ``chi l l' F D Omega`` followed by the amplitudes
    ``x_sin x_cos y_sin y_cos ut1_sin ut1_cos`` and optionally
    ``lod_sin lod_cos``; polar motion in µas, UT1 and LOD in µs.  Text
    after ``#`` is ignored.

    Args:
        filepath: Path to the coefficient table.

    Returns:
        ShortPeriodSeries with outputs ``(x_p, y_p, UT1, LOD)``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line does not hold 12 or 14 numeric values, or the
            file holds no terms.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Ocean tide EOP file not found: {filepath}")

    multipliers = []
    coefficients = []
    with open(filepath) as f:
        for number, line in enumerate(f, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) not in (12, 14):
                raise ValueError(
                    f"{filepath}:{number}: expected 12 or 14 columns, got {len(parts)}"
                )
            multipliers.append([int(p) for p in parts[:6]])
            amplitudes = [float(p) for p in parts[6:]]
            if len(amplitudes) == 6:
                amplitudes += [0.0, 0.0]
            coefficients.append(amplitudes)

    if not multipliers:
        raise ValueError(f"No ocean tide EOP terms found in {filepath}")

    logger.info("Loaded %d ocean tide EOP terms from %s", len(multipliers), filepath)
    return ShortPeriodSeries(
        np.array(multipliers, dtype=np.int64), np.array(coefficients, dtype=np.float64)
    )
