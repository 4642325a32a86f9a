"""Doodson-coded tidal constituents and their arguments.

A constituent is identified by six integer multipliers of the Doodson
variables ``(tau, s, h, p, N', ps)``.  The Doodson number encodes them as
``"255.555"``: the first digit is the multiplier of ``tau``, the remaining
digits are offset by 5.

The variables follow from the IERS fundamental arguments:

    s = F + Omega          h = s - D         p = s - l
    N' = -Omega            ps = s - D - l'   tau = theta_g + pi - s

with ``theta_g`` the Greenwich mean sidereal time.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import MJD2000, SECONDS_PER_DAY
from tidejax.epoch import Epoch
from tidejax.sofa import DJC, delaunay_arguments, gmst82
from tidejax.time_scales import gps_to_tt, gps_to_utc

_NAMES = {
    "M2": "255.555",
    "S2": "273.555",
    "N2": "245.655",
    "K2": "275.555",
    "K1": "165.555",
    "O1": "145.555",
    "P1": "163.555",
    "Q1": "135.655",
    "Mf": "075.555",
    "Mm": "065.455",
    "Ssa": "057.555",
    "Sa": "056.554",
}

_CODES = {code: name for name, code in _NAMES.items()}


def doodson_arguments(time_gps: Epoch, rotation=None) -> Array:
    """Doodson variables ``(tau, s, h, p, N', ps)`` at *time_gps*.

    The fundamental arguments use TT.  GMST uses UT1 from *rotation*;
    without a rotation provider UTC stands in for UT1.

    Args:
        time_gps: Instant in GPS time.
        rotation: Optional :class:`~tidejax.earth_rotation.EarthRotation`
            supplying UT1-UTC.

    Returns:
        Array of shape ``(6,)`` in radians.
    """
    _float = get_dtype()
    time_tt = gps_to_tt(time_gps)
    t = (_float(time_tt.mjd_int() - MJD2000) + _float(time_tt.mjd_mod())) / DJC
    l, lp, F, D, Om = delaunay_arguments(t)

    dj1, dj2 = gps_to_utc(time_gps).jd_parts()
    dj2 = jnp.asarray(dj2, dtype=_float)
    if rotation is not None:
        dj2 = dj2 + rotation.earth_orientation_parameter(time_gps).delta_ut / SECONDS_PER_DAY
    theta_g = gmst82(_float(dj1), dj2)

    s = F + Om
    h = s - D
    p = s - l
    n_prime = -Om
    ps = s - D - lp
    tau = theta_g + jnp.pi - s
    return jnp.stack([tau, s, h, p, n_prime, ps])


class Doodson:
    """A tidal constituent given by its Doodson number or name.

    Args:
        code: Doodson number (``"255.555"``), known constituent name
            (``"M2"``) or six integer multipliers.

    Raises:
        ValueError: If *code* cannot be interpreted.

    Examples:
        ```python
        from tidejax.doodson import Doodson
        Doodson("M2").multipliers  # (2, 0, 0, 0, 0, 0)
        ```
    """

    __slots__ = ("multipliers",)

    def __init__(self, code: str | tuple[int, ...] | list[int] | Doodson) -> None:
        if isinstance(code, Doodson):
            self.multipliers = code.multipliers
            return
        if isinstance(code, str):
            code = _NAMES.get(code, code)
            digits = code.replace(".", "")
            if len(digits) != 6 or not digits.isdigit():
                raise ValueError(f"Invalid Doodson number {code!r}")
            values = [int(d) for d in digits]
            self.multipliers = (values[0],) + tuple(v - 5 for v in values[1:])
            return
        values = tuple(int(v) for v in code)
        if len(values) != 6:
            raise ValueError(f"Doodson multipliers need 6 values, got {len(values)}")
        self.multipliers = values

    @property
    def code(self) -> str:
        """Doodson number, e.g. ``"255.555"``."""
        digits = [str(self.multipliers[0])] + [str(v + 5) for v in self.multipliers[1:]]
        return "".join(digits[:3]) + "." + "".join(digits[3:])

    @property
    def name(self) -> str:
        """Constituent name if known, otherwise the Doodson number."""
        return _CODES.get(self.code, self.code)

    def argument(self, time_gps: Epoch, rotation=None) -> Array:
        """Tidal argument ``theta = n . beta`` [rad], see :func:`doodson_arguments`."""
        return jnp.dot(
            jnp.asarray(self.multipliers, dtype=get_dtype()), doodson_arguments(time_gps, rotation)
        )

    def __eq__(self, other):
        if not isinstance(other, Doodson):
            return NotImplemented
        return self.multipliers == other.multipliers

    def __hash__(self):
        return hash(self.multipliers)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Doodson({self.code!r})"
