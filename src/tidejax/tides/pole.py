"""Solid Earth pole tide (IERS Conventions 2010, Section 6.4).

The centrifugal effect of polar motion changes the degree-2 order-1
coefficients:

    dC21 = -c (kr m1 + ki m2),   dS21 = -c (kr m2 - ki m1),
    c = Omega^2 R^3 / (GM sqrt(15))

where ``m1 = xp - xp_mean`` and ``m2 = -(yp - yp_mean)`` are the wobble
variables in radians.
"""

from __future__ import annotations

import logging
import math

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import DEG2RAD, GM_EARTH, MJD2000, OMEGA_EARTH, R_EARTH
from tidejax.epoch import Epoch
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide, require_rotation
from tidejax.time_scales import gps_to_utc

logger = logging.getLogger(__name__)

MEAN_POLE_MODELS: tuple[str, ...] = ("iers2010", "secular")
"""Accepted mean pole model names."""

_MAS2RAD = 1e-3 * DEG2RAD / 3600.0


def mean_pole(time_gps: Epoch, model: str = "iers2010") -> tuple[float, float]:
    """Mean pole coordinates at *time_gps*.

    ``"iers2010"`` is the cubic model before 2010 and the linear model
    after (IERS Conventions 2010, Table 7.7); ``"secular"`` is the linear
    secular pole of the IERS Conventions 2018 update.

    Args:
        time_gps: Instant in GPS time.
        model: One of :data:`MEAN_POLE_MODELS`.

    Returns:
        ``(xp_mean, yp_mean)`` in radians.

    Raises:
        ValueError: If *model* is unknown.
    """
    t = (gps_to_utc(time_gps).mjd() - MJD2000) / 365.25
    if model == "iers2010":
        if t < 10.0:
            x = 55.974 + 1.8243 * t + 0.18413 * t**2 + 0.007024 * t**3
            y = 346.346 + 1.7896 * t - 0.10729 * t**2 - 0.000908 * t**3
        else:
            x = 23.513 + 7.6141 * t
            y = 358.891 - 0.6287 * t
    elif model == "secular":
        x = 55.0 + 1.677 * t
        y = 320.5 + 3.460 * t
    else:
        raise ValueError(f"Unknown mean pole model {model!r}. Must be one of {MEAN_POLE_MODELS}")
    return x * _MAS2RAD, y * _MAS2RAD


def wobble(time_gps: Epoch, rotation, model: str = "iers2010") -> tuple[Array, Array]:
    """Wobble variables ``(m1, m2)`` [rad] from the current pole."""
    eop = rotation.earth_orientation_parameter(time_gps)
    x_mean, y_mean = mean_pole(time_gps, model)
    return eop.xp - x_mean, -(eop.yp - y_mean)


class PoleTide(Tide):
    """Solid Earth pole tide.

    Args:
        kr: Real part of the Love number k2 at the Chandler frequency.
        ki: Imaginary part.
        mean_pole_model: One of :data:`MEAN_POLE_MODELS`.
        factor: Scale of the result.
    """

    def __init__(
        self,
        kr: float = 0.3077,
        ki: float = 0.0036,
        mean_pole_model: str = "iers2010",
        factor: float = 1.0,
    ) -> None:
        if mean_pole_model not in MEAN_POLE_MODELS:
            raise ValueError(
                f"Unknown mean pole model {mean_pole_model!r}. Must be one of {MEAN_POLE_MODELS}"
            )
        self.kr = kr
        self.ki = ki
        self.mean_pole_model = mean_pole_model
        self.factor = factor

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        rotation = require_rotation(rotation, "PoleTide")
        m1, m2 = wobble(time_gps, rotation, self.mean_pole_model)
        c = OMEGA_EARTH**2 * R_EARTH**3 / (GM_EARTH * math.sqrt(15.0))

        _float = get_dtype()
        cnm = jnp.zeros((3, 3), dtype=_float).at[2, 1].set(-c * (self.kr * m1 + self.ki * m2))
        snm = jnp.zeros((3, 3), dtype=_float).at[2, 1].set(-c * (self.kr * m2 - self.ki * m1))
        field = SphericalHarmonics(GM_EARTH, R_EARTH, self.factor * cnm, self.factor * snm)
        return field.get(max_degree, min_degree, gm, r)
