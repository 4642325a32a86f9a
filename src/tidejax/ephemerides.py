"""Ephemeris providers for the tide-generating bodies.

An :class:`Ephemerides` returns geocentric positions of the Sun and the
Moon in the celestial reference frame.  :class:`AnalyticEphemerides`
implements the low-precision analytical models of Montenbruck & Gill,
adequate for tidal forcing where ~0.1 deg accuracy is acceptable.

All positions are in SI base units (metres).

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012.
"""

from __future__ import annotations

import abc
import enum

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import AS2RAD, DEG2RAD, MJD2000
from tidejax.epoch import Epoch
from tidejax.rotations import Rx
from tidejax.time_scales import gps_to_tt

# Obliquity of the J2000 ecliptic [rad]
_EPSILON = 23.43929111 * DEG2RAD


class Body(enum.Enum):
    """Celestial bodies known to the ephemeris providers."""

    SUN = "sun"
    MOON = "moon"
    EARTH = "earth"


class Ephemerides(abc.ABC):
    """Abstract ephemeris provider."""

    @abc.abstractmethod
    def position(self, time_gps: Epoch, body: Body) -> Array:
        """Geocentric position of *body* in the celestial frame.

        Args:
            time_gps: Instant in GPS time.
            body: Requested body.

        Returns:
            Position vector [m], shape ``(3,)``.
        """


def _julian_centuries_tt(time_gps: Epoch) -> Array:
    """Julian centuries of TT since J2000.0, keeping the day split."""
    _float = get_dtype()
    time_tt = gps_to_tt(time_gps)
    days = _float(time_tt.mjd_int() - MJD2000) + _float(time_tt.mjd_mod())
    return days / _float(36525.0)


def _frac(x):
    """Fractional part of x: ``x - floor(x)``."""
    return x - jnp.floor(x)


def sun_position(time_gps: Epoch) -> Array:
    """Position of the Sun in the celestial frame.

    Args:
        time_gps: Instant in GPS time.

    Returns:
        3-element Sun position vector in metres.

    Examples:
        ```python
        from tidejax import Epoch
        from tidejax.ephemerides import sun_position
        r_sun = sun_position(Epoch(2024, 2, 25))
        float(jnp.linalg.norm(r_sun))  # ~1 AU
        ```
    """
    _float = get_dtype()
    pi2 = _float(2.0) * jnp.pi

    T = _julian_centuries_tt(time_gps)

    # Mean anomaly [rad]
    M = pi2 * _frac(_float(0.9931267) + _float(99.9973583) * T)

    # Ecliptic longitude [rad]
    L = pi2 * _frac(
        _float(0.7859444)
        + M / pi2
        + (_float(6892.0) * jnp.sin(M) + _float(72.0) * jnp.sin(_float(2.0) * M))
        / _float(1296.0e3)
    )

    # Distance [m]
    r = (
        _float(149.619e9)
        - _float(2.499e9) * jnp.cos(M)
        - _float(0.021e9) * jnp.cos(_float(2.0) * M)
    )

    r_ecliptic = jnp.array([r * jnp.cos(L), r * jnp.sin(L), _float(0.0)])
    return Rx(-_EPSILON) @ r_ecliptic


def moon_position(time_gps: Epoch) -> Array:
    """Position of the Moon in the celestial frame.

    Args:
        time_gps: Instant in GPS time.

    Returns:
        3-element Moon position vector in metres.
    """
    _float = get_dtype()
    pi2 = _float(2.0) * jnp.pi

    T = _julian_centuries_tt(time_gps)

    # Mean elements of the lunar orbit
    L_0 = _frac(_float(0.606433) + _float(1336.851344) * T)  # Mean longitude [rev]
    l_m = pi2 * _frac(_float(0.374897) + _float(1325.552410) * T)  # Moon mean anomaly
    lp = pi2 * _frac(_float(0.993133) + _float(99.997361) * T)  # Sun mean anomaly
    D = pi2 * _frac(_float(0.827361) + _float(1236.853086) * T)  # Moon-Sun elongation
    F = pi2 * _frac(_float(0.259086) + _float(1342.227825) * T)  # Argument of latitude

    # Ecliptic longitude perturbation [arcsec]
    dL = (
        _float(22640.0) * jnp.sin(l_m)
        - _float(4586.0) * jnp.sin(l_m - _float(2.0) * D)
        + _float(2370.0) * jnp.sin(_float(2.0) * D)
        + _float(769.0) * jnp.sin(_float(2.0) * l_m)
        - _float(668.0) * jnp.sin(lp)
        - _float(412.0) * jnp.sin(_float(2.0) * F)
        - _float(212.0) * jnp.sin(_float(2.0) * l_m - _float(2.0) * D)
        - _float(206.0) * jnp.sin(l_m + lp - _float(2.0) * D)
        + _float(192.0) * jnp.sin(l_m + _float(2.0) * D)
        - _float(165.0) * jnp.sin(lp - _float(2.0) * D)
        - _float(125.0) * jnp.sin(D)
        - _float(110.0) * jnp.sin(l_m + lp)
        + _float(148.0) * jnp.sin(l_m - lp)
        - _float(55.0) * jnp.sin(_float(2.0) * F - _float(2.0) * D)
    )

    L = pi2 * _frac(L_0 + dL / _float(1296.0e3))

    # Ecliptic latitude [rad]
    S = F + (dL + _float(412.0) * jnp.sin(_float(2.0) * F) + _float(541.0) * jnp.sin(lp)) * _float(AS2RAD)
    h = F - _float(2.0) * D
    N = (
        -_float(526.0) * jnp.sin(h)
        + _float(44.0) * jnp.sin(l_m + h)
        - _float(31.0) * jnp.sin(-l_m + h)
        - _float(23.0) * jnp.sin(lp + h)
        + _float(11.0) * jnp.sin(-lp + h)
        - _float(25.0) * jnp.sin(-_float(2.0) * l_m + F)
        + _float(21.0) * jnp.sin(-l_m + F)
    )
    B = (_float(18520.0) * jnp.sin(S) + N) * _float(AS2RAD)

    # Distance [m]
    r = (
        _float(385000e3)
        - _float(20905e3) * jnp.cos(l_m)
        - _float(3699e3) * jnp.cos(_float(2.0) * D - l_m)
        - _float(2956e3) * jnp.cos(_float(2.0) * D)
        - _float(570e3) * jnp.cos(_float(2.0) * l_m)
        + _float(246e3) * jnp.cos(_float(2.0) * l_m - _float(2.0) * D)
        - _float(205e3) * jnp.cos(lp - _float(2.0) * D)
        - _float(171e3) * jnp.cos(l_m + _float(2.0) * D)
        - _float(152e3) * jnp.cos(l_m + lp - _float(2.0) * D)
    )

    r_ecliptic = jnp.array([
        r * jnp.cos(L) * jnp.cos(B),
        r * jnp.sin(L) * jnp.cos(B),
        r * jnp.sin(B),
    ])
    return Rx(-_EPSILON) @ r_ecliptic


class AnalyticEphemerides(Ephemerides):
    """Analytical Sun and Moon positions (Montenbruck & Gill).

    The Earth is the origin of the geocentric frame.

    Examples:
        ```python
        from tidejax import Epoch
        from tidejax.ephemerides import AnalyticEphemerides, Body
        eph = AnalyticEphemerides()
        r_moon = eph.position(Epoch(2024, 2, 25), Body.MOON)
        ```
    """

    def position(self, time_gps: Epoch, body: Body) -> Array:
        if body is Body.SUN:
            return sun_position(time_gps)
        if body is Body.MOON:
            return moon_position(time_gps)
        if body is Body.EARTH:
            return jnp.zeros(3, dtype=get_dtype())
        raise ValueError(f"Unsupported body: {body}")
