"""Direct tides of the Sun and the Moon.

The tidal potential of a point mass ``GM_b`` at ``r_b`` on a point ``x``
is the body's potential minus its value and gradient at the geocentre:

    V = GM_b (1 / |d| - 1 / |r_b| - x . r_b / |r_b|^3),   d = r_b - x

Potential, gravity and gravity gradient use this closed form.  The
spherical harmonic field (degrees ``min_degree..max_degree``) serves the
station deformation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import GM_EARTH, GM_MOON, GM_SUN, R_EARTH
from tidejax.ephemerides import Body
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide, body_position_trf, tidal_coefficients

logger = logging.getLogger(__name__)

BODY_GM: dict[Body, float] = {Body.SUN: GM_SUN, Body.MOON: GM_MOON, Body.EARTH: GM_EARTH}
"""GM of the tide-generating bodies [m^3/s^2]."""


class AstronomicalTide(Tide):
    """Direct point-mass tides of the given bodies.

    Args:
        bodies: Tide-generating bodies.
        min_degree: Lowest degree of the spherical harmonic field.
        max_degree: Highest degree of the spherical harmonic field.
        factor: Scale of the result.
    """

    def __init__(
        self,
        bodies: Sequence[Body] = (Body.SUN, Body.MOON),
        min_degree: int = 2,
        max_degree: int = 3,
        factor: float = 1.0,
    ) -> None:
        if Body.EARTH in bodies:
            raise ValueError("The Earth cannot raise a direct tide on itself")
        self.bodies = tuple(bodies)
        self.min_degree = min_degree
        self.max_degree = max_degree
        self.factor = factor
        logger.debug("AstronomicalTide bodies=%s degree %d..%d", self.bodies, min_degree, max_degree)

    def _positions(self, time_gps, rot_earth, ephemerides):
        return [
            (body_position_trf(ephemerides, time_gps, body, rot_earth), BODY_GM[body])
            for body in self.bodies
        ]

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        bodies = self._positions(time_gps, rot_earth, ephemerides)
        cnm, snm = tidal_coefficients(
            [p for p, _ in bodies], [g for _, g in bodies], self.max_degree
        )
        field = SphericalHarmonics(GM_EARTH, R_EARTH, self.factor * cnm, self.factor * snm)
        field = field.get(self.max_degree, self.min_degree)
        return field.get(max_degree, min_degree, gm, r)

    def potential(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        V = jnp.zeros((), dtype=x.dtype)
        for r_b, gm_b in self._positions(time_gps, rot_earth, ephemerides):
            d = r_b - x
            r_norm = jnp.linalg.norm(r_b)
            V = V + gm_b * (1.0 / jnp.linalg.norm(d) - 1.0 / r_norm - jnp.dot(x, r_b) / r_norm**3)
        return self.factor * V

    def gravity(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        g = jnp.zeros(3, dtype=x.dtype)
        for r_b, gm_b in self._positions(time_gps, rot_earth, ephemerides):
            d = r_b - x
            g = g + gm_b * (d / jnp.linalg.norm(d) ** 3 - r_b / jnp.linalg.norm(r_b) ** 3)
        return self.factor * g

    def radial_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        g = self.gravity(time_gps, x, rot_earth, rotation, ephemerides)
        return jnp.dot(g, x) / jnp.linalg.norm(x)

    def gravity_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        T = jnp.zeros((3, 3), dtype=x.dtype)
        eye = jnp.eye(3, dtype=x.dtype)
        for r_b, gm_b in self._positions(time_gps, rot_earth, ephemerides):
            d = r_b - x
            dn = jnp.linalg.norm(d)
            T = T + gm_b * (3.0 * jnp.outer(d, d) / dn**5 - eye / dn**3)
        return self.factor * T
