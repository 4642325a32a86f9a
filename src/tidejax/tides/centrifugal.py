"""Centrifugal potential of the current Earth rotation.

With the angular velocity ``w`` in the terrestrial frame,

    V = (|w|^2 |x|^2 - (w . x)^2) / 2
    g = |w|^2 x - (w . x) w
    T = |w|^2 I - w w^T

On the reference sphere the potential expands into degree 0 and 2:
``c00 = R^3 |w|^2 / (3 GM)`` and ``c2m = -R^3 |w|^2 / (15 GM) C_2m(w / |w|)``.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import GM_EARTH, R_EARTH
from tidejax.spherical_harmonics import SphericalHarmonics, cnm_snm
from tidejax.tides._base import Tide, require_rotation


class Centrifugal(Tide):
    """Centrifugal potential from the Earth rotation axis.

    Args:
        factor: Scale of the result.
    """

    def __init__(self, factor: float = 1.0) -> None:
        self.factor = factor

    def _omega(self, time_gps, rotation) -> Array:
        rotation = require_rotation(rotation, "Centrifugal")
        return jnp.asarray(rotation.rotary_axis(time_gps), dtype=get_dtype())

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        omega = self._omega(time_gps, rotation)
        w2 = jnp.dot(omega, omega)
        C, S = cnm_snm(omega / jnp.sqrt(w2), 2)
        scale = R_EARTH**3 * w2 / GM_EARTH
        cnm = (-scale / 15.0 * C).at[0, 0].set(scale / 3.0).at[1, :].set(0.0)
        snm = (-scale / 15.0 * S).at[:2, :].set(0.0)
        field = SphericalHarmonics(GM_EARTH, R_EARTH, self.factor * cnm, self.factor * snm)
        return field.get(max_degree, min_degree, gm, r)

    def potential(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        omega = self._omega(time_gps, rotation)
        return self.factor * 0.5 * (jnp.dot(omega, omega) * jnp.dot(x, x) - jnp.dot(omega, x) ** 2)

    def gravity(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        omega = self._omega(time_gps, rotation)
        return self.factor * (jnp.dot(omega, omega) * x - jnp.dot(omega, x) * omega)

    def radial_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        x = jnp.asarray(point, dtype=get_dtype())
        g = self.gravity(time_gps, x, rot_earth, rotation, ephemerides)
        return jnp.dot(g, x) / jnp.linalg.norm(x)

    def gravity_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        omega = self._omega(time_gps, rotation)
        eye = jnp.eye(3, dtype=omega.dtype)
        return self.factor * (jnp.dot(omega, omega) * eye - jnp.outer(omega, omega))
