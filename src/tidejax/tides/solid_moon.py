"""Body tides of the solid Moon raised by the Earth and the Sun.

The field refers to the lunar GM and radius and to a Moon-fixed frame:
the caller passes the rotation from the celestial frame to that frame as
``rot_earth``.  Positions of the tide-generating bodies are taken
relative to the Moon.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import jax.numpy as jnp
import numpy as np

from tidejax.config import get_dtype
from tidejax.constants import GM_MOON, R_MOON
from tidejax.ephemerides import Body
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide, tidal_coefficients
from tidejax.tides.astronomical import BODY_GM

logger = logging.getLogger(__name__)

MOON_LOVE_NUMBERS: tuple[float, ...] = (0.0, 0.0, 0.024059)
"""Lunar potential Love numbers k_n by degree, starting at degree 0."""


class SolidMoonTide(Tide):
    """Solid Moon tide.

    Args:
        love_numbers: Lunar Love numbers ``k_n`` by degree; the field's
            maximum degree is ``len(love_numbers) - 1``.
        bodies: Tide-generating bodies, from ``Body.EARTH`` and ``Body.SUN``.
        factor: Scale of the result.
    """

    def __init__(
        self,
        love_numbers: Sequence[float] = MOON_LOVE_NUMBERS,
        bodies: Sequence[Body] = (Body.EARTH, Body.SUN),
        factor: float = 1.0,
    ) -> None:
        if Body.MOON in bodies:
            raise ValueError("The Moon cannot raise a tide on itself")
        if len(love_numbers) < 1:
            raise ValueError("love_numbers must not be empty")
        self.love_numbers = np.asarray(love_numbers, dtype=np.float64)
        self.bodies = tuple(bodies)
        self.factor = factor

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        if ephemerides is None:
            raise ValueError("SolidMoonTide requires ephemerides")
        _float = get_dtype()
        rot_moon = jnp.asarray(rot_earth, dtype=_float)
        moon = ephemerides.position(time_gps, Body.MOON)
        positions = [
            rot_moon @ (ephemerides.position(time_gps, body) - moon) for body in self.bodies
        ]
        degree = self.love_numbers.shape[0] - 1
        cnm, snm = tidal_coefficients(
            positions, [BODY_GM[b] for b in self.bodies], degree, GM_MOON, R_MOON
        )
        k = jnp.asarray(self.love_numbers, dtype=_float)[:, None]
        field = SphericalHarmonics(GM_MOON, R_MOON, self.factor * k * cnm, self.factor * k * snm)
        return field.get(max_degree, min_degree, gm, r)
