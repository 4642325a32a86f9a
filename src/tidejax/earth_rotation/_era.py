"""Earth rotation about the celestial pole by the Earth Rotation Angle only."""

from __future__ import annotations

import jax.numpy as jnp

from tidejax.config import get_dtype
from tidejax.earth_rotation._base import EarthOrientation, EarthRotation
from tidejax.epoch import Epoch


class EarthRotationEra(EarthRotation):
    """Simplified rotation without precession, nutation and polar motion.

    Args:
        ut1_utc: Constant UT1-UTC [s].
    """

    def __init__(self, ut1_utc: float = 0.0) -> None:
        self.ut1_utc = float(ut1_utc)

    def earth_orientation_parameter(self, time_gps: Epoch) -> EarthOrientation:
        dtype = get_dtype()
        zero = jnp.zeros((), dtype=dtype)
        return EarthOrientation(
            xp=zero,
            yp=zero,
            sp=zero,
            delta_ut=jnp.asarray(self.ut1_utc, dtype=dtype),
            lod=zero,
            x=zero,
            y=zero,
            s=zero,
        )
