"""Earth rotation provider interface.

An :class:`EarthRotation` supplies the Earth orientation angles at a GPS
epoch.  The celestial-to-terrestrial rotation matrix and the rotation
axis in the terrestrial frame are derived from them:

    R(t) = W(xp, yp, s') @ Rz(ERA(UT1)) @ Q(X, Y, S)

Uses routines and computations derived from software provided by SOFA
under license. Does not itself constitute software provided by and/or
endorsed by SOFA.
"""

from __future__ import annotations

import abc
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from tidejax.config import get_dtype
from tidejax.constants import OMEGA_EARTH, SECONDS_PER_DAY
from tidejax.epoch import Epoch
from tidejax.rotations import Rz
from tidejax.sofa import c2ixys, era00, pom00
from tidejax.time_scales import gps_to_utc


class EarthOrientation(NamedTuple):
    """Earth orientation angles at one instant.

    Attributes:
        xp: Polar motion x-component [rad].
        yp: Polar motion y-component [rad].
        sp: TIO locator s' [rad].
        delta_ut: UT1-UTC [s].
        lod: Length of day excess [s].
        x: CIP X coordinate including the dX offset [rad].
        y: CIP Y coordinate including the dY offset [rad].
        s: CIO locator s [rad].
    """

    xp: Array
    yp: Array
    sp: Array
    delta_ut: Array
    lod: Array
    x: Array
    y: Array
    s: Array


class EarthRotation(abc.ABC):
    """Base class of Earth rotation providers.

    Subclasses implement :meth:`earth_orientation_parameter`; the rotation
    matrix and rotation axis are composed from it.
    """

    @abc.abstractmethod
    def earth_orientation_parameter(self, time_gps: Epoch) -> EarthOrientation:
        """Earth orientation angles at *time_gps*.

        Args:
            time_gps: Query instant in GPS time.

        Returns:
            EarthOrientation: ``(xp, yp, sp, delta_ut, lod, x, y, s)``.
        """

    def rotary_matrix(self, time_gps: Epoch) -> Array:
        """Rotation from the celestial to the terrestrial reference frame.

        Args:
            time_gps: Query instant in GPS time.

        Returns:
            3x3 rotation matrix (CRF -> TRF).
        """
        eop = self.earth_orientation_parameter(time_gps)
        dj1, dj2 = gps_to_utc(time_gps).jd_parts()
        era = era00(jnp.asarray(dj1, dtype=get_dtype()), dj2 + eop.delta_ut / SECONDS_PER_DAY)
        q = c2ixys(eop.x, eop.y, eop.s)
        w = pom00(eop.xp, eop.yp, eop.sp)
        return w @ Rz(era) @ q

    def rotary_axis(self, time_gps: Epoch) -> Array:
        """Angular velocity vector of the Earth in the terrestrial frame.

        The axis is the CIP, ``W @ e_z``; the rate is the nominal rate
        reduced by the excess length of day.

        Args:
            time_gps: Query instant in GPS time.

        Returns:
            Angular velocity [rad/s], shape ``(3,)``.
        """
        eop = self.earth_orientation_parameter(time_gps)
        w = pom00(eop.xp, eop.yp, eop.sp)
        rate = OMEGA_EARTH * (1.0 - eop.lod / SECONDS_PER_DAY)
        return rate * w[:, 2]
