"""Tide component interface.

Every component provides its tide-generating potential as a
:class:`~tidejax.spherical_harmonics.SphericalHarmonics` field.  The
default functionals (potential, radial gradient, gravity, gravity
gradient and station deformation) evaluate that field; components with a
cheaper closed form override them.

All functionals share the evaluation context:

- ``time_gps``: :class:`~tidejax.epoch.Epoch` in GPS time,
- ``point``: position in the terrestrial frame [m],
- ``rot_earth``: rotation matrix from the celestial to the terrestrial frame,
- ``rotation``: :class:`~tidejax.earth_rotation.EarthRotation` provider,
- ``ephemerides``: :class:`~tidejax.ephemerides.Ephemerides` provider.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from tidejax.config import get_dtype
from tidejax.constants import GM_EARTH, R_EARTH
from tidejax.earth_rotation import EarthRotation
from tidejax.ephemerides import Body, Ephemerides
from tidejax.epoch import Epoch
from tidejax.spherical_harmonics import SphericalHarmonics, cnm_snm, deformation_matrix


def tidal_coefficients(
    positions: Sequence[ArrayLike],
    gms: Sequence[float],
    max_degree: int,
    gm: float = GM_EARTH,
    r: float = R_EARTH,
) -> tuple[Array, Array]:
    """Spherical harmonic expansion of the tidal potential of point masses.

    ``c_nm = sum_j GM_j / GM / (2n+1) * C_nm(r_j / R)`` (and likewise
    ``s_nm``), the addition theorem applied to ``GM_j / |r_j - x|``.

    Args:
        positions: Body positions in the frame of the field [m].
        gms: GM of each body [m^3/s^2].
        max_degree: Maximum degree.
        gm: Reference GM of the field.
        r: Reference radius of the field.

    Returns:
        ``(cnm, snm)`` arrays of shape ``(N+1, N+1)``.
    """
    _float = get_dtype()
    size = max_degree + 1
    cnm = jnp.zeros((size, size), dtype=_float)
    snm = jnp.zeros((size, size), dtype=_float)
    factor = jnp.asarray(1.0 / (2.0 * np.arange(size) + 1.0), dtype=_float)[:, None]
    for position, gm_body in zip(positions, gms):
        C, S = cnm_snm(jnp.asarray(position, dtype=_float) / r, max_degree)
        cnm = cnm + gm_body / gm * factor * C
        snm = snm + gm_body / gm * factor * S
    return cnm, snm


def body_position_trf(
    ephemerides: Ephemerides | None,
    time_gps: Epoch,
    body: Body,
    rot_earth: ArrayLike,
) -> Array:
    """Position of *body* rotated into the terrestrial frame.

    Raises:
        ValueError: If no ephemerides are given.
    """
    if ephemerides is None:
        raise ValueError(f"Ephemerides are required for the position of {body.name}")
    return jnp.asarray(rot_earth, dtype=get_dtype()) @ ephemerides.position(time_gps, body)


def require_rotation(rotation: EarthRotation | None, name: str) -> EarthRotation:
    """Return *rotation* or raise when a component needs it."""
    if rotation is None:
        raise ValueError(f"{name} requires an Earth rotation provider")
    return rotation


class Tide(abc.ABC):
    """Base class of tide components."""

    @abc.abstractmethod
    def spherical_harmonics(
        self,
        time_gps: Epoch,
        rot_earth: ArrayLike,
        rotation: EarthRotation | None,
        ephemerides: Ephemerides | None,
        max_degree: int | None = None,
        min_degree: int = 0,
        gm: float = 0.0,
        r: float = 0.0,
    ) -> SphericalHarmonics:
        """Tide-generating potential as a spherical harmonic field.

        Args:
            time_gps: Instant in GPS time.
            rot_earth: Celestial-to-terrestrial rotation matrix.
            rotation: Earth rotation provider.
            ephemerides: Ephemeris provider.
            max_degree: Maximum degree of the result; ``None`` keeps the
                component's native degree.
            min_degree: Degrees below this are zero.
            gm: Reference GM of the result; ``0`` keeps the native value.
            r: Reference radius of the result; ``0`` keeps the native value.

        Returns:
            SphericalHarmonics: The field.
        """

    def potential(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Tidal potential at *point* [m^2/s^2]."""
        return self.spherical_harmonics(time_gps, rot_earth, rotation, ephemerides).potential(point)

    def radial_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Radial derivative of the tidal potential at *point* [m/s^2]."""
        return self.spherical_harmonics(time_gps, rot_earth, rotation, ephemerides).radial_gradient(point)

    def gravity(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Tidal acceleration at *point* in the terrestrial frame [m/s^2]."""
        return self.spherical_harmonics(time_gps, rot_earth, rotation, ephemerides).gravity(point)

    def gravity_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Tidal gravity gradient tensor at *point* [1/s^2]."""
        return self.spherical_harmonics(time_gps, rot_earth, rotation, ephemerides).gravity_gradient(point)

    def deformation(
        self,
        time_gps: Epoch,
        point: ArrayLike,
        rot_earth: ArrayLike,
        rotation: EarthRotation | None,
        ephemerides: Ephemerides | None,
        gravity: float,
        hn: ArrayLike,
        ln: ArrayLike,
    ) -> Array:
        """Station displacement caused by the tide [m], shape ``(3,)``."""
        field = self.spherical_harmonics(time_gps, rot_earth, rotation, ephemerides)
        return field.deformation(point, gravity, hn, ln)

    def deformation_batch(
        self,
        times: Sequence[Epoch],
        points: ArrayLike,
        rot_earths: Sequence[ArrayLike],
        rotation: EarthRotation | None,
        ephemerides: Ephemerides | None,
        gravities: ArrayLike,
        hn: ArrayLike,
        ln: ArrayLike,
    ) -> Array:
        """Displacements of many stations at many epochs.

        The deformation matrix is built once from the first epoch's field
        and reused for every epoch.

        Args:
            times: Epochs in GPS time.
            points: Station positions [m], shape ``(K, 3)``.
            rot_earths: Celestial-to-terrestrial rotation for each epoch.
            rotation: Earth rotation provider.
            ephemerides: Ephemeris provider.
            gravities: Local gravity of each station [m/s^2], shape ``(K,)``.
            hn: Vertical load Love numbers per degree.
            ln: Horizontal load Love numbers per degree.

        Returns:
            Displacements of shape ``(K, T, 3)``.
        """
        points = jnp.atleast_2d(jnp.asarray(points, dtype=get_dtype()))
        k, count = points.shape[0], len(times)
        if k == 0 or count == 0:
            return jnp.zeros((k, count, 3), dtype=get_dtype())

        first = self.spherical_harmonics(times[0], rot_earths[0], rotation, ephemerides)
        if first.max_degree < 0:
            return jnp.zeros((k, count, 3), dtype=get_dtype())
        A = deformation_matrix(points, gravities, hn, ln, first.gm, first.r, first.max_degree)

        columns = []
        for time_gps, rot_earth in zip(times, rot_earths):
            field = self.spherical_harmonics(
                time_gps, rot_earth, rotation, ephemerides,
                first.max_degree, 0, first.gm, first.r,
            )
            columns.append(A @ field.x())
        disp = jnp.stack(columns).reshape(count, k, 3)
        return jnp.swapaxes(disp, 0, 1)
