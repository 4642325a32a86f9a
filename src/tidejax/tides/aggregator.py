"""Sum of tide components.

:class:`Tides` evaluates every component at the same context and adds
the results.  Components are kept in configuration order; repeated
components contribute repeatedly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from tidejax.config import get_dtype
from tidejax.earth_rotation import EarthRotation
from tidejax.ephemerides import Ephemerides
from tidejax.epoch import Epoch
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide


class Tides:
    """Aggregator of tide components.

    Args:
        tides: Components in evaluation order.

    Examples:
        ```python
        from tidejax.tides import Centrifugal, PoleTide, Tides
        tides = Tides([Centrifugal(), PoleTide()])
        a = tides.acceleration(time_gps, point, rot_earth, rotation, ephemerides)
        ```
    """

    def __init__(self, tides: Iterable[Tide] = ()) -> None:
        self.tides: list[Tide] = list(tides)

    @classmethod
    def from_config(cls, configs: Iterable[Any | Mapping[str, Any]]) -> Tides:
        """Create the aggregator from tide configs or tagged mappings."""
        from tidejax.tides.factory import create_tides

        return create_tides(configs)

    def __len__(self) -> int:
        return len(self.tides)

    def __iter__(self) -> Iterator[Tide]:
        return iter(self.tides)

    def potential(
        self,
        time_gps: Epoch,
        point: ArrayLike,
        rot_earth: ArrayLike,
        rotation: EarthRotation | None,
        ephemerides: Ephemerides | None,
    ) -> Array:
        """Summed tidal potential [m^2/s^2]."""
        V = jnp.zeros((), dtype=get_dtype())
        for tide in self.tides:
            V = V + tide.potential(time_gps, point, rot_earth, rotation, ephemerides)
        return V

    def radial_gradient(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Summed radial derivative of the potential [m/s^2]."""
        dVdr = jnp.zeros((), dtype=get_dtype())
        for tide in self.tides:
            dVdr = dVdr + tide.radial_gradient(time_gps, point, rot_earth, rotation, ephemerides)
        return dVdr

    def acceleration(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Summed tidal acceleration in the terrestrial frame [m/s^2]."""
        g = jnp.zeros(3, dtype=get_dtype())
        for tide in self.tides:
            g = g + tide.gravity(time_gps, point, rot_earth, rotation, ephemerides)
        return g

    def gradient_tensor(self, time_gps, point, rot_earth, rotation, ephemerides) -> Array:
        """Summed gravity gradient tensor [1/s^2]."""
        T = jnp.zeros((3, 3), dtype=get_dtype())
        for tide in self.tides:
            T = T + tide.gravity_gradient(time_gps, point, rot_earth, rotation, ephemerides)
        return T

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
        """Summed station displacement [m], shape ``(3,)``."""
        disp = jnp.zeros(3, dtype=get_dtype())
        for tide in self.tides:
            disp = disp + tide.deformation(
                time_gps, point, rot_earth, rotation, ephemerides, gravity, hn, ln
            )
        return disp

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
        """Summed displacements of many stations at many epochs.

        Returns:
            Displacements of shape ``(K, T, 3)``.
        """
        k = jnp.atleast_2d(jnp.asarray(points)).shape[0]
        disp = jnp.zeros((k, len(times), 3), dtype=get_dtype())
        for tide in self.tides:
            disp = disp + tide.deformation_batch(
                times, points, rot_earths, rotation, ephemerides, gravities, hn, ln
            )
        return disp

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
        """Sum of the component fields, in the first component's reference.

        An empty aggregator returns an empty field.
        """
        if not self.tides:
            return SphericalHarmonics()
        field = self.tides[0].spherical_harmonics(
            time_gps, rot_earth, rotation, ephemerides, max_degree, min_degree, gm, r
        )
        for tide in self.tides[1:]:
            field = field + tide.spherical_harmonics(
                time_gps, rot_earth, rotation, ephemerides, max_degree, min_degree, gm, r
            )
        return field
