import jax.numpy as jnp
import numpy as np
import polars as pl
import pytest

from tidejax.config import set_dtype
from tidejax.earth_rotation import EarthOrientation, EarthRotation
from tidejax.ephemerides import Body, Ephemerides


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    With pytest-xdist, each worker process starts fresh; a test that
    switches to float32 must not leak into the next one.
    """
    set_dtype(jnp.float64)


class StaticRotation(EarthRotation):
    """Earth rotation with fixed orientation angles."""

    def __init__(self, xp=0.0, yp=0.0, delta_ut=0.0, lod=0.0):
        self.values = EarthOrientation(
            xp=jnp.asarray(xp),
            yp=jnp.asarray(yp),
            sp=jnp.asarray(0.0),
            delta_ut=jnp.asarray(delta_ut),
            lod=jnp.asarray(lod),
            x=jnp.asarray(0.0),
            y=jnp.asarray(0.0),
            s=jnp.asarray(0.0),
        )

    def earth_orientation_parameter(self, time_gps):
        return self.values


class FixedEphemerides(Ephemerides):
    """Ephemerides returning fixed positions."""

    def __init__(self, positions):
        self.positions = {body: jnp.asarray(p, dtype=jnp.float64) for body, p in positions.items()}

    def position(self, time_gps, body):
        return self.positions.get(body, jnp.zeros(3))


@pytest.fixture
def static_rotation() -> StaticRotation:
    """Rotation with a pole offset of 0.2 / 0.3 arcsec."""
    arcsec = np.pi / 180.0 / 3600.0
    return StaticRotation(xp=0.2 * arcsec, yp=0.3 * arcsec)


@pytest.fixture
def fixed_ephemerides() -> FixedEphemerides:
    """Sun and Moon at typical distances in non-degenerate directions."""
    return FixedEphemerides({
        Body.SUN: [1.2e11, 8.0e10, 3.0e10],
        Body.MOON: [-2.5e8, 2.8e8, 1.1e8],
    })


@pytest.fixture
def three_day_table() -> pl.DataFrame:
    """EOP table of three daily samples with UT1-UTC 0.1, 0.2, 0.3 s."""
    return pl.DataFrame({
        "mjd": [58000.0, 58001.0, 58002.0],
        "pm_x": [0.1, 0.1, 0.1],
        "pm_y": [0.3, 0.3, 0.3],
        "ut1_utc": [0.1, 0.2, 0.3],
        "lod": [0.001, 0.001, 0.001],
        "dX": [0.0, 0.0, 0.0],
        "dY": [0.0, 0.0, 0.0],
    })


@pytest.fixture
def make_rotation():
    """Factory of :class:`StaticRotation` instances."""
    return StaticRotation
