"""Ocean pole tide (IERS Conventions 2010, Section 6.5).

The self-consistent equilibrium model of Desai (2002) gives

    dC_nm = R_n [A_R (m1 g_R + m2 g_I) + A_I (m2 g_R - m1 g_I)]
    dS_nm = R_n [B_R (m1 g_R + m2 g_I) + B_I (m2 g_R - m1 g_I)]
    R_n = Omega^2 a^4 / GM * 4 pi G rho_w / g_e * (1 + k'_n) / (2n+1)

with the ocean pole tide coefficients ``A``, ``B`` read from a file and
``g = 0.6870 + 0.0036i``.  Without a coefficient file the degree-2 closed
form of IERS Eq. 6.24 is used.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np

from tidejax.config import get_dtype
from tidejax.constants import (
    G_NEWTON,
    GM_EARTH,
    GRAVITY_EQUATOR,
    OMEGA_EARTH,
    R_EARTH,
    RAD2AS,
    RHO_SEA_WATER,
)
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide, require_rotation
from tidejax.tides.pole import MEAN_POLE_MODELS, wobble

logger = logging.getLogger(__name__)

LOAD_LOVE_NUMBERS: tuple[float, ...] = (0.0, 0.0, -0.3075, -0.195, -0.132, -0.1032, -0.0892)
"""Load Love numbers k'_n by degree, starting at degree 0."""


class OceanPoleCoefficients(NamedTuple):
    """Desai ocean pole tide coefficients, arrays of shape ``(N+1, N+1)``."""

    a_real: np.ndarray
    b_real: np.ndarray
    a_imag: np.ndarray
    b_imag: np.ndarray

    @property
    def max_degree(self) -> int:
        return self.a_real.shape[0] - 1


def read_ocean_pole_coefficients(filepath: str | Path, max_degree: int | None = None) -> OceanPoleCoefficients:
    """Load an ocean pole tide coefficient file.

    Data lines hold ``n m A_R B_R A_I B_I``; lines that do not start with
    two integers (headers) are skipped.

    Args:
        filepath: Path to the coefficient file.
        max_degree: Drop degrees above this.

    Returns:
        OceanPoleCoefficients.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds no coefficients.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Ocean pole tide file not found: {filepath}")

    rows = []
    with open(filepath) as f:
        for line in f:
            parts = line.split("#", 1)[0].split()
            if len(parts) < 6 or not (parts[0].isdigit() and parts[1].isdigit()):
                continue
            rows.append((int(parts[0]), int(parts[1]), *(float(p) for p in parts[2:6])))

    if not rows:
        raise ValueError(f"No ocean pole tide coefficients found in {filepath}")

    n_max = max(row[0] for row in rows)
    if max_degree is not None:
        n_max = min(n_max, max_degree)
    arrays = [np.zeros((n_max + 1, n_max + 1)) for _ in range(4)]
    for n, m, *values in rows:
        if n > n_max or m > n:
            continue
        for array, value in zip(arrays, values):
            array[n, m] = value

    logger.info("Loaded ocean pole tide coefficients up to degree %d from %s", n_max, filepath)
    return OceanPoleCoefficients(*arrays)


class OceanPoleTide(Tide):
    """Ocean pole tide.

    Args:
        coefficients: Desai coefficients; ``None`` uses the degree-2
            closed form.
        load_love_numbers: Load Love numbers ``k'_n`` by degree.  Degrees
            of the coefficients beyond this list are dropped.
        gamma: Ocean pole tide admittance ``g_R + i g_I``.
        mean_pole_model: Mean pole model of the wobble variables.
        factor: Scale of the result.
    """

    def __init__(
        self,
        coefficients: OceanPoleCoefficients | None = None,
        load_love_numbers: Sequence[float] = LOAD_LOVE_NUMBERS,
        gamma: complex = complex(0.6870, 0.0036),
        mean_pole_model: str = "iers2010",
        factor: float = 1.0,
    ) -> None:
        if mean_pole_model not in MEAN_POLE_MODELS:
            raise ValueError(
                f"Unknown mean pole model {mean_pole_model!r}. Must be one of {MEAN_POLE_MODELS}"
            )
        self.gamma = complex(gamma)
        self.mean_pole_model = mean_pole_model
        self.factor = factor
        self.coefficients = None

        if coefficients is not None:
            max_degree = coefficients.max_degree
            if max_degree >= len(load_love_numbers):
                logger.warning(
                    "Ocean pole tide truncated from degree %d to %d: no load Love numbers beyond",
                    max_degree, len(load_love_numbers) - 1,
                )
                max_degree = len(load_love_numbers) - 1
            size = max_degree + 1
            n = np.arange(size, dtype=np.float64)
            k = np.asarray(load_love_numbers[:size], dtype=np.float64)
            r_n = (
                OMEGA_EARTH**2 * R_EARTH**4 / GM_EARTH
                * 4.0 * math.pi * G_NEWTON * RHO_SEA_WATER / GRAVITY_EQUATOR
                * (1.0 + k) / (2.0 * n + 1.0)
            )[:, None]
            self.coefficients = OceanPoleCoefficients(
                *(r_n * a[:size, :size] for a in coefficients)
            )

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        rotation = require_rotation(rotation, "OceanPoleTide")
        m1, m2 = wobble(time_gps, rotation, self.mean_pole_model)
        _float = get_dtype()

        if self.coefficients is None:
            m1, m2 = m1 * RAD2AS, m2 * RAD2AS
            cnm = jnp.zeros((3, 3), dtype=_float).at[2, 1].set(-2.1778e-10 * (m1 - 0.01724 * m2))
            snm = jnp.zeros((3, 3), dtype=_float).at[2, 1].set(-1.7232e-10 * (m2 - 0.03365 * m1))
        else:
            gr, gi = self.gamma.real, self.gamma.imag
            a_r, b_r, a_i, b_i = (jnp.asarray(a, dtype=_float) for a in self.coefficients)
            real = m1 * gr + m2 * gi
            imag = m2 * gr - m1 * gi
            cnm = a_r * real + a_i * imag
            snm = b_r * real + b_i * imag

        field = SphericalHarmonics(GM_EARTH, R_EARTH, self.factor * cnm, self.factor * snm)
        return field.get(max_degree, min_degree, gm, r)
