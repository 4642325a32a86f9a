"""Solid Earth tide following the IERS Conventions 2010, Section 6.2.

Step 1 applies the frequency-independent anelastic Love numbers to the
tidal potential of the Sun and the Moon:

    dC_nm - i dS_nm = k_nm / (2n+1) * sum_j GM_j / GM * (R / r_j)^(n+1) P_nm e^(-i m lambda_j)

for degrees 2 and 3, and the degree-4 contribution of the degree-2 tide
through ``k+_2m``.  Step 2 adds frequency-dependent corrections from a
table of constituents with in-phase and out-of-phase amplitudes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np

from tidejax.config import get_dtype
from tidejax.constants import GM_EARTH, R_EARTH
from tidejax.doodson import Doodson
from tidejax.ephemerides import Body
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide, body_position_trf, tidal_coefficients
from tidejax.tides.astronomical import BODY_GM

logger = logging.getLogger(__name__)

K20 = 0.30190
"""Anelastic Love number k20."""

K21 = complex(0.29830, -0.00144)
"""Anelastic Love number k21."""

K22 = complex(0.30102, -0.00130)
"""Anelastic Love number k22."""

K3M = (0.093, 0.093, 0.093, 0.094)
"""Love numbers k30..k33."""

K_PLUS = (-0.00089, -0.00080, -0.00057)
"""Love numbers k+20..k+22 coupling degree 2 into degree 4."""

PERMANENT_C20 = 4.4228e-8 * -0.31460
"""Permanent tide C20 amplitude before multiplication with k20 (A0 * H0)."""


class FrequencyCorrection(NamedTuple):
    """Frequency-dependent correction of one constituent.

    Attributes:
        doodson: Constituent.
        m: Order of the corrected degree-2 coefficient.
        in_phase: In-phase amplitude [1e-12].
        out_of_phase: Out-of-phase amplitude [1e-12].
    """

    doodson: Doodson
    m: int
    in_phase: float
    out_of_phase: float


def load_frequency_corrections(filepath: str | Path) -> list[FrequencyCorrection]:
    """Load a step-2 correction table.

    Each data line holds ``<doodson> n m in_phase out_of_phase`` with the
    amplitudes in units of 1e-12 (IERS Tables 6.5a-c).  Text after ``#``
    is ignored.

    Args:
        filepath: Path to the table.

    Returns:
        List of corrections.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line is malformed or not of degree 2.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Earth tide correction file not found: {filepath}")

    corrections = []
    with open(filepath) as f:
        for number, line in enumerate(f, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 5:
                raise ValueError(f"{filepath}:{number}: expected 5 columns, got {len(parts)}")
            n, m = int(parts[1]), int(parts[2])
            if n != 2 or not 0 <= m <= 2:
                raise ValueError(f"{filepath}:{number}: only degree 2 corrections supported, got ({n}, {m})")
            corrections.append(FrequencyCorrection(Doodson(parts[0]), m, float(parts[3]), float(parts[4])))

    logger.info("Loaded %d earth tide frequency corrections from %s", len(corrections), filepath)
    return corrections


class EarthTide(Tide):
    """IERS 2010 solid Earth tide.

    Args:
        bodies: Tide-generating bodies.
        frequency_corrections: Step-2 corrections; empty disables step 2.
        remove_permanent_tide: Subtract the permanent part of C20
            (zero-tide instead of tide-free convention).
        factor: Scale of the result.
    """

    def __init__(
        self,
        bodies: Sequence[Body] = (Body.SUN, Body.MOON),
        frequency_corrections: Sequence[FrequencyCorrection] = (),
        remove_permanent_tide: bool = False,
        factor: float = 1.0,
    ) -> None:
        self.bodies = tuple(bodies)
        self.frequency_corrections = tuple(frequency_corrections)
        self.remove_permanent_tide = remove_permanent_tide
        self.factor = factor

        size = 5
        k_real = np.zeros((size, size))
        k_imag = np.zeros((size, size))
        k_real[2, 0] = K20
        k_real[2, 1], k_imag[2, 1] = K21.real, K21.imag
        k_real[2, 2], k_imag[2, 2] = K22.real, K22.imag
        k_real[3, :4] = K3M
        self._k_real = k_real
        self._k_imag = k_imag
        self._k_plus = np.asarray(K_PLUS)
        logger.debug("EarthTide with %d frequency corrections", len(self.frequency_corrections))

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        _float = get_dtype()
        positions = [body_position_trf(ephemerides, time_gps, b, rot_earth) for b in self.bodies]
        C, S = tidal_coefficients(positions, [BODY_GM[b] for b in self.bodies], 3)

        kr = jnp.asarray(self._k_real, dtype=_float)
        ki = jnp.asarray(self._k_imag, dtype=_float)
        pad = ((0, 1), (0, 1))
        C4, S4 = jnp.pad(C, pad), jnp.pad(S, pad)
        cnm = kr * C4 + ki * S4
        snm = kr * S4 - ki * C4

        # degree 4 from the degree-2 tide: k+_2m / 5 * (R / r)^3 P_2m
        k_plus = jnp.asarray(self._k_plus, dtype=_float)
        cnm = cnm.at[4, :3].set(k_plus * C[2, :3])
        snm = snm.at[4, :3].set(k_plus * S[2, :3])

        if self.remove_permanent_tide:
            cnm = cnm.at[2, 0].add(-PERMANENT_C20 * K20)

        for corr in self.frequency_corrections:
            theta = corr.doodson.argument(time_gps, rotation)
            ip, op = 1e-12 * corr.in_phase, 1e-12 * corr.out_of_phase
            if corr.m == 0:
                cnm = cnm.at[2, 0].add(ip * jnp.cos(theta) - op * jnp.sin(theta))
            elif corr.m == 1:
                cnm = cnm.at[2, 1].add(ip * jnp.sin(theta) + op * jnp.cos(theta))
                snm = snm.at[2, 1].add(ip * jnp.cos(theta) - op * jnp.sin(theta))
            else:
                cnm = cnm.at[2, 2].add(ip * jnp.cos(theta) - op * jnp.sin(theta))
                snm = snm.at[2, 2].add(-ip * jnp.sin(theta) - op * jnp.cos(theta))

        field = SphericalHarmonics(GM_EARTH, R_EARTH, self.factor * cnm, self.factor * snm)
        return field.get(max_degree, min_degree, gm, r)
