"""Tides with a harmonic representation, e.g. ocean tide models.

Each constituent ``f`` carries cosine and sine coefficient sets; the
potential field at time t is

    (c, s) = factor * sum_f cos(theta_f) (c_cos, s_cos) + sin(theta_f) (c_sin, s_sin)

with ``theta_f`` the Doodson argument of the constituent.

Coefficient files use a GFC-like header (``earth_gravity_constant``,
``radius``, ``max_degree``, ``end_of_head``) followed by lines
``<doodson> n m c_cos s_cos c_sin s_sin``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np

from tidejax.config import get_dtype
from tidejax.doodson import Doodson, doodson_arguments
from tidejax.spherical_harmonics import SphericalHarmonics
from tidejax.tides._base import Tide

logger = logging.getLogger(__name__)


class DoodsonHarmonic(NamedTuple):
    """Harmonic tide model.

    Attributes:
        gm: Reference GM [m^3/s^2].
        r: Reference radius [m].
        doodson: Constituents.
        cnm_cos: Cosine coefficients of the in-phase part, shape ``(F, N+1, N+1)``.
        snm_cos: Sine coefficients of the in-phase part.
        cnm_sin: Cosine coefficients of the quadrature part.
        snm_sin: Sine coefficients of the quadrature part.
    """

    gm: float
    r: float
    doodson: tuple[Doodson, ...]
    cnm_cos: np.ndarray
    snm_cos: np.ndarray
    cnm_sin: np.ndarray
    snm_sin: np.ndarray

    @property
    def max_degree(self) -> int:
        return self.cnm_cos.shape[1] - 1


def read_doodson_harmonic(filepath: str | Path, max_degree: int | None = None) -> DoodsonHarmonic:
    """Load a harmonic tide model file.

    Args:
        filepath: Path to the coefficient file.
        max_degree: Truncate to this degree.

    Returns:
        DoodsonHarmonic: The model, constituents in order of appearance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the header is incomplete or a data line is malformed.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Tide model file not found: {filepath}")

    gm = 0.0
    radius = 0.0
    n_max = -1
    in_header = True
    entries = []
    with open(filepath) as f:
        lines = iter(f)
        for line in lines:
            line = line.strip()
            if line.startswith("end_of_head"):
                in_header = False
                break
            parts = line.split()
            if len(parts) < 2:
                continue
            key = parts[0].lower()
            if key == "earth_gravity_constant":
                gm = float(parts[-1])
            elif key == "radius":
                radius = float(parts[-1])
            elif key == "max_degree":
                n_max = int(parts[-1])

        if in_header:
            raise ValueError("Tide model file missing 'end_of_head' marker.")
        if gm == 0.0 or radius == 0.0 or n_max < 0:
            raise ValueError(
                "Tide model header needs 'earth_gravity_constant', 'radius' and 'max_degree'."
            )

        for number, line in enumerate(lines, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 7:
                raise ValueError(f"{filepath}: data line {number}: expected 7 columns, got {len(parts)}")
            entries.append((Doodson(parts[0]), int(parts[1]), int(parts[2]), [float(p) for p in parts[3:]]))

    if max_degree is not None:
        n_max = min(n_max, max_degree)

    doodsons: list[Doodson] = []
    for d, _, _, _ in entries:
        if d not in doodsons:
            doodsons.append(d)
    index = {d: i for i, d in enumerate(doodsons)}

    shape = (len(doodsons), n_max + 1, n_max + 1)
    arrays = [np.zeros(shape) for _ in range(4)]
    for d, n, m, values in entries:
        if n > n_max or m > n:
            continue
        for array, value in zip(arrays, values):
            array[index[d], n, m] = value
    for array in (arrays[1], arrays[3]):
        array[:, :, 0] = 0.0

    logger.info("Loaded %d constituents up to degree %d from %s", len(doodsons), n_max, filepath)
    return DoodsonHarmonic(gm, radius, tuple(doodsons), *arrays)


class DoodsonHarmonicTide(Tide):
    """Harmonic tide model evaluated with Doodson arguments.

    Args:
        model: Harmonic coefficients.
        constituents: Restrict to these constituents (names or Doodson
            numbers).  ``None`` uses all.
        min_degree: Degrees below this are zero.
        max_degree: Truncate the model to this degree.
        factor: Scale of the result.

    Raises:
        ValueError: If a requested constituent is not in the model.
    """

    def __init__(
        self,
        model: DoodsonHarmonic,
        constituents: Sequence[str] | None = None,
        min_degree: int = 0,
        max_degree: int | None = None,
        factor: float = 1.0,
    ) -> None:
        selected = list(range(len(model.doodson)))
        if constituents is not None:
            wanted = [Doodson(c) for c in constituents]
            missing = [str(d) for d in wanted if d not in model.doodson]
            if missing:
                raise ValueError(f"Constituents {missing} not in tide model")
            selected = [i for i, d in enumerate(model.doodson) if d in wanted]

        self.model = model
        self.doodson = tuple(model.doodson[i] for i in selected)
        self.min_degree = min_degree
        self.max_degree = model.max_degree if max_degree is None else min(max_degree, model.max_degree)
        self.factor = factor

        size = self.max_degree + 1
        _float = get_dtype()
        self._coefficients = [
            jnp.asarray(a[selected, :size, :size], dtype=_float)
            for a in (model.cnm_cos, model.snm_cos, model.cnm_sin, model.snm_sin)
        ]
        self._multipliers = jnp.asarray([d.multipliers for d in self.doodson], dtype=_float)
        logger.debug("DoodsonHarmonicTide with constituents %s", [str(d) for d in self.doodson])

    def spherical_harmonics(
        self, time_gps, rot_earth, rotation, ephemerides,
        max_degree=None, min_degree=0, gm=0.0, r=0.0,
    ) -> SphericalHarmonics:
        cc, sc, cs, ss = self._coefficients
        if len(self.doodson) == 0:
            cnm = jnp.zeros(cc.shape[1:], dtype=cc.dtype)
            snm = cnm
        else:
            theta = self._multipliers @ doodson_arguments(time_gps, rotation)
            cos_t = jnp.cos(theta)[:, None, None]
            sin_t = jnp.sin(theta)[:, None, None]
            cnm = jnp.sum(cos_t * cc + sin_t * cs, axis=0)
            snm = jnp.sum(cos_t * sc + sin_t * ss, axis=0)

        field = SphericalHarmonics(self.model.gm, self.model.r, self.factor * cnm, self.factor * snm)
        field = field.get(self.max_degree, self.min_degree)
        return field.get(max_degree, min_degree, gm, r)
