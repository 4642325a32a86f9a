"""Spherical harmonic potential fields.

A :class:`SphericalHarmonics` field holds fully normalized coefficients
``c_nm``, ``s_nm`` together with the reference constants GM and R.  Its
potential at a terrestrial point ``x`` is

    V(x) = GM / R * sum_nm  c_nm C_nm(x / R) + s_nm S_nm(x / R)

where ``C_nm`` and ``S_nm`` are the fully normalized exterior solid
harmonics computed by :func:`cnm_snm`.  Gravity and the gravity gradient
are evaluated by differentiating in coefficient space: the Cartesian
derivative of a degree-n solid harmonic is a combination of degree n+1
solid harmonics.

Coefficient vectors (:meth:`SphericalHarmonics.x`) are ordered by degree:
``c_n0 -> n*n``, ``c_nm -> n*n + 2m - 1``, ``s_nm -> n*n + 2m``.

Loops run over degree and order as static Python ints, so a fixed
maximum degree traces into a single JAX computation.

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012, p. 56-68.
"""

from __future__ import annotations

import functools
import logging
import math
from pathlib import Path

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from tidejax.config import get_dtype
from tidejax.constants import GM_EARTH, R_EARTH

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Index and weight tables
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def _coefficient_index(max_degree: int):
    """Degree / order pairs and their positions in the coefficient vector.

    Returns:
        Tuple ``(n_c, m_c, col_c, n_s, m_s, col_s)`` of integer arrays for
        the cosine coefficients (all ``m <= n``) and the sine coefficients
        (``1 <= m <= n``).
    """
    n_c, m_c, col_c, n_s, m_s, col_s = [], [], [], [], [], []
    for n in range(max_degree + 1):
        n_c.append(n)
        m_c.append(0)
        col_c.append(n * n)
        for m in range(1, n + 1):
            n_c.append(n)
            m_c.append(m)
            col_c.append(n * n + 2 * m - 1)
            n_s.append(n)
            m_s.append(m)
            col_s.append(n * n + 2 * m)
    return tuple(np.array(a, dtype=np.int64) for a in (n_c, m_c, col_c, n_s, m_s, col_s))


@functools.lru_cache(maxsize=None)
def _gradient_weights(max_degree: int):
    """Recurrence weights of the Cartesian gradient of solid harmonics.

    For a degree-n harmonic the derivative involves the degree n+1
    harmonics of orders m-1 (``wm1``), m (``wm0``) and m+1 (``wp1``),
    all scaled by ``f = sqrt((2n+1) / (2n+3)) / 2``.  The zonal column
    folds the factor 2 of its ``m+1`` term into ``wp1``.

    Returns:
        Tuple ``(f, wm1, wm0, wp1)`` of arrays, ``f`` with shape ``(N+1, 1)``
        and the weights with shape ``(N+1, N+1)``; entries with ``m > n``
        are zero.
    """
    n = np.arange(max_degree + 1, dtype=np.float64)[:, None]
    m = np.arange(max_degree + 1, dtype=np.float64)[None, :]
    valid = m <= n

    f = 0.5 * np.sqrt((2.0 * n + 1.0) / (2.0 * n + 3.0))
    wm1 = np.sqrt(np.clip((n - m + 1.0) * (n - m + 2.0), 0.0, None))
    wm1 = np.where(m == 1, wm1 * math.sqrt(2.0), wm1)
    wm1 = np.where((m >= 1) & valid, wm1, 0.0)
    wm0 = np.where(valid, np.sqrt(np.clip((n - m + 1.0) * (n + m + 1.0), 0.0, None)), 0.0)
    wp1 = np.sqrt((n + m + 1.0) * (n + m + 2.0))
    wp1 = np.where(m == 0, 2.0 * np.sqrt((n + 1.0) * (n + 2.0) / 2.0), wp1)
    wp1 = np.where(valid, wp1, 0.0)
    return f, wm1, wm0, wp1


# ---------------------------------------------------------------------------
# Solid harmonics
# ---------------------------------------------------------------------------


def cnm_snm(points: ArrayLike, max_degree: int) -> tuple[Array, Array]:
    """Fully normalized exterior solid harmonics of unit-scaled points.

    ``C_nm(p) = P_nm(sin(phi)) cos(m lambda) / |p|^(n+1)`` and likewise
    ``S_nm`` with ``sin(m lambda)``, computed by the standard
    degree / order recurrences.

    Args:
        points: Point(s) scaled by the reference radius, shape ``(3,)`` or
            ``(K, 3)``.
        max_degree: Maximum degree.

    Returns:
        ``(C, S)`` lower-triangular arrays of shape ``(N+1, N+1)``, or
        ``(K, N+1, N+1)`` for a batch of points.  ``S[:, 0]`` is zero.

    Examples:
        ```python
        import jax.numpy as jnp
        from tidejax.spherical_harmonics import cnm_snm
        C, S = cnm_snm(jnp.array([0.0, 0.0, 1.0]), 2)
        float(C[2, 0])  # sqrt(5)
        ```
    """
    p = jnp.asarray(points, dtype=get_dtype())
    single = p.ndim == 1
    p = jnp.atleast_2d(p)
    x, y, z = p[:, 0], p[:, 1], p[:, 2]
    inv_r2 = 1.0 / (x * x + y * y + z * z)

    zero = jnp.zeros_like(x)
    size = max_degree + 1
    C = [[zero] * size for _ in range(size)]
    S = [[zero] * size for _ in range(size)]
    C[0][0] = jnp.sqrt(inv_r2)

    for m in range(size):
        if m > 0:
            w = math.sqrt(3.0) if m == 1 else math.sqrt((2.0 * m + 1.0) / (2.0 * m))
            c_prev, s_prev = C[m - 1][m - 1], S[m - 1][m - 1]
            C[m][m] = w * (x * c_prev - y * s_prev) * inv_r2
            S[m][m] = w * (y * c_prev + x * s_prev) * inv_r2
        if m < max_degree:
            w = math.sqrt(2.0 * m + 3.0) * z * inv_r2
            C[m + 1][m] = w * C[m][m]
            S[m + 1][m] = w * S[m][m]
        for n in range(m + 2, size):
            a = math.sqrt((2.0 * n - 1.0) * (2.0 * n + 1.0) / ((n - m) * (n + m)))
            b = math.sqrt(
                (2.0 * n + 1.0) * (n - m - 1.0) * (n + m - 1.0)
                / ((2.0 * n - 3.0) * (n + m) * (n - m))
            )
            C[n][m] = (a * z * C[n - 1][m] - b * C[n - 2][m]) * inv_r2
            S[n][m] = (a * z * S[n - 1][m] - b * S[n - 2][m]) * inv_r2

    cnm = jnp.stack([jnp.stack(row, axis=-1) for row in C], axis=-2)
    snm = jnp.stack([jnp.stack(row, axis=-1) for row in S], axis=-2)
    if single:
        return cnm[0], snm[0]
    return cnm, snm


def _gradient_coefficients(cnm: Array, snm: Array):
    """Coefficients of the Cartesian derivatives of a unit-scaled field.

    Args:
        cnm: Cosine coefficients, shape ``(N+1, N+1)``.
        snm: Sine coefficients, shape ``(N+1, N+1)``.

    Returns:
        Three ``(c, s)`` pairs for the x, y and z derivatives, each of
        degree N+1.
    """
    size = cnm.shape[0]
    f, wm1, wm0, wp1 = (jnp.asarray(w, dtype=cnm.dtype) for w in _gradient_weights(size - 1))

    ac, bc, zc = f * wm1 * cnm, f * wp1 * cnm, 2.0 * f * wm0 * cnm
    as_, bs, zs = f * wm1 * snm, f * wp1 * snm, 2.0 * f * wm0 * snm

    zeros = jnp.zeros((size + 1, size + 1), dtype=cnm.dtype)

    # degree n -> n+1; order m -> m-1, m, m+1
    cx = zeros.at[1:, : size - 1].add(ac[:, 1:]).at[1:, 1:].add(-bc)
    sx = zeros.at[1:, : size - 1].add(as_[:, 1:]).at[1:, 1:].add(-bs)
    cy = zeros.at[1:, : size - 1].add(as_[:, 1:]).at[1:, 1:].add(bs)
    sy = zeros.at[1:, : size - 1].add(-ac[:, 1:]).at[1:, 1:].add(-bc)
    cz = zeros.at[1:, :size].add(-zc)
    sz = zeros.at[1:, :size].add(-zs)

    return (cx, sx.at[:, 0].set(0.0)), (cy, sy.at[:, 0].set(0.0)), (cz, sz.at[:, 0].set(0.0))


def _evaluate(cnm: Array, snm: Array, C: Array, S: Array) -> Array:
    """``sum_nm c_nm C_nm + s_nm S_nm``."""
    return jnp.sum(cnm * C) + jnp.sum(snm * S)


def _pad_love_numbers(values: ArrayLike | None, max_degree: int) -> np.ndarray:
    """Love numbers per degree, zero for missing degrees."""
    padded = np.zeros(max_degree + 1, dtype=np.float64)
    if values is None:
        return padded
    values = np.asarray(values, dtype=np.float64).ravel()[: max_degree + 1]
    padded[: values.shape[0]] = values
    return padded


def deformation_matrix(
    points: ArrayLike,
    gravity: ArrayLike,
    hn: ArrayLike,
    ln: ArrayLike,
    gm: float,
    r: float,
    max_degree: int,
) -> Array:
    """Linear operator from a coefficient vector to station displacements.

    Row ``3k + i`` holds component ``i`` of the displacement of point
    ``k``; column ``j`` corresponds to entry ``j`` of
    :meth:`SphericalHarmonics.x`.  For the potential ``V_n`` of one
    coefficient the displacement is

        u = hn[n] / g * V_n * up + ln[n] / g * (grad - (grad . up) up)

    with ``up = x / |x|`` and ``grad`` the gradient scaled to the
    reference sphere.  The matrix depends only on geometry, Love numbers
    and reference constants, so it can be reused for many epochs.

    Args:
        points: Terrestrial points [m], shape ``(K, 3)``.
        gravity: Local gravity at each point [m/s^2], shape ``(K,)``.
        hn: Vertical load Love numbers per degree.
        ln: Horizontal load Love numbers per degree.
        gm: Reference GM [m^3/s^2].
        r: Reference radius [m].
        max_degree: Maximum degree of the coefficient vector.

    Returns:
        Matrix of shape ``(3K, (N+1)^2)``.
    """
    _float = get_dtype()
    pts = jnp.atleast_2d(jnp.asarray(points, dtype=_float))
    g = jnp.atleast_1d(jnp.asarray(gravity, dtype=_float))
    k = pts.shape[0]
    size = max_degree + 1

    h = jnp.asarray(_pad_love_numbers(hn, max_degree), dtype=_float)[None, :, None, None]
    l = jnp.asarray(_pad_love_numbers(ln, max_degree), dtype=_float)[None, :, None, None]
    inv_g = (1.0 / g)[:, None, None, None]

    up = pts / jnp.linalg.norm(pts, axis=1, keepdims=True)
    up4 = up[:, None, None, :]

    C, S = cnm_snm(pts / r, max_degree + 1)
    f, wm1, wm0, wp1 = (jnp.asarray(w, dtype=_float) for w in _gradient_weights(max_degree))
    scale = gm / r * f

    # degree n+1 harmonics at orders m-1, m, m+1
    C1, S1 = C[:, 1:, :], S[:, 1:, :]
    pad = jnp.zeros((k, size, 1), dtype=_float)
    c_m1 = wm1 * jnp.concatenate([pad, C1[:, :, : size - 1]], axis=2)
    s_m1 = wm1 * jnp.concatenate([pad, S1[:, :, : size - 1]], axis=2)
    c_m0 = wm0 * C1[:, :, :size]
    s_m0 = wm0 * S1[:, :, :size]
    c_p1 = wp1 * C1[:, :, 1:]
    s_p1 = wp1 * S1[:, :, 1:]

    grad_cos = scale[..., None] * jnp.stack([c_m1 - c_p1, -s_m1 - s_p1, -2.0 * c_m0], axis=-1)
    grad_sin = scale[..., None] * jnp.stack([s_m1 - s_p1, c_m1 + c_p1, -2.0 * s_m0], axis=-1)
    v_cos = (gm / r * C[:, :size, :size])[..., None]
    v_sin = (gm / r * S[:, :size, :size])[..., None]

    def _displacement(v, grad):
        radial = jnp.sum(grad * up4, axis=-1, keepdims=True)
        return inv_g * (h * v * up4 + l * (grad - radial * up4))

    disp_cos = _displacement(v_cos, grad_cos)
    disp_sin = _displacement(v_sin, grad_sin)

    n_c, m_c, col_c, n_s, m_s, col_s = _coefficient_index(max_degree)
    A = jnp.zeros((k, 3, size * size), dtype=_float)
    A = A.at[:, :, col_c].set(jnp.swapaxes(disp_cos[:, n_c, m_c, :], 1, 2))
    A = A.at[:, :, col_s].set(jnp.swapaxes(disp_sin[:, n_s, m_s, :], 1, 2))
    return A.reshape(3 * k, size * size)


# ---------------------------------------------------------------------------
# Field
# ---------------------------------------------------------------------------


class SphericalHarmonics:
    """Potential field in fully normalized spherical harmonics.

    Args:
        gm: Reference GM [m^3/s^2].
        r: Reference radius [m].
        cnm: Cosine coefficients, square lower-triangular array of shape
            ``(N+1, N+1)``.  ``None`` gives an empty field.
        snm: Sine coefficients, same shape as *cnm*.  Defaults to zeros.

    Raises:
        ValueError: If the coefficient arrays are not square or differ in
            shape.

    Examples:
        ```python
        import jax.numpy as jnp
        from tidejax.spherical_harmonics import SphericalHarmonics
        field = SphericalHarmonics(cnm=jnp.array([[1.0]]))  # point mass
        field.potential(jnp.array([7.0e6, 0.0, 0.0]))
        ```
    """

    def __init__(
        self,
        gm: float = GM_EARTH,
        r: float = R_EARTH,
        cnm: ArrayLike | None = None,
        snm: ArrayLike | None = None,
    ) -> None:
        _float = get_dtype()
        cnm = jnp.zeros((0, 0), dtype=_float) if cnm is None else jnp.asarray(cnm, dtype=_float)
        snm = jnp.zeros_like(cnm) if snm is None else jnp.asarray(snm, dtype=_float)
        if cnm.ndim != 2 or cnm.shape[0] != cnm.shape[1]:
            raise ValueError(f"cnm must be a square matrix, got shape {cnm.shape}")
        if snm.shape != cnm.shape:
            raise ValueError(f"snm shape {snm.shape} does not match cnm shape {cnm.shape}")
        self.gm = float(gm)
        self.r = float(r)
        self.cnm = cnm
        self.snm = snm

    @property
    def max_degree(self) -> int:
        """Maximum degree (``-1`` for an empty field)."""
        return self.cnm.shape[0] - 1

    def x(self) -> Array:
        """Coefficient vector of length ``(N+1)^2``."""
        size = self.max_degree + 1
        n_c, m_c, col_c, n_s, m_s, col_s = _coefficient_index(self.max_degree)
        vec = jnp.zeros(size * size, dtype=self.cnm.dtype)
        vec = vec.at[col_c].set(self.cnm[n_c, m_c])
        return vec.at[col_s].set(self.snm[n_s, m_s])

    def get(
        self,
        max_degree: int | None = None,
        min_degree: int = 0,
        gm: float = 0.0,
        r: float = 0.0,
    ) -> SphericalHarmonics:
        """Truncated, extended or rescaled copy of the field.

        Coefficients are rescaled to the new reference constants as
        ``c' = c * (GM / GM') * (R / R')^n`` so the potential is unchanged.

        Args:
            max_degree: New maximum degree; missing degrees are zero.
                ``None`` keeps the current degree.
            min_degree: Degrees below this are set to zero.
            gm: New reference GM; ``0`` keeps the current value.
            r: New reference radius; ``0`` keeps the current value.

        Returns:
            SphericalHarmonics: The new field.
        """
        if max_degree is None:
            max_degree = self.max_degree
        gm = gm if gm else self.gm
        r = r if r else self.r

        size = max_degree + 1
        keep = min(size, self.max_degree + 1)
        _float = self.cnm.dtype
        cnm = jnp.zeros((size, size), dtype=_float).at[:keep, :keep].set(self.cnm[:keep, :keep])
        snm = jnp.zeros((size, size), dtype=_float).at[:keep, :keep].set(self.snm[:keep, :keep])

        n = np.arange(size, dtype=np.float64)
        factor = (self.gm / gm) * (self.r / r) ** n
        factor[: max(min_degree, 0)] = 0.0
        factor = jnp.asarray(factor, dtype=_float)[:, None]
        return SphericalHarmonics(gm, r, factor * cnm, factor * snm)

    def __add__(self, other: SphericalHarmonics) -> SphericalHarmonics:
        if not isinstance(other, SphericalHarmonics):
            return NotImplemented
        max_degree = max(self.max_degree, other.max_degree)
        left = self.get(max_degree)
        right = other.get(max_degree, 0, self.gm, self.r)
        return SphericalHarmonics(self.gm, self.r, left.cnm + right.cnm, left.snm + right.snm)

    def __repr__(self) -> str:
        return f"SphericalHarmonics(max_degree={self.max_degree}, gm={self.gm:.6e}, r={self.r:.1f})"

    # ------------------------------------------------------------------
    # Functionals
    # ------------------------------------------------------------------

    def _zero(self, shape=()) -> Array:
        return jnp.zeros(shape, dtype=get_dtype())

    def potential(self, point: ArrayLike) -> Array:
        """Potential at a terrestrial point [m^2/s^2]."""
        if self.max_degree < 0:
            return self._zero()
        C, S = cnm_snm(jnp.asarray(point, dtype=get_dtype()) / self.r, self.max_degree)
        return self.gm / self.r * _evaluate(self.cnm, self.snm, C, S)

    def radial_gradient(self, point: ArrayLike) -> Array:
        """Radial derivative of the potential at a point [m/s^2]."""
        if self.max_degree < 0:
            return self._zero()
        point = jnp.asarray(point, dtype=get_dtype())
        C, S = cnm_snm(point / self.r, self.max_degree)
        n1 = jnp.arange(1, self.max_degree + 2, dtype=C.dtype)[:, None]
        return -self.gm / self.r * _evaluate(n1 * self.cnm, n1 * self.snm, C, S) / jnp.linalg.norm(point)

    def gravity(self, point: ArrayLike) -> Array:
        """Gradient of the potential at a point [m/s^2], shape ``(3,)``."""
        if self.max_degree < 0:
            return self._zero(3)
        C, S = cnm_snm(jnp.asarray(point, dtype=get_dtype()) / self.r, self.max_degree + 1)
        grads = _gradient_coefficients(self.cnm, self.snm)
        return self.gm / self.r**2 * jnp.stack([_evaluate(c, s, C, S) for c, s in grads])

    def gravity_gradient(self, point: ArrayLike) -> Array:
        """Second derivatives of the potential at a point [1/s^2], shape ``(3, 3)``."""
        if self.max_degree < 0:
            return self._zero((3, 3))
        C, S = cnm_snm(jnp.asarray(point, dtype=get_dtype()) / self.r, self.max_degree + 2)
        rows = []
        for c, s in _gradient_coefficients(self.cnm, self.snm):
            rows.append(jnp.stack([_evaluate(cc, ss, C, S) for cc, ss in _gradient_coefficients(c, s)]))
        return self.gm / self.r**3 * jnp.stack(rows)

    def deformation(
        self,
        point: ArrayLike,
        gravity: float,
        hn: ArrayLike,
        ln: ArrayLike,
    ) -> Array:
        """Displacement of a station caused by the field [m], shape ``(3,)``.

        Args:
            point: Terrestrial station position [m].
            gravity: Local gravity at the station [m/s^2].
            hn: Vertical load Love numbers per degree.
            ln: Horizontal load Love numbers per degree.
        """
        if self.max_degree < 0:
            return self._zero(3)
        A = deformation_matrix(
            jnp.asarray(point)[None, :], jnp.asarray([gravity]), hn, ln,
            self.gm, self.r, self.max_degree,
        )
        return A @ self.x()


# ---------------------------------------------------------------------------
# GFC reader
# ---------------------------------------------------------------------------


def read_gfc(filepath: str | Path, max_degree: int | None = None) -> SphericalHarmonics:
    """Load an ICGEM GFC coefficient file.

    Args:
        filepath: Path to the ``.gfc`` file.
        max_degree: Truncate to this degree.  Defaults to the header's
            ``max_degree``.

    Returns:
        SphericalHarmonics: The field with the header's GM and radius.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required header fields are missing.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Gravity field file not found: {filepath}")

    gm = 0.0
    radius = 0.0
    n_max = -1
    in_header = True

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
            value = parts[-1].replace("D", "e").replace("d", "e")
            if key == "earth_gravity_constant":
                gm = float(value)
            elif key == "radius":
                radius = float(value)
            elif key == "max_degree":
                n_max = int(value)

        if in_header:
            raise ValueError("GFC file missing 'end_of_head' marker.")
        if gm == 0.0:
            raise ValueError("GFC header missing 'earth_gravity_constant'.")
        if radius == 0.0:
            raise ValueError("GFC header missing 'radius'.")
        if n_max < 0:
            raise ValueError("GFC header missing 'max_degree'.")

        if max_degree is not None:
            n_max = min(n_max, max_degree)
        cnm = np.zeros((n_max + 1, n_max + 1), dtype=np.float64)
        snm = np.zeros((n_max + 1, n_max + 1), dtype=np.float64)

        for line in lines:
            line = line.strip()
            if not line.startswith("gfc"):
                continue
            parts = line.replace("D", "e").replace("d", "e").split()
            n, m = int(parts[1]), int(parts[2])
            if n <= n_max and m <= n:
                cnm[n, m] = float(parts[3])
                snm[n, m] = float(parts[4]) if m > 0 else 0.0

    logger.info("Loaded degree %d field from %s", n_max, filepath)
    return SphericalHarmonics(gm, radius, cnm, snm)
