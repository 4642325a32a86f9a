"""Local polynomial (Lagrange) interpolation of tabulated series.

The interpolator picks ``degree + 1`` consecutive nodes around the query
point (centred where possible, shifted inwards at the table ends) and
evaluates the Lagrange polynomial through them.  Node selection uses
``jnp.searchsorted`` and ``jax.lax.dynamic_slice`` with a window size
fixed by the degree, so :meth:`PolynomialInterpolator.interpolate` is
traceable under ``jax.jit``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from tidejax.errors import MalformedInputError


class PolynomialInterpolator:
    """Polynomial interpolation of a fixed degree over tabulated nodes.

    Args:
        degree: Polynomial degree; ``degree + 1`` support points are used.

    Raises:
        ValueError: If *degree* is negative.

    Examples:
        ```python
        import jax.numpy as jnp
        from tidejax.interpolation import PolynomialInterpolator
        interp = PolynomialInterpolator(1)
        nodes = jnp.array([0.0, 1.0, 2.0])
        values = jnp.array([[0.1], [0.2], [0.3]])
        interp.interpolate(0.5, nodes, values)  # [0.15]
        ```
    """

    def __init__(self, degree: int = 3) -> None:
        if degree < 0:
            raise ValueError(f"Polynomial degree must be non-negative, got {degree}")
        self.degree = int(degree)

    @property
    def node_count(self) -> int:
        """Number of support points used per interpolation."""
        return self.degree + 1

    def check_nodes(self, nodes: ArrayLike) -> None:
        """Validate that *nodes* can support this interpolator.

        Args:
            nodes: Node abscissae, shape ``(N,)``.

        Raises:
            MalformedInputError: If fewer than ``degree + 1`` nodes exist or
                the nodes are not strictly increasing.
        """
        nodes = jnp.asarray(nodes)
        if nodes.ndim != 1 or nodes.shape[0] < self.node_count:
            raise MalformedInputError(
                f"Polynomial interpolation of degree {self.degree} needs at least "
                f"{self.node_count} samples, got {nodes.shape[0] if nodes.ndim == 1 else nodes.shape}"
            )
        steps = jnp.diff(nodes)
        if bool(jnp.any(steps <= 0.0)):
            idx = int(jnp.argmax(steps <= 0.0))
            raise MalformedInputError(
                f"Interpolation nodes must be strictly increasing: "
                f"node {idx + 1} ({float(nodes[idx + 1])}) follows {float(nodes[idx])}"
            )

    def interpolate(self, x: ArrayLike, nodes: ArrayLike, values: ArrayLike) -> Array:
        """Interpolate tabulated *values* at abscissa *x*.

        Node differences are formed relative to *x* before the Lagrange
        products, so large absolute abscissae (e.g. MJD) do not cost
        precision.

        Args:
            x: Scalar query abscissa.
            nodes: Strictly increasing node abscissae, shape ``(N,)``.
            values: Tabulated values, shape ``(N,)`` or ``(N, K)``.

        Returns:
            Interpolated value(s), shape ``()`` or ``(K,)``.

        Raises:
            MalformedInputError: If fewer than ``degree + 1`` nodes exist.
        """
        nodes = jnp.asarray(nodes)
        values = jnp.asarray(values)
        n = nodes.shape[0]
        count = self.node_count
        if n < count:
            raise MalformedInputError(
                f"Polynomial interpolation of degree {self.degree} needs at least "
                f"{count} samples, got {n}"
            )

        x = jnp.asarray(x, dtype=nodes.dtype)
        idx = jnp.searchsorted(nodes, x, side="right")
        start = jnp.clip(idx - (count + 1) // 2, 0, n - count)

        window = jax.lax.dynamic_slice(nodes, (start,), (count,)) - x
        if values.ndim == 1:
            rows = jax.lax.dynamic_slice(values, (start,), (count,))
        else:
            rows = jax.lax.dynamic_slice(values, (start, jnp.zeros((), start.dtype)), (count, values.shape[1]))

        # Lagrange weights: w_j = prod_{k != j} (x - t_k) / (t_j - t_k)
        diff = window[:, None] - window[None, :]
        eye = jnp.eye(count, dtype=bool)
        numer = jnp.where(eye, 1.0, -window[None, :])
        denom = jnp.where(eye, 1.0, diff)
        weights = jnp.prod(numer / denom, axis=1)

        return jnp.tensordot(weights, rows, axes=1)
