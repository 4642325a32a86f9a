"""Tests for the JAX SOFA routines, checked against pyerfa."""

import erfa
import jax
import jax.numpy as jnp
import numpy as np
import pytest

from tidejax.rotations import Rx, Ry, Rz
from tidejax.sofa import (
    D2PI,
    DJ00,
    c2ixys,
    delaunay_arguments,
    era00,
    fad03,
    faf03,
    fal03,
    falp03,
    faom03,
    gmst82,
    pom00,
    sp00,
)

# 2018-03-20 06:00 as a two-part Julian Date
_JD1 = 2458197.5
_JD2 = 0.25


class TestFundamentalArguments:
    @pytest.mark.parametrize(
        "ours, theirs",
        [
            (fal03, erfa.fal03),
            (falp03, erfa.falp03),
            (faf03, erfa.faf03),
            (fad03, erfa.fad03),
            (faom03, erfa.faom03),
        ],
    )
    def test_match_erfa(self, ours, theirs):
        t = 0.18
        assert float(ours(jnp.float64(t))) == pytest.approx(theirs(t), abs=1e-12)

    def test_delaunay_stack(self):
        t = jnp.float64(-0.3)
        args = delaunay_arguments(t)
        assert args.shape == (5,)
        assert float(args[4]) == pytest.approx(float(faom03(t)), abs=0.0)


class TestSiderealTime:
    def test_era_at_j2000(self):
        expected = 0.7790572732640 * D2PI
        assert float(era00(jnp.float64(DJ00), jnp.float64(0.0))) == pytest.approx(
            expected, abs=1e-12
        )

    def test_era_matches_erfa(self):
        assert float(era00(jnp.float64(_JD1), jnp.float64(_JD2))) == pytest.approx(
            erfa.era00(_JD1, _JD2), abs=1e-12
        )

    def test_era_in_range(self):
        era = era00(jnp.float64(_JD1), jnp.float64(0.99))
        assert 0.0 <= float(era) < D2PI

    def test_gmst82_matches_erfa(self):
        ours = float(gmst82(jnp.float64(_JD1), jnp.float64(_JD2)))
        theirs = erfa.gmst82(_JD1, _JD2)
        # compare on the circle so a wrap at 2*pi does not matter
        assert np.cos(ours) == pytest.approx(np.cos(theirs), abs=1e-10)
        assert np.sin(ours) == pytest.approx(np.sin(theirs), abs=1e-10)

    def test_gmst82_jit(self):
        eager = gmst82(jnp.float64(_JD1), jnp.float64(_JD2))
        jitted = jax.jit(gmst82)(jnp.float64(_JD1), jnp.float64(_JD2))
        assert float(jitted) == pytest.approx(float(eager), abs=1e-12)


class TestTioLocator:
    def test_zero_at_j2000(self):
        assert float(sp00(jnp.float64(DJ00), jnp.float64(0.0))) == 0.0

    def test_matches_erfa(self):
        ours = float(sp00(jnp.float64(_JD1), jnp.float64(_JD2)))
        assert ours == pytest.approx(erfa.sp00(_JD1, _JD2), rel=1e-12)
        assert ours < 0.0


class TestMatrices:
    def test_c2ixys_identity_at_origin(self):
        q = c2ixys(jnp.float64(0.0), jnp.float64(0.0), jnp.float64(0.0))
        assert jnp.allclose(q, jnp.eye(3), atol=1e-15)

    def test_c2ixys_matches_erfa(self):
        x, y, s = 2.1e-4, -3.4e-5, 1.2e-8
        q = c2ixys(jnp.float64(x), jnp.float64(y), jnp.float64(s))
        assert np.allclose(np.asarray(q), erfa.c2ixys(x, y, s), atol=1e-15)
        assert jnp.allclose(q @ q.T, jnp.eye(3), atol=1e-15)

    def test_pom00_matches_erfa(self):
        xp, yp, sp = 1.0e-6, 2.0e-6, -1.0e-11
        w = pom00(jnp.float64(xp), jnp.float64(yp), jnp.float64(sp))
        assert np.allclose(np.asarray(w), erfa.pom00(xp, yp, sp), atol=1e-15)


class TestRotations:
    def test_rz_passive(self):
        """Rotating the frame by +90 deg maps the x-axis onto -y."""
        v = Rz(jnp.pi / 2) @ jnp.array([1.0, 0.0, 0.0])
        assert jnp.allclose(v, jnp.array([0.0, -1.0, 0.0]), atol=1e-15)

    def test_rx_passive(self):
        v = Rx(jnp.pi / 2) @ jnp.array([0.0, 1.0, 0.0])
        assert jnp.allclose(v, jnp.array([0.0, 0.0, -1.0]), atol=1e-15)

    def test_ry_passive(self):
        v = Ry(jnp.pi / 2) @ jnp.array([0.0, 0.0, 1.0])
        assert jnp.allclose(v, jnp.array([-1.0, 0.0, 0.0]), atol=1e-15)

    def test_degrees(self):
        assert jnp.allclose(Rz(30.0, use_degrees=True), Rz(jnp.pi / 6), atol=1e-15)

    @pytest.mark.parametrize("rot, erfa_rot", [(Rx, erfa.rx), (Ry, erfa.ry), (Rz, erfa.rz)])
    def test_match_erfa(self, rot, erfa_rot):
        assert np.allclose(np.asarray(rot(0.3)), erfa_rot(0.3, np.eye(3)), atol=1e-15)
