import jax.numpy as jnp
import pytest

from tidejax.doodson import Doodson, doodson_arguments
from tidejax.epoch import Epoch


class TestDoodsonConstruction:
    def test_from_name(self):
        assert Doodson("M2").multipliers == (2, 0, 0, 0, 0, 0)

    def test_from_code(self):
        assert Doodson("145.555").multipliers == (1, -1, 0, 0, 0, 0)

    def test_from_code_without_dot(self):
        assert Doodson("255555") == Doodson("M2")

    def test_from_multipliers(self):
        assert Doodson([0, 0, 1, 0, 0, -1]) == Doodson("Sa")

    def test_copy(self):
        m2 = Doodson("M2")
        assert Doodson(m2) == m2

    @pytest.mark.parametrize("code", ["25.555", "2a5.555", "XX", "1234.5678"])
    def test_invalid_code(self, code):
        with pytest.raises(ValueError):
            Doodson(code)

    def test_invalid_multiplier_count(self):
        with pytest.raises(ValueError, match="6 values"):
            Doodson((2, 0, 0))


class TestDoodsonNaming:
    @pytest.mark.parametrize("name", ["M2", "S2", "N2", "K2", "K1", "O1", "P1", "Q1", "Mf", "Mm", "Ssa", "Sa"])
    def test_name_round_trip(self, name):
        assert Doodson(Doodson(name).code).name == name

    def test_code_format(self):
        assert Doodson("K1").code == "165.555"
        assert Doodson("Mm").code == "065.455"

    def test_unknown_constituent_uses_code(self):
        assert Doodson("237.555").name == "237.555"

    def test_str_and_repr(self):
        assert str(Doodson("O1")) == "O1"
        assert repr(Doodson("O1")) == "Doodson('145.555')"

    def test_hash(self):
        assert len({Doodson("M2"), Doodson("255.555"), Doodson("S2")}) == 2

    def test_not_equal_to_string(self):
        assert Doodson("M2") != "M2"


class TestArguments:
    def test_shape(self):
        assert doodson_arguments(Epoch(2020, 1, 1)).shape == (6,)

    def test_m2_period(self):
        """The M2 argument advances by 2*pi in about 12.42 hours."""
        m2 = Doodson("M2")
        t0 = Epoch(2020, 1, 1)
        period = 12.4206012 * 3600.0
        delta = float(m2.argument(t0 + period) - m2.argument(t0))
        assert jnp.cos(delta) == pytest.approx(1.0, abs=1e-6)

    def test_s2_period(self):
        s2 = Doodson("S2")
        t0 = Epoch(2020, 1, 1)
        delta = float(s2.argument(t0 + 43200.0) - s2.argument(t0))
        assert jnp.cos(delta) == pytest.approx(1.0, abs=1e-9)

    def test_argument_is_dot_product(self):
        t = Epoch(2021, 6, 15, 3, 0, 0.0)
        beta = doodson_arguments(t)
        assert float(Doodson("N2").argument(t)) == pytest.approx(
            float(2.0 * beta[0] - beta[1] + beta[3]), abs=1e-12
        )

    def test_gmst_uses_ut1(self, make_rotation):
        t = Epoch(2021, 6, 15, 3, 0, 0.0)
        beta_utc = doodson_arguments(t)
        beta_ut1 = doodson_arguments(t, make_rotation(delta_ut=0.5))
        # GMST advances 7.2921158553e-5 rad per second of UT1
        assert float(beta_ut1[0] - beta_utc[0]) == pytest.approx(0.5 * 7.2921158553e-5, rel=1e-6)
        assert jnp.all(beta_ut1[1:] == beta_utc[1:])

    def test_zero_ut1_utc_matches_utc(self, make_rotation):
        t = Epoch(2021, 6, 15, 3, 0, 0.0)
        assert jnp.allclose(doodson_arguments(t, make_rotation()), doodson_arguments(t), atol=1e-12)

    def test_argument_with_rotation(self, make_rotation):
        t = Epoch(2021, 6, 15, 3, 0, 0.0)
        rotation = make_rotation(delta_ut=-0.3)
        delta = float(Doodson("M2").argument(t, rotation) - Doodson("M2").argument(t))
        assert delta == pytest.approx(-0.6 * 7.2921158553e-5, rel=1e-6)
