"""Tests for the Earth rotation providers."""

from __future__ import annotations

import logging
from unittest.mock import patch

import erfa
import jax.numpy as jnp
import numpy as np
import polars as pl
import pytest

from tidejax.constants import DEG2RAD, OMEGA_EARTH
from tidejax.earth_rotation import (
    EarthOrientation,
    EarthRotationConfig,
    EarthRotationEra,
    EarthRotationIers2010,
    ShortPeriodSeries,
    create_earth_rotation,
    load_ocean_tide_eop_file,
    tidal_arguments,
)
from tidejax.eop import eop_from_table, static_eop
from tidejax.epoch import Epoch
from tidejax.errors import MalformedInputError, MissingDependencyError, OutOfRangeError
from tidejax.rotations import Rz
from tidejax.sofa import era00
from tidejax.time_scales import gps_to_tt, gps_to_utc, utc_to_gps

_ARCSEC = DEG2RAD / 3600.0


@pytest.fixture
def three_day_rotation(three_day_table) -> EarthRotationIers2010:
    return EarthRotationIers2010(eop_from_table(three_day_table), interpolation_degree=1)


@pytest.fixture
def leap_second_rotation() -> EarthRotationIers2010:
    """EOPs around the 2017-01-01 leap second, UT1-UTC stepping by +1 s."""
    table = pl.DataFrame({
        "mjd": [57752.0, 57753.0, 57754.0, 57755.0, 57756.0],
        "pm_x": [0.0] * 5,
        "pm_y": [0.0] * 5,
        "ut1_utc": [-0.590, -0.591, 0.408, 0.407, 0.406],
        "lod": [0.001] * 5,
        "dX": [0.0] * 5,
        "dY": [0.0] * 5,
    })
    return EarthRotationIers2010(eop_from_table(table), interpolation_degree=3)


# ---------------------------------------------------------------------------
# IERS 2010 rotation
# ---------------------------------------------------------------------------


class TestEarthRotationIers2010:
    def test_three_row_linear_interpolation(self, three_day_rotation):
        """Half a day after the first sample UT1-UTC is 0.15 s."""
        time_gps = utc_to_gps(Epoch.from_mjd(58000.5))
        eop = three_day_rotation.earth_orientation_parameter(time_gps)
        assert isinstance(eop, EarthOrientation)
        # libration adds a few microseconds
        assert float(eop.delta_ut) == pytest.approx(0.15, abs=1e-5)
        assert float(eop.xp) == pytest.approx(0.1 * _ARCSEC, abs=1e-9)
        assert float(eop.yp) == pytest.approx(0.3 * _ARCSEC, abs=1e-9)
        assert float(eop.lod) == pytest.approx(0.001, abs=1e-4)

    def test_at_sample_time(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(58001.0))
        eop = three_day_rotation.earth_orientation_parameter(time_gps)
        assert float(eop.delta_ut) == pytest.approx(0.2, abs=1e-5)

    def test_delta_ut_continuous_across_leap_second(self, leap_second_rotation):
        before = utc_to_gps(Epoch(2016, 12, 31, 23, 59, 59.5))
        after = utc_to_gps(Epoch(2017, 1, 1, 0, 0, 0.5))
        eop_before = leap_second_rotation.earth_orientation_parameter(before)
        eop_after = leap_second_rotation.earth_orientation_parameter(after)
        # UT1-UTC steps by exactly the leap second
        assert float(eop_after.delta_ut - eop_before.delta_ut) == pytest.approx(1.0, abs=1e-5)
        # UT1-GPS is smooth through the step
        ut1_gps_before = float(eop_before.delta_ut) - (before - gps_to_utc(before))
        ut1_gps_after = float(eop_after.delta_ut) - (after - gps_to_utc(after))
        assert ut1_gps_after == pytest.approx(ut1_gps_before, abs=1e-5)

    @pytest.mark.parametrize("mjd", [57999.5, 58002.5])
    def test_out_of_range(self, three_day_rotation, mjd):
        time_gps = utc_to_gps(Epoch.from_mjd(mjd))
        with pytest.raises(OutOfRangeError, match="No EOPs available"):
            three_day_rotation.earth_orientation_parameter(time_gps)

    def test_table_too_short_for_degree(self, three_day_table):
        with pytest.raises(MalformedInputError):
            EarthRotationIers2010(eop_from_table(three_day_table), interpolation_degree=3)

    def test_without_eop_only_models(self):
        rotation = EarthRotationIers2010()
        eop = rotation.earth_orientation_parameter(Epoch(2020, 1, 1))
        assert abs(float(eop.delta_ut)) < 1e-5
        assert abs(float(eop.xp)) < 1e-9
        # precession since J2000 moves the CIP by arcseconds
        assert abs(float(eop.x)) > 1e-6

    def test_cip_matches_erfa_series(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(58001.25))
        eop = three_day_rotation.earth_orientation_parameter(time_gps)
        dj1, dj2 = gps_to_tt(time_gps).jd_parts()
        x, y = erfa.xy06(dj1, dj2)
        s = erfa.s06(dj1, dj2, x, y)
        assert float(eop.x) == pytest.approx(x, abs=1e-14)
        assert float(eop.y) == pytest.approx(y, abs=1e-14)
        assert float(eop.s) == pytest.approx(s, abs=1e-14)

    def test_celestial_pole_offsets_added(self, three_day_table):
        table = three_day_table.with_columns(
            pl.Series("dX", [0.0002] * 3), pl.Series("dY", [-0.0001] * 3)
        )
        plain = EarthRotationIers2010(eop_from_table(three_day_table), interpolation_degree=1)
        offset = EarthRotationIers2010(eop_from_table(table), interpolation_degree=1)
        time_gps = utc_to_gps(Epoch.from_mjd(58000.3))
        a = plain.earth_orientation_parameter(time_gps)
        b = offset.earth_orientation_parameter(time_gps)
        assert float(b.x - a.x) == pytest.approx(0.0002 * _ARCSEC, rel=1e-9)
        assert float(b.y - a.y) == pytest.approx(-0.0001 * _ARCSEC, rel=1e-9)

    def test_truncated_nutation_close_to_full(self, three_day_table):
        eop = eop_from_table(three_day_table)
        full = EarthRotationIers2010(eop, interpolation_degree=1)
        truncated = EarthRotationIers2010(eop, truncated_nutation=True, interpolation_degree=1)
        time_gps = utc_to_gps(Epoch.from_mjd(58001.0))
        a = full.earth_orientation_parameter(time_gps)
        b = truncated.earth_orientation_parameter(time_gps)
        # IAU 2000B agrees with 2006/2000A to about a milliarcsecond
        assert abs(float(a.x - b.x)) < 2e-8
        assert abs(float(a.y - b.y)) < 2e-8
        assert float(a.x) != float(b.x)

    def test_ocean_tide_eop_added(self, three_day_table, tmp_path):
        path = tmp_path / "ocean_eop.txt"
        path.write_text(
            "# chi l l' F D Om  x_sin x_cos y_sin y_cos ut_sin ut_cos\n"
            "1 0 0 0 0 0  10.0 0.0 0.0 -20.0 30.0 0.0\n"
        )
        series = load_ocean_tide_eop_file(path)
        eop = eop_from_table(three_day_table)
        plain = EarthRotationIers2010(eop, interpolation_degree=1)
        ocean = EarthRotationIers2010(eop, interpolation_degree=1, ocean_tide_eop=series)

        time_gps = utc_to_gps(Epoch.from_mjd(58000.7))
        a = plain.earth_orientation_parameter(time_gps)
        b = ocean.earth_orientation_parameter(time_gps)

        chi = float(tidal_arguments(gps_to_utc(time_gps).mjd())[0])
        uas = 1e-6 * _ARCSEC
        assert float(b.xp - a.xp) == pytest.approx(10.0 * uas * np.sin(chi), abs=1e-16)
        assert float(b.yp - a.yp) == pytest.approx(-20.0 * uas * np.cos(chi), abs=1e-16)
        assert float(b.delta_ut - a.delta_ut) == pytest.approx(30e-6 * np.sin(chi), abs=1e-12)
        assert float(b.lod - a.lod) == pytest.approx(0.0, abs=1e-15)

    def test_missing_ocean_tide_model_is_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tidejax.earth_rotation._iers2010"):
            EarthRotationIers2010()
        assert "ocean tide" in caplog.text

    def test_ocean_tide_model_suppresses_warning(self, caplog):
        series = ShortPeriodSeries(np.zeros((0, 6), dtype=np.int64), np.zeros((0, 8)))
        with caplog.at_level(logging.WARNING, logger="tidejax.earth_rotation._iers2010"):
            EarthRotationIers2010(ocean_tide_eop=series)
        assert "ocean tide" not in caplog.text


class TestMissingErfa:
    """Without pyerfa every evaluation fails, construction does not."""

    def test_construction_succeeds(self, three_day_table):
        with patch("tidejax.earth_rotation._iers2010.erfa", None):
            EarthRotationIers2010(eop_from_table(three_day_table), interpolation_degree=1)

    def test_every_call_raises(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(58000.5))
        with patch("tidejax.earth_rotation._iers2010.erfa", None):
            for _ in range(2):
                with pytest.raises(MissingDependencyError):
                    three_day_rotation.earth_orientation_parameter(time_gps)
            with pytest.raises(MissingDependencyError):
                three_day_rotation.rotary_matrix(time_gps)
            with pytest.raises(MissingDependencyError):
                three_day_rotation.rotary_axis(time_gps)

    def test_checked_before_range(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(60000.0))
        with patch("tidejax.earth_rotation._iers2010.erfa", None):
            with pytest.raises(MissingDependencyError):
                three_day_rotation.earth_orientation_parameter(time_gps)

    def test_is_import_error(self):
        assert issubclass(MissingDependencyError, ImportError)


# ---------------------------------------------------------------------------
# Derived rotation matrix and axis
# ---------------------------------------------------------------------------


class TestRotaryMatrix:
    def test_matches_erfa_c2t06a(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(58001.6))
        eop = three_day_rotation.earth_orientation_parameter(time_gps)
        R = three_day_rotation.rotary_matrix(time_gps)

        tt1, tt2 = gps_to_tt(time_gps).jd_parts()
        ut1, ut2 = gps_to_utc(time_gps).jd_parts()
        expected = erfa.c2t06a(
            tt1, tt2, ut1, ut2 + float(eop.delta_ut) / 86400.0, float(eop.xp), float(eop.yp)
        )
        # the series X, Y agree with the full matrix to about a microarcsecond
        assert np.allclose(np.asarray(R), expected, atol=1e-10)

    def test_orthonormal(self, three_day_rotation):
        R = three_day_rotation.rotary_matrix(utc_to_gps(Epoch.from_mjd(58000.9)))
        assert jnp.allclose(R @ R.T, jnp.eye(3), atol=1e-14)
        assert float(jnp.linalg.det(R)) == pytest.approx(1.0, abs=1e-14)

    def test_rotary_axis(self, three_day_rotation):
        time_gps = utc_to_gps(Epoch.from_mjd(58000.5))
        eop = three_day_rotation.earth_orientation_parameter(time_gps)
        omega = three_day_rotation.rotary_axis(time_gps)
        expected_rate = OMEGA_EARTH * (1.0 - float(eop.lod) / 86400.0)
        assert float(jnp.linalg.norm(omega)) == pytest.approx(expected_rate, rel=1e-14)
        # the pole lies within an arcsecond of the z-axis
        assert float(omega[2]) == pytest.approx(expected_rate, rel=1e-10)
        assert abs(float(omega[0])) < 1e-5 * expected_rate


class TestEarthRotationEra:
    def test_orientation(self):
        eop = EarthRotationEra(0.25).earth_orientation_parameter(Epoch(2020, 1, 1))
        assert float(eop.delta_ut) == 0.25
        assert float(eop.xp) == 0.0
        assert float(eop.x) == 0.0
        assert float(eop.s) == 0.0

    def test_rotary_matrix_is_era_rotation(self):
        rotation = EarthRotationEra(0.25)
        time_gps = Epoch(2020, 1, 1, 6, 0, 0.0)
        dj1, dj2 = gps_to_utc(time_gps).jd_parts()
        expected = Rz(era00(jnp.float64(dj1), jnp.float64(dj2 + 0.25 / 86400.0)))
        assert jnp.allclose(rotation.rotary_matrix(time_gps), expected, atol=1e-14)

    def test_rotary_axis(self):
        omega = EarthRotationEra().rotary_axis(Epoch(2020, 1, 1))
        assert jnp.allclose(omega, jnp.array([0.0, 0.0, OMEGA_EARTH]), atol=1e-20)

    def test_works_without_erfa(self):
        with patch("tidejax.earth_rotation._iers2010.erfa", None):
            EarthRotationEra().rotary_matrix(Epoch(2020, 1, 1))


# ---------------------------------------------------------------------------
# Config and factory
# ---------------------------------------------------------------------------


class TestEarthRotationConfig:
    def test_defaults(self):
        config = EarthRotationConfig()
        assert config.model == "iers2010"
        assert config.eop_file == "{dataDir}/earthRotation/EOP_14C04_IAU2000.txt"
        assert config.interpolation_degree == 3
        assert config.ocean_tide_eop_file is None

    def test_invalid_model(self):
        with pytest.raises(ValueError, match="model"):
            EarthRotationConfig(model="iau1980")

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="eop_format"):
            EarthRotationConfig(eop_format="xml")

    def test_invalid_degree(self):
        with pytest.raises(ValueError, match="interpolation_degree"):
            EarthRotationConfig(interpolation_degree=-1)


class TestCreateEarthRotation:
    def _write_eop(self, path):
        path.write_text(
            "# mjd xp yp ut1-utc lod dx dy\n"
            "58000 0.1 0.3 0.1 0.001 0 0\n"
            "58001 0.1 0.3 0.2 0.001 0 0\n"
            "58002 0.1 0.3 0.3 0.001 0 0\n"
        )
        return path

    def test_era_model(self):
        rotation = create_earth_rotation(EarthRotationConfig(model="era", ut1_utc=0.2))
        assert isinstance(rotation, EarthRotationEra)
        assert rotation.ut1_utc == 0.2

    def test_iers2010_from_file(self, tmp_path):
        path = self._write_eop(tmp_path / "eop.txt")
        rotation = create_earth_rotation(
            EarthRotationConfig(eop_file=str(path), eop_format="columns", interpolation_degree=1)
        )
        assert isinstance(rotation, EarthRotationIers2010)
        eop = rotation.earth_orientation_parameter(utc_to_gps(Epoch.from_mjd(58000.5)))
        assert float(eop.delta_ut) == pytest.approx(0.15, abs=1e-5)

    def test_data_dir_placeholder(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TIDEJAX_DATA", str(tmp_path))
        (tmp_path / "earthRotation").mkdir()
        self._write_eop(tmp_path / "earthRotation" / "eop.txt")
        rotation = create_earth_rotation(
            EarthRotationConfig(eop_file="{dataDir}/earthRotation/eop.txt", interpolation_degree=2)
        )
        assert rotation.eop.size == 3

    def test_no_eop_file(self):
        rotation = create_earth_rotation(EarthRotationConfig(eop_file=None))
        assert rotation.eop is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            create_earth_rotation(EarthRotationConfig(eop_file=str(tmp_path / "missing.txt")))

    def test_short_table_rejected(self, tmp_path):
        path = self._write_eop(tmp_path / "eop.txt")
        with pytest.raises(MalformedInputError):
            create_earth_rotation(EarthRotationConfig(eop_file=str(path)))

    def test_static_eop_rotation(self):
        rotation = EarthRotationIers2010(static_eop(ut1_utc=-0.1, mjd_min=58000.0, mjd_max=58010.0))
        eop = rotation.earth_orientation_parameter(utc_to_gps(Epoch.from_mjd(58005.3)))
        assert float(eop.delta_ut) == pytest.approx(-0.1, abs=1e-5)
