"""Tests for Earth Orientation Parameter loading and conversion."""

from __future__ import annotations

import math
import os
from pathlib import Path
from unittest.mock import patch

import httpx
import numpy as np
import polars as pl
import pytest

from tidejax.constants import DEG2RAD
from tidejax.eop import (
    EOP_COLUMNS,
    EOPData,
    download_c04_eop_file,
    download_standard_eop_file,
    eop_from_table,
    load_cached_eop,
    load_default_eop,
    load_eop_from_file,
    load_eop_table,
    parse_c04_file,
    parse_c04_line,
    parse_columns_line,
    parse_eop_lines,
    parse_standard_file,
    parse_standard_line,
    static_eop,
)
from tidejax.eop._download import IERS_C04_URL, IERS_STANDARD_URL
from tidejax.errors import MalformedInputError

_ARCSEC = DEG2RAD / 3600.0

_STANDARD_LINES = [
    "2311 1 60249.00 I  0.274620 0.000020  0.268283 0.000018  I 0.0113205 0.0000039 -0.3630 0.0029  I     0.293    0.290    -0.045    0.041  0.274569  0.268315  0.0113342     0.238    -0.039  ",
    "231220 60298.00 I  0.167496 0.000091  0.200643 0.000091  I 0.0109716 0.0000102  0.7706 0.0069  P     0.103    0.128    -0.193    0.160                                                     ",
    "24 3 4 60373.00 P  0.026108 0.007892  0.289637 0.008989  P 0.0110535 0.0072179                 P     0.006    0.128    -0.118    0.160                                                     ",
]

_C04_LINES = [
    "# EOP 14 C04 (IAU2000A)",
    "#  YR  MM  DD  MJD        x(\")        y(\")      UT1-UTC(s)   LOD(s)      dX(\")      dY(\")",
    "2017   9   4  58000   0.212003   0.367340   0.3416425   0.0006101   0.000195  -0.000083   0.000031   0.000029  0.0000103  0.0000100   0.000047   0.000050",
    "2017   9   5  58001   0.210744   0.367018   0.3410633   0.0005534   0.000197  -0.000085   0.000031   0.000029  0.0000104  0.0000100   0.000047   0.000050",
    "2017   9   6  58002   0.209487   0.366681   0.3405552   0.0004711   0.000200  -0.000087   0.000031   0.000029  0.0000105  0.0000100   0.000047   0.000050",
]


def _write(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Line parsers
# ---------------------------------------------------------------------------


class TestParseStandardLine:
    """IERS standard format lines; values stay in arcseconds and seconds."""

    def test_parse_full_line(self):
        mjd, pm_x, pm_y, ut1_utc, lod, dX, dY = parse_standard_line(_STANDARD_LINES[0])
        assert mjd == pytest.approx(60249.0)
        assert pm_x == pytest.approx(0.274620, rel=1e-12)
        assert pm_y == pytest.approx(0.268283, rel=1e-12)
        assert ut1_utc == pytest.approx(0.0113205, rel=1e-12)
        assert lod == pytest.approx(-0.3630e-3, rel=1e-12)
        assert dX == pytest.approx(0.293e-3, rel=1e-12)
        assert dY == pytest.approx(-0.045e-3, rel=1e-12)

    def test_parse_prediction_no_lod(self):
        result = parse_standard_line(_STANDARD_LINES[2])
        assert result is not None
        assert math.isnan(result[4])
        assert result[5] == pytest.approx(0.006e-3, rel=1e-12)

    def test_parse_short_line_pads(self):
        line = _STANDARD_LINES[1].rstrip()
        assert len(line) < 187
        assert parse_standard_line(line)[0] == pytest.approx(60298.0)

    def test_parse_too_long_returns_none(self):
        assert parse_standard_line(_STANDARD_LINES[0] + "EXTRA") is None

    def test_parse_empty_returns_none(self):
        assert parse_standard_line("") is None


class TestParseC04Line:
    def test_parse_data_line(self):
        mjd, pm_x, pm_y, ut1_utc, lod, dX, dY = parse_c04_line(_C04_LINES[2])
        assert mjd == 58000.0
        assert pm_x == pytest.approx(0.212003)
        assert pm_y == pytest.approx(0.367340)
        assert ut1_utc == pytest.approx(0.3416425)
        assert lod == pytest.approx(0.0006101)
        assert dX == pytest.approx(0.000195)
        assert dY == pytest.approx(-0.000083)

    def test_header_returns_none(self):
        assert parse_c04_line(_C04_LINES[0]) is None
        assert parse_c04_line(_C04_LINES[1]) is None


class TestParseColumnsLine:
    def test_parse_line_with_comment(self):
        row = parse_columns_line("58000 0.1 0.3 0.2 0.001 0.0 0.0  # first day")
        assert row == (58000.0, 0.1, 0.3, 0.2, 0.001, 0.0, 0.0)

    def test_blank_line(self):
        assert parse_columns_line("   # only a comment") is None

    def test_wrong_column_count(self):
        with pytest.raises(ValueError, match="Expected 7 columns"):
            parse_columns_line("58000 0.1 0.3")


class TestParseEOPLines:
    def test_auto_detects_standard(self):
        df = parse_eop_lines(_STANDARD_LINES)
        assert df.columns == list(EOP_COLUMNS)
        assert df.height == 3

    def test_missing_values_set_to_zero(self):
        df = parse_eop_lines(_STANDARD_LINES, "standard")
        assert df["lod"][2] == 0.0
        assert not any(df.select(pl.all().is_nan().any()).row(0))

    def test_auto_detects_c04(self):
        df = parse_eop_lines(_C04_LINES)
        assert df["mjd"].to_list() == [58000.0, 58001.0, 58002.0]

    def test_auto_detects_columns(self):
        df = parse_eop_lines(["# mjd x y ut1-utc lod dx dy", "58000 0.1 0.3 0.2 0.001 0 0"])
        assert df.height == 1

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown EOP format"):
            parse_eop_lines(_C04_LINES, "bulletin_b")

    def test_no_data(self):
        with pytest.raises(ValueError):
            parse_eop_lines(["# nothing here"], "columns")


# ---------------------------------------------------------------------------
# Table conversion
# ---------------------------------------------------------------------------


class TestEOPFromTable:
    def test_converts_units(self, three_day_table):
        eop = eop_from_table(three_day_table)
        assert isinstance(eop, EOPData)
        assert eop.size == 3
        assert float(eop.pm_x[0]) == pytest.approx(0.1 * _ARCSEC, rel=1e-15)
        assert float(eop.pm_y[1]) == pytest.approx(0.3 * _ARCSEC, rel=1e-15)
        assert float(eop.lod[2]) == pytest.approx(0.001)

    def test_ut1_gps_removes_leap_seconds(self, three_day_table):
        eop = eop_from_table(three_day_table)
        # GPS-UTC is 18 s in 2017
        assert np.allclose(np.asarray(eop.ut1_gps), [0.1 - 18.0, 0.2 - 18.0, 0.3 - 18.0])

    def test_ut1_gps_continuous_across_leap_second(self):
        table = pl.DataFrame({
            "mjd": [57752.0, 57753.0, 57754.0, 57755.0],
            "pm_x": [0.0] * 4, "pm_y": [0.0] * 4,
            "ut1_utc": [-0.6, -0.6, 0.4, 0.4],
            "lod": [0.0] * 4, "dX": [0.0] * 4, "dY": [0.0] * 4,
        })
        eop = eop_from_table(table)
        assert np.allclose(np.asarray(eop.ut1_gps), -17.6)

    def test_coverage(self, three_day_table):
        eop = eop_from_table(three_day_table)
        assert eop.mjd_min == 58000.0
        assert eop.mjd_max == 58002.0

    def test_missing_column(self, three_day_table):
        with pytest.raises(MalformedInputError, match="missing columns"):
            eop_from_table(three_day_table.drop("dY"))

    def test_empty_table(self, three_day_table):
        with pytest.raises(MalformedInputError, match="empty"):
            eop_from_table(three_day_table.head(0))

    def test_not_increasing(self, three_day_table):
        table = three_day_table.with_columns(pl.Series("mjd", [58000.0, 58002.0, 58001.0]))
        with pytest.raises(MalformedInputError, match="strictly increasing"):
            eop_from_table(table)

    def test_duplicate_mjd(self, three_day_table):
        table = three_day_table.with_columns(pl.Series("mjd", [58000.0, 58001.0, 58001.0]))
        with pytest.raises(MalformedInputError):
            eop_from_table(table)

    def test_non_finite(self, three_day_table):
        table = three_day_table.with_columns(pl.Series("lod", [0.0, float("nan"), 0.0]))
        with pytest.raises(MalformedInputError, match="non-finite"):
            eop_from_table(table)


class TestStaticEOP:
    def test_constant_values(self):
        eop = static_eop(pm_x=0.1, ut1_utc=-0.2, mjd_min=58000.0, mjd_max=58010.0)
        assert eop.size == 11
        assert np.allclose(np.asarray(eop.pm_x), 0.1 * _ARCSEC)
        assert np.allclose(np.asarray(eop.ut1_gps), -0.2 - 18.0)

    def test_default_range(self):
        eop = static_eop()
        assert eop.mjd_min == 41317.0
        assert eop.mjd_max == 88069.0


# ---------------------------------------------------------------------------
# File loaders
# ---------------------------------------------------------------------------


class TestFileLoaders:
    def test_parse_c04_file(self, tmp_path):
        df = parse_c04_file(_write(tmp_path / "c04.txt", _C04_LINES))
        assert df.height == 3

    def test_parse_standard_file(self, tmp_path):
        df = parse_standard_file(_write(tmp_path / "finals.txt", _STANDARD_LINES))
        assert df["mjd"].to_list() == [60249.0, 60298.0, 60373.0]

    def test_load_eop_table_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_eop_table(tmp_path / "missing.txt")

    def test_load_eop_from_file(self, tmp_path):
        eop = load_eop_from_file(_write(tmp_path / "c04.txt", _C04_LINES))
        assert eop.size == 3
        assert float(eop.dX[0]) == pytest.approx(0.000195 * _ARCSEC, rel=1e-12)

    def test_load_default_eop(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TIDEJAX_DATA", str(tmp_path))
        (tmp_path / "earthRotation").mkdir()
        _write(tmp_path / "earthRotation" / "EOP_14C04_IAU2000.txt", _C04_LINES)
        eop = load_default_eop()
        assert eop.mjd_min == 58000.0


# ---------------------------------------------------------------------------
# Download and cache
# ---------------------------------------------------------------------------


def _mock_client(mock_client_cls, text: str):
    mock_response = mock_client_cls.return_value.__enter__.return_value.get.return_value
    mock_response.text = text
    mock_response.raise_for_status.return_value = None
    return mock_response


class TestDownload:
    def test_download_creates_parent_dirs(self, tmp_path):
        dest = tmp_path / "deep" / "nested" / "finals.txt"
        with patch("tidejax.eop._download.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, "mock eop data\n")
            result = download_standard_eop_file(dest)
        assert result == dest.resolve()
        assert dest.read_text(encoding="utf-8") == "mock eop data\n"

    def test_download_c04_uses_c04_url(self, tmp_path):
        with patch("tidejax.eop._download.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, "\n".join(_C04_LINES))
            download_c04_eop_file(tmp_path / "c04.txt")
            get = mock_client_cls.return_value.__enter__.return_value.get
            get.assert_called_once_with(IERS_C04_URL)

    def test_http_error_propagates(self, tmp_path):
        with patch("tidejax.eop._download.httpx.Client") as mock_client_cls:
            response = _mock_client(mock_client_cls, "")
            request = httpx.Request("GET", IERS_STANDARD_URL)
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                "404", request=request, response=httpx.Response(404, request=request)
            )
            with pytest.raises(httpx.HTTPStatusError):
                download_standard_eop_file(tmp_path / "finals.txt")
        assert not (tmp_path / "finals.txt").exists()

    def test_default_urls(self):
        assert "finals.all.iau2000.txt" in IERS_STANDARD_URL
        assert "eopc04" in IERS_C04_URL


class TestLoadCachedEOP:
    def test_fresh_file_reused(self, tmp_path):
        dest = _write(tmp_path / "finals.all.iau2000.txt", _STANDARD_LINES)
        with patch("tidejax.eop._providers.download_standard_eop_file") as mock_dl:
            eop = load_cached_eop(dest, max_age_days=7.0)
            mock_dl.assert_not_called()
        assert eop.size == 3

    def test_stale_file_triggers_download(self, tmp_path):
        dest = _write(tmp_path / "finals.all.iau2000.txt", _STANDARD_LINES)
        old_time = dest.stat().st_mtime - 30 * 86400
        os.utime(dest, (old_time, old_time))
        with patch("tidejax.eop._providers.download_standard_eop_file") as mock_dl:
            load_cached_eop(dest, max_age_days=7.0)
            mock_dl.assert_called_once_with(dest)

    def test_failed_refresh_uses_stale_file(self, tmp_path):
        dest = _write(tmp_path / "finals.all.iau2000.txt", _STANDARD_LINES)
        old_time = dest.stat().st_mtime - 30 * 86400
        os.utime(dest, (old_time, old_time))
        with patch(
            "tidejax.eop._providers.download_standard_eop_file",
            side_effect=httpx.ConnectError("offline"),
        ):
            eop = load_cached_eop(dest, max_age_days=7.0)
        assert eop.mjd_min == 60249.0

    def test_failed_download_falls_back_to_default(self, tmp_path):
        fallback = static_eop(mjd_min=58000.0, mjd_max=58005.0)
        with patch(
            "tidejax.eop._providers.download_standard_eop_file",
            side_effect=httpx.ConnectError("offline"),
        ), patch("tidejax.eop._providers.load_default_eop", return_value=fallback) as mock_default:
            eop = load_cached_eop(tmp_path / "missing.txt")
        mock_default.assert_called_once_with()
        assert eop is fallback
