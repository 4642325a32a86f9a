import pytest

from tidejax.epoch import Epoch


# ──────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────


class TestEpochConstruction:
    def test_epoch_from_date(self):
        epc = Epoch(2000, 1, 1, 12, 0, 0.0)
        assert epc.caldate() == (2000, 1, 1, 12, 0, pytest.approx(0.0, abs=1e-6))
        assert epc.mjd_int() == 51544
        assert epc.mjd_mod() == pytest.approx(0.5, abs=1e-15)

    def test_epoch_from_date_defaults(self):
        epc = Epoch(2000, 1, 1)
        assert epc.mjd() == 51544.0

    def test_epoch_from_string_iso(self):
        epc = Epoch("2024-03-15T06:30:45Z")
        assert epc == Epoch(2024, 3, 15, 6, 30, 45.0)

    def test_epoch_from_string_fractional_seconds(self):
        epc = Epoch("2020-06-15T10:30:15.125Z")
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2020, 6, 15, 10, 30)
        assert second == pytest.approx(15.125, abs=1e-6)

    def test_epoch_from_string_invalid(self):
        with pytest.raises(ValueError):
            Epoch("2024/03/15")

    def test_epoch_copy(self):
        epc = Epoch(2024, 1, 1, 12, 0, 0.0)
        copy = Epoch(epc)
        assert copy == epc
        assert copy is not epc

    def test_epoch_invalid_type(self):
        with pytest.raises(ValueError):
            Epoch(3.5)

    def test_epoch_no_args(self):
        with pytest.raises(ValueError):
            Epoch()

    def test_from_mjd_splits_fraction(self):
        epc = Epoch.from_mjd(58000.75)
        assert epc.mjd_int() == 58000
        assert epc.mjd_mod() == pytest.approx(0.75, abs=1e-12)

    def test_from_mjd_with_day_fraction(self):
        epc = Epoch.from_mjd(58000, 1.25)
        assert epc.mjd_int() == 58001
        assert epc.mjd_mod() == pytest.approx(0.25, abs=1e-15)

    def test_from_mjd_negative_fraction(self):
        epc = Epoch.from_mjd(58000, -0.25)
        assert epc.mjd_int() == 57999
        assert epc.mjd_mod() == pytest.approx(0.75, abs=1e-15)


# ──────────────────────────────────────────────
# Arithmetic
# ──────────────────────────────────────────────


class TestEpochArithmetic:
    def test_add_seconds(self):
        epc = Epoch(2000, 1, 1) + 60.0
        assert epc.caldate()[3:5] == (0, 1)

    def test_add_day_rollover(self):
        epc = Epoch(2000, 1, 1, 23, 0, 0.0) + 7200.0
        assert epc.caldate()[:4] == (2000, 1, 2, 1)

    def test_add_negative(self):
        assert Epoch(2000, 1, 2) + (-86400.0) == Epoch(2000, 1, 1)

    def test_subtract_seconds(self):
        assert Epoch(2000, 1, 1, 1, 0, 0.0) - 3600.0 == Epoch(2000, 1, 1)

    def test_subtract_epoch(self):
        assert Epoch(2000, 1, 2) - Epoch(2000, 1, 1) == pytest.approx(86400.0)

    def test_subtract_epoch_keeps_microseconds(self):
        """The day split keeps sub-microsecond differences at present-day dates."""
        epc = Epoch(2024, 1, 1, 12, 0, 0.0)
        assert (epc + 1e-6) - epc == pytest.approx(1e-6, abs=1e-9)

    def test_iadd(self):
        epc = Epoch(2000, 1, 1)
        epc += 3600.0
        assert epc.caldate()[3] == 1

    def test_jd_parts(self):
        dj1, dj2 = Epoch(2000, 1, 1, 12, 0, 0.0).jd_parts()
        assert dj1 == 2451544.5
        assert dj2 == pytest.approx(0.5, abs=1e-15)


# ──────────────────────────────────────────────
# Comparison and hashing
# ──────────────────────────────────────────────


class TestEpochComparison:
    def test_equality_tolerance(self):
        epc = Epoch(2024, 1, 1)
        assert epc == epc + 1e-10
        assert epc != epc + 1e-6

    def test_ordering(self):
        a = Epoch(2024, 1, 1)
        b = Epoch(2024, 1, 1, 0, 0, 1.0)
        assert a < b
        assert b > a
        assert a <= a
        assert b >= a

    def test_not_equal_to_non_epoch(self):
        assert Epoch(2024, 1, 1) != 60310.0

    def test_hash_equal_epochs(self):
        assert hash(Epoch(2024, 1, 1)) == hash(Epoch.from_mjd(60310.0))

    def test_as_dict_key(self):
        values = {Epoch(2024, 1, 1): "a"}
        assert values[Epoch("2024-01-01")] == "a"


class TestEpochString:
    def test_str_format(self):
        assert str(Epoch(2024, 3, 15, 6, 30, 45.5)) == "2024-03-15T06:30:45.500Z"

    def test_repr(self):
        assert repr(Epoch.from_mjd(58000.5)) == "Epoch(mjd_int=58000, mjd_mod=0.5)"
