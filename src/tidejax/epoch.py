"""The epoch module provides the ``Epoch`` class for representing instants in time.

An Epoch stores an integer Modified Julian Day number and the fraction of
that day in ``[0, 1)``.  The split keeps the time of day at ~1e-11 day
(~1 µs) resolution independent of the date, which matters for polynomial
interpolation of Earth orientation parameters and for tidal arguments.

The Epoch itself carries no time scale.  Tide and Earth rotation queries
take GPS-scale epochs; :mod:`tidejax.time_scales` converts between UTC,
GPS and TT.

Epoch values are concrete host-side scalars (Python ``int`` and ``float``)
so they can be hashed, ordered and used as dictionary keys.
"""

from __future__ import annotations

import math
import re

from .config import get_epoch_eq_tolerance
from .constants import JD_MJD_OFFSET, SECONDS_PER_DAY
from .time import caldate_to_mjd, mjd_to_caldate

# Valid ISO 8601 epoch string patterns
_EPOCH_PATTERNS = [
    # YYYY-MM-DD
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    # YYYY-MM-DDTHH:MM:SSZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})Z$'),
    # YYYY-MM-DDTHH:MM:SS.fffZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})\.(\d+)Z$'),
]


class Epoch:
    """Represents a single instant in time as integer MJD plus day fraction.

    Constructors:
        Epoch(2018, 1, 1)
        Epoch(2018, 1, 1, 12, 0, 0.0)
        Epoch("2018-01-01T12:00:00Z")
        Epoch(other_epoch)
        Epoch.from_mjd(58119.5)
        Epoch.from_mjd(58119, 0.5)

    Subtracting two epochs yields their difference in seconds; adding or
    subtracting a number of seconds yields a new epoch.
    """

    __slots__ = ('_mjd_int', '_mjd_mod')

    def __init__(self, *args: int | float | str | Epoch) -> None:
        """Initialize Epoch. Supports multiple constructor forms.

        Args:
            *args: Either (year, month, day[, hour, minute, second]),
                a string in ISO 8601 format, or another Epoch instance.
        """
        self._mjd_int = 0
        self._mjd_mod = 0.0

        if len(args) == 1:
            if isinstance(args[0], str):
                self._init_string(args[0])
            elif isinstance(args[0], Epoch):
                self._mjd_int = args[0]._mjd_int
                self._mjd_mod = args[0]._mjd_mod
            else:
                raise ValueError(f"Cannot construct Epoch from {type(args[0])}")
        elif 3 <= len(args) <= 6:
            self._init_date(*args)
        else:
            raise ValueError(
                "Epoch requires date components (3-6 args), a string, or an Epoch"
            )

    @classmethod
    def from_mjd(cls, mjd: int | float, mjd_mod: float = 0.0) -> Epoch:
        """Create an Epoch from a Modified Julian Date.

        Args:
            mjd: Modified Julian Date, may include a fractional part.
            mjd_mod: Additional fraction of a day added to *mjd*.

        Returns:
            Epoch: New Epoch instance.
        """
        mjd_int = math.floor(mjd)
        return cls._from_parts(int(mjd_int), (float(mjd) - mjd_int) + float(mjd_mod))

    @classmethod
    def _from_parts(cls, mjd_int: int, mjd_mod: float) -> Epoch:
        """Create a normalized Epoch from a day number and an unnormalized fraction."""
        obj = object.__new__(cls)
        day_offset = math.floor(mjd_mod)
        obj._mjd_int = mjd_int + day_offset
        obj._mjd_mod = mjd_mod - day_offset
        # floating-point rounding can land exactly on 1.0
        if obj._mjd_mod >= 1.0:
            obj._mjd_int += 1
            obj._mjd_mod = 0.0
        return obj

    def _init_date(self, year, month, day, hour=0, minute=0, second=0.0):
        """Initialize from calendar date components.

        Args:
            year (int): Year.
            month (int): Month.
            day (int): Day.
            hour (int): Hour. Default: 0
            minute (int): Minute. Default: 0
            second (float): Second, may include fractional part. Default: 0.0
        """
        mjd_int = int(round(float(caldate_to_mjd(year, month, day))))
        seconds = hour * 3600.0 + minute * 60.0 + second
        other = Epoch._from_parts(mjd_int, seconds / SECONDS_PER_DAY)
        self._mjd_int = other._mjd_int
        self._mjd_mod = other._mjd_mod

    def _init_string(self, string):
        """Initialize from an ISO 8601 string.

        Supported formats:
            - ``YYYY-MM-DD``
            - ``YYYY-MM-DDTHH:MM:SSZ``
            - ``YYYY-MM-DDTHH:MM:SS.fffZ``

        Args:
            string (str): ISO 8601 date/time string.
        """
        for pattern in _EPOCH_PATTERNS:
            m = pattern.match(string)
            if m:
                groups = m.groups()
                year = int(groups[0])
                month = int(groups[1])
                day = int(groups[2])

                hour = 0
                minute = 0
                second = 0.0

                if len(groups) >= 6:
                    hour = int(groups[3])
                    minute = int(groups[4])
                    second = float(groups[5])

                if len(groups) == 7:
                    second += float(f"0.{groups[6]}")

                self._init_date(year, month, day, hour, minute, second)
                return

        raise ValueError(
            f'Invalid Epoch string: "{string}" is not ISO 8601 compliant'
        )

    # Arithmetic operators

    def __add__(self, delta: float) -> Epoch:
        """Return a new Epoch advanced by *delta* seconds."""
        return Epoch._from_parts(self._mjd_int, self._mjd_mod + float(delta) / SECONDS_PER_DAY)

    def __sub__(self, other: Epoch | float) -> Epoch | float:
        """Subtract seconds or compute difference between Epochs.

        Args:
            other: If Epoch, returns the time difference in seconds.
                If numeric, returns a new Epoch with seconds subtracted.

        Returns:
            float or Epoch: Time difference in seconds, or new Epoch.
        """
        if isinstance(other, Epoch):
            return ((self._mjd_int - other._mjd_int)
                    + (self._mjd_mod - other._mjd_mod)) * SECONDS_PER_DAY
        return self.__add__(-float(other))

    # Comparison operators

    def __eq__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return abs(self - other) < get_epoch_eq_tolerance()

    def __ne__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return not self.__eq__(other)

    def __lt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return (self._mjd_int, self._mjd_mod) < (other._mjd_int, other._mjd_mod)

    def __le__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self.__lt__(other) or self.__eq__(other)

    def __gt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return (self._mjd_int, self._mjd_mod) > (other._mjd_int, other._mjd_mod)

    def __ge__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self.__gt__(other) or self.__eq__(other)

    # Time properties

    def mjd_int(self) -> int:
        """Return the integer part of the Modified Julian Date."""
        return self._mjd_int

    def mjd_mod(self) -> float:
        """Return the fraction of the day in ``[0, 1)``."""
        return self._mjd_mod

    def mjd(self) -> float:
        """Return the Modified Julian Date as a single float.

        A float64 MJD resolves ~1e-11 day (~1 µs) at present-day dates.
        """
        return self._mjd_int + self._mjd_mod

    def jd_parts(self) -> tuple[float, float]:
        """Return the two-part Julian Date used by SOFA/ERFA routines.

        Returns:
            tuple[float, float]: ``(2400000.5 + mjd_int, mjd_mod)``.
        """
        return JD_MJD_OFFSET + self._mjd_int, self._mjd_mod

    def caldate(self) -> tuple[int, int, int, int, int, float]:
        """Return the calendar date components.

        Returns:
            tuple: (year, month, day, hour, minute, second) where second
                includes fractional part.
        """
        year, month, day, _, _, _ = mjd_to_caldate(float(self._mjd_int))

        seconds = self._mjd_mod * SECONDS_PER_DAY
        hour = int(seconds // 3600)
        seconds -= hour * 3600
        minute = int(seconds // 60)
        second = seconds - minute * 60

        return int(year), int(month), int(day), hour, minute, second

    # String representations

    def __str__(self):
        year, month, day, hour, minute, second = self.caldate()
        return (f'{year:04d}-{month:02d}-{day:02d}T'
                f'{hour:02d}:{minute:02d}:{second:06.3f}Z')

    def __repr__(self):
        return f'Epoch(mjd_int={self._mjd_int}, mjd_mod={self._mjd_mod!r})'

    def __hash__(self):
        return hash((self._mjd_int, round(self._mjd_mod * SECONDS_PER_DAY, 6)))
