"""Conversions of :class:`~tidejax.epoch.Epoch` instants between time scales.

GPS time is the working scale of the Earth rotation and tide models.
GPS and TT are continuous atomic scales with the fixed offset
``TT - GPS = 51.184 s``; UTC follows GPS with the leap-second offset
``GPS - UTC = (TAI - UTC) - 19 s``.

All functions are pure: they depend only on the input instant and the
built-in leap-second table.
"""

from __future__ import annotations

from tidejax.epoch import Epoch
from tidejax.time import GPS_TAI, TT_TAI, gps_minus_utc, gps_minus_utc_at_gps

TT_GPS: float = TT_TAI - GPS_TAI
"""Offset TT - GPS in seconds (51.184 s)."""


def utc_to_gps(epc: Epoch) -> Epoch:
    """Convert a UTC epoch to GPS time.

    Args:
        epc: Instant in UTC.

    Returns:
        Epoch: The same instant in GPS time.
    """
    return epc + float(gps_minus_utc(epc.mjd()))


def gps_to_utc(epc: Epoch) -> Epoch:
    """Convert a GPS epoch to UTC.

    Args:
        epc: Instant in GPS time.

    Returns:
        Epoch: The same instant in UTC.
    """
    return epc - float(gps_minus_utc_at_gps(epc.mjd()))


def gps_to_tt(epc: Epoch) -> Epoch:
    """Convert a GPS epoch to Terrestrial Time.

    Args:
        epc: Instant in GPS time.

    Returns:
        Epoch: The same instant in TT.
    """
    return epc + TT_GPS


def tt_to_gps(epc: Epoch) -> Epoch:
    """Convert a Terrestrial Time epoch to GPS time.

    Args:
        epc: Instant in TT.

    Returns:
        Epoch: The same instant in GPS time.
    """
    return epc - TT_GPS
