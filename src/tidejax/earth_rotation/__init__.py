"""Earth rotation: orientation parameters and celestial-to-terrestrial rotation.

Typical usage::

    from tidejax import Epoch
    from tidejax.eop import load_eop_from_file
    from tidejax.earth_rotation import EarthRotationIers2010

    rotation = EarthRotationIers2010(load_eop_from_file("EOP_14C04_IAU2000.txt"))
    R = rotation.rotary_matrix(Epoch(2020, 1, 1, 12, 0, 0.0))
"""

from tidejax.earth_rotation._base import EarthOrientation, EarthRotation
from tidejax.earth_rotation._era import EarthRotationEra
from tidejax.earth_rotation._iers2010 import EarthRotationIers2010
from tidejax.earth_rotation._short_period import (
    PM_LIBRATION,
    UT_LIBRATION,
    ShortPeriodSeries,
    evaluate_series,
    load_ocean_tide_eop_file,
    tidal_arguments,
)
from tidejax.earth_rotation.config import EarthRotationConfig
from tidejax.earth_rotation.factory import create_earth_rotation

__all__ = [
    "EarthOrientation",
    "EarthRotation",
    "EarthRotationConfig",
    "EarthRotationEra",
    "EarthRotationIers2010",
    "PM_LIBRATION",
    "ShortPeriodSeries",
    "UT_LIBRATION",
    "create_earth_rotation",
    "evaluate_series",
    "load_ocean_tide_eop_file",
    "tidal_arguments",
]
