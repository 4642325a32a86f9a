"""
tidejax evaluates Earth rotation and tidal forcing for gravity field and orbit recovery, implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    RAD2AS,
    JD_MJD_OFFSET,
    MJD2000,
    R_EARTH,
    GM_EARTH,
    OMEGA_EARTH,
    GM_SUN,
    GM_MOON,
    R_MOON,
)

from .rotations import (
    Rx,
    Ry,
    Rz
)

from .config import set_dtype, get_dtype
from .epoch import Epoch
from .errors import (
    TidejaxError,
    OutOfRangeError,
    MalformedInputError,
    MissingDependencyError,
)

from .time_scales import (
    utc_to_gps,
    gps_to_utc,
    gps_to_tt,
    tt_to_gps,
)

from .eop import (
    EOPData,
    eop_from_table,
    load_eop_from_file,
    load_cached_eop,
    static_eop,
)

from .earth_rotation import (
    EarthOrientation,
    EarthRotation,
    EarthRotationConfig,
    EarthRotationEra,
    EarthRotationIers2010,
    create_earth_rotation,
)

from .ephemerides import AnalyticEphemerides, Body, Ephemerides
from .doodson import Doodson
from .spherical_harmonics import SphericalHarmonics, read_gfc

from .tides import (
    Tide,
    Tides,
    create_tide,
    create_tides,
)
