"""Tidal forcing: tide components and their aggregator.

Typical usage::

    from tidejax.tides import Tides

    tides = Tides.from_config([
        {"type": "astronomicalTide"},
        {"type": "earthTide"},
        {"type": "poleTide"},
        {"type": "centrifugal"},
    ])
    g = tides.acceleration(time_gps, point, rot_earth, rotation, ephemerides)
"""

from tidejax.tides._base import Tide, tidal_coefficients
from tidejax.tides.aggregator import Tides
from tidejax.tides.astronomical import AstronomicalTide
from tidejax.tides.centrifugal import Centrifugal
from tidejax.tides.config import (
    AstronomicalTideConfig,
    CentrifugalConfig,
    DoodsonHarmonicTideConfig,
    EarthTideConfig,
    OceanPoleTideConfig,
    PoleTideConfig,
    SolidMoonTideConfig,
    TIDE_CONFIG_TYPES,
    tide_config_from_dict,
)
from tidejax.tides.doodson_harmonic import (
    DoodsonHarmonic,
    DoodsonHarmonicTide,
    read_doodson_harmonic,
)
from tidejax.tides.earth import EarthTide, FrequencyCorrection, load_frequency_corrections
from tidejax.tides.factory import create_tide, create_tides
from tidejax.tides.ocean_pole import (
    OceanPoleCoefficients,
    OceanPoleTide,
    read_ocean_pole_coefficients,
)
from tidejax.tides.pole import MEAN_POLE_MODELS, PoleTide, mean_pole
from tidejax.tides.solid_moon import SolidMoonTide

__all__ = [
    "AstronomicalTide",
    "AstronomicalTideConfig",
    "Centrifugal",
    "CentrifugalConfig",
    "DoodsonHarmonic",
    "DoodsonHarmonicTide",
    "DoodsonHarmonicTideConfig",
    "EarthTide",
    "EarthTideConfig",
    "FrequencyCorrection",
    "MEAN_POLE_MODELS",
    "OceanPoleCoefficients",
    "OceanPoleTide",
    "OceanPoleTideConfig",
    "PoleTide",
    "PoleTideConfig",
    "SolidMoonTide",
    "SolidMoonTideConfig",
    "TIDE_CONFIG_TYPES",
    "Tide",
    "Tides",
    "create_tide",
    "create_tides",
    "load_frequency_corrections",
    "mean_pole",
    "read_doodson_harmonic",
    "read_ocean_pole_coefficients",
    "tidal_coefficients",
    "tide_config_from_dict",
]
