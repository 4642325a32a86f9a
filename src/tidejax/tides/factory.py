"""Create tide components from their configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from tidejax.ephemerides import Body
from tidejax.tides._base import Tide
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
    TideConfig,
    tide_config_from_dict,
)
from tidejax.tides.doodson_harmonic import DoodsonHarmonicTide, read_doodson_harmonic
from tidejax.tides.earth import EarthTide, load_frequency_corrections
from tidejax.tides.ocean_pole import OceanPoleTide, read_ocean_pole_coefficients
from tidejax.tides.pole import PoleTide
from tidejax.tides.solid_moon import SolidMoonTide
from tidejax.utils.caching import resolve_data_path

logger = logging.getLogger(__name__)


def _bodies(names: Iterable[str]) -> tuple[Body, ...]:
    return tuple(Body(name) for name in names)


def create_tide(config: TideConfig | Mapping[str, Any]) -> Tide:
    """Create a tide component from its config.

    Args:
        config: A tide config or a tagged mapping accepted by
            :func:`~tidejax.tides.config.tide_config_from_dict`.

    Returns:
        The configured component.

    Raises:
        ValueError: If the config type is unknown.
        FileNotFoundError: If a configured file does not exist.

    Examples:
        ```python
        from tidejax.tides import PoleTideConfig, create_tide
        tide = create_tide(PoleTideConfig(mean_pole_model="secular"))
        ```
    """
    if isinstance(config, Mapping):
        config = tide_config_from_dict(config)
    logger.debug("Creating tide component '%s'", getattr(config, "type", type(config).__name__))

    if isinstance(config, AstronomicalTideConfig):
        return AstronomicalTide(
            _bodies(config.bodies), config.min_degree, config.max_degree, config.factor
        )
    if isinstance(config, EarthTideConfig):
        corrections = ()
        if config.frequency_dependent_file is not None:
            corrections = load_frequency_corrections(resolve_data_path(config.frequency_dependent_file))
        return EarthTide(
            _bodies(config.bodies), corrections, config.remove_permanent_tide, config.factor
        )
    if isinstance(config, DoodsonHarmonicTideConfig):
        model = read_doodson_harmonic(resolve_data_path(config.file), config.max_degree)
        return DoodsonHarmonicTide(
            model, config.constituents, config.min_degree, config.max_degree, config.factor
        )
    if isinstance(config, PoleTideConfig):
        return PoleTide(config.kr, config.ki, config.mean_pole_model, config.factor)
    if isinstance(config, OceanPoleTideConfig):
        coefficients = None
        if config.file is not None:
            coefficients = read_ocean_pole_coefficients(resolve_data_path(config.file), config.max_degree)
        return OceanPoleTide(
            coefficients,
            gamma=complex(config.gamma_real, config.gamma_imag),
            mean_pole_model=config.mean_pole_model,
            factor=config.factor,
        )
    if isinstance(config, CentrifugalConfig):
        return Centrifugal(config.factor)
    if isinstance(config, SolidMoonTideConfig):
        return SolidMoonTide((0.0, 0.0, config.k2), _bodies(config.bodies), config.factor)
    raise ValueError(f"Unsupported tide config {config!r}")


def create_tides(configs: Iterable[TideConfig | Mapping[str, Any]]) -> Tides:
    """Create a :class:`~tidejax.tides.aggregator.Tides` aggregator.

    Args:
        configs: Tide configs in evaluation order.

    Returns:
        Tides: Aggregator of the configured components.
    """
    return Tides([create_tide(config) for config in configs])
