"""Create an Earth rotation provider from its configuration."""

from __future__ import annotations

import logging

from tidejax.earth_rotation._base import EarthRotation
from tidejax.earth_rotation._era import EarthRotationEra
from tidejax.earth_rotation._iers2010 import EarthRotationIers2010
from tidejax.earth_rotation._short_period import load_ocean_tide_eop_file
from tidejax.earth_rotation.config import EarthRotationConfig
from tidejax.eop import load_eop_from_file
from tidejax.utils.caching import resolve_data_path

logger = logging.getLogger(__name__)


def create_earth_rotation(config: EarthRotationConfig | None = None) -> EarthRotation:
    """Create an :class:`EarthRotation` from *config*.

    Args:
        config: Earth rotation configuration.  Defaults to
            ``EarthRotationConfig()``.

    Returns:
        The configured Earth rotation provider.

    Raises:
        FileNotFoundError: If a configured file does not exist.
        MalformedInputError: If the EOP table is too short for the
            interpolation degree or not strictly increasing.

    Examples:
        ```python
        from tidejax.earth_rotation import EarthRotationConfig, create_earth_rotation
        rotation = create_earth_rotation(EarthRotationConfig(model="era"))
        ```
    """
    if config is None:
        config = EarthRotationConfig()

    if config.model == "era":
        logger.debug("Creating ERA-only Earth rotation")
        return EarthRotationEra(config.ut1_utc)

    eop = None
    if config.eop_file is not None:
        eop = load_eop_from_file(resolve_data_path(config.eop_file), config.eop_format)

    ocean_tide_eop = None
    if config.ocean_tide_eop_file is not None:
        ocean_tide_eop = load_ocean_tide_eop_file(resolve_data_path(config.ocean_tide_eop_file))

    return EarthRotationIers2010(
        eop=eop,
        truncated_nutation=config.truncated_nutation,
        interpolation_degree=config.interpolation_degree,
        ocean_tide_eop=ocean_tide_eop,
    )
