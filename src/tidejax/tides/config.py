"""Configuration dataclasses of the tide components.

Each config carries a class-level ``type`` tag naming the component.
:func:`tide_config_from_dict` builds a config from a tagged mapping,
e.g. ``{"type": "poleTide", "mean_pole_model": "secular"}``.  File paths
may start with the ``{dataDir}`` placeholder.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from tidejax.tides.pole import MEAN_POLE_MODELS


def _check_bodies(bodies: tuple[str, ...], allowed: tuple[str, ...]) -> None:
    for body in bodies:
        if body not in allowed:
            raise ValueError(f"bodies must be a subset of {allowed}, got '{body}'")


def _check_mean_pole(model: str) -> None:
    if model not in MEAN_POLE_MODELS:
        raise ValueError(f"mean_pole_model must be one of {MEAN_POLE_MODELS}, got '{model}'")


@dataclass(frozen=True)
class AstronomicalTideConfig:
    """Direct tides of the Sun and the Moon.

    Args:
        bodies: Tide-generating bodies (``"sun"``, ``"moon"``).
        min_degree: Lowest degree of the field used for deformation.
        max_degree: Highest degree of the field used for deformation.
        factor: Scale of the result.
    """

    type: ClassVar[str] = "astronomicalTide"

    bodies: tuple[str, ...] = ("sun", "moon")
    min_degree: int = 2
    max_degree: int = 3
    factor: float = 1.0

    def __post_init__(self) -> None:
        _check_bodies(self.bodies, ("sun", "moon"))
        if not 0 <= self.min_degree <= self.max_degree:
            raise ValueError(
                f"need 0 <= min_degree <= max_degree, got {self.min_degree}, {self.max_degree}"
            )


@dataclass(frozen=True)
class EarthTideConfig:
    """IERS 2010 solid Earth tide.

    Args:
        bodies: Tide-generating bodies (``"sun"``, ``"moon"``).
        frequency_dependent_file: Step-2 correction table; ``None``
            disables step 2.
        remove_permanent_tide: Subtract the permanent part of C20.
        factor: Scale of the result.
    """

    type: ClassVar[str] = "earthTide"

    bodies: tuple[str, ...] = ("sun", "moon")
    frequency_dependent_file: str | None = None
    remove_permanent_tide: bool = False
    factor: float = 1.0

    def __post_init__(self) -> None:
        _check_bodies(self.bodies, ("sun", "moon"))


@dataclass(frozen=True)
class DoodsonHarmonicTideConfig:
    """Harmonic tide model, e.g. an ocean tide model.

    Args:
        file: Coefficient file.
        constituents: Restrict to these constituents; ``None`` uses all.
        min_degree: Degrees below this are zero.
        max_degree: Truncate the model; ``None`` keeps the file's degree.
        factor: Scale of the result.
    """

    type: ClassVar[str] = "doodsonHarmonicTide"

    file: str = ""
    constituents: tuple[str, ...] | None = None
    min_degree: int = 0
    max_degree: int | None = None
    factor: float = 1.0

    def __post_init__(self) -> None:
        if not self.file:
            raise ValueError("doodsonHarmonicTide needs a coefficient 'file'")
        if self.min_degree < 0:
            raise ValueError(f"min_degree must be non-negative, got {self.min_degree}")


@dataclass(frozen=True)
class PoleTideConfig:
    """Solid Earth pole tide.

    Args:
        kr: Real part of the pole tide Love number.
        ki: Imaginary part.
        mean_pole_model: ``"iers2010"`` or ``"secular"``.
        factor: Scale of the result.
    """

    type: ClassVar[str] = "poleTide"

    kr: float = 0.3077
    ki: float = 0.0036
    mean_pole_model: str = "iers2010"
    factor: float = 1.0

    def __post_init__(self) -> None:
        _check_mean_pole(self.mean_pole_model)


@dataclass(frozen=True)
class OceanPoleTideConfig:
    """Ocean pole tide.

    Args:
        file: Desai coefficient file; ``None`` uses the degree-2 closed form.
        max_degree: Drop degrees above this.
        gamma_real: Real part of the admittance.
        gamma_imag: Imaginary part of the admittance.
        mean_pole_model: ``"iers2010"`` or ``"secular"``.
        factor: Scale of the result.
    """

    type: ClassVar[str] = "oceanPoleTide"

    file: str | None = None
    max_degree: int | None = None
    gamma_real: float = 0.6870
    gamma_imag: float = 0.0036
    mean_pole_model: str = "iers2010"
    factor: float = 1.0

    def __post_init__(self) -> None:
        _check_mean_pole(self.mean_pole_model)


@dataclass(frozen=True)
class CentrifugalConfig:
    """Centrifugal potential of the Earth rotation.

    Args:
        factor: Scale of the result.
    """

    type: ClassVar[str] = "centrifugal"

    factor: float = 1.0


@dataclass(frozen=True)
class SolidMoonTideConfig:
    """Solid Moon tide raised by the Earth and the Sun.

    Args:
        k2: Lunar degree-2 Love number.
        bodies: Tide-generating bodies (``"earth"``, ``"sun"``).
        factor: Scale of the result.
    """

    type: ClassVar[str] = "solidMoonTide"

    k2: float = 0.024059
    bodies: tuple[str, ...] = ("earth", "sun")
    factor: float = 1.0

    def __post_init__(self) -> None:
        _check_bodies(self.bodies, ("earth", "sun"))


TideConfig = (
    AstronomicalTideConfig
    | EarthTideConfig
    | DoodsonHarmonicTideConfig
    | PoleTideConfig
    | OceanPoleTideConfig
    | CentrifugalConfig
    | SolidMoonTideConfig
)

TIDE_CONFIG_TYPES: dict[str, type] = {
    cls.type: cls
    for cls in (
        AstronomicalTideConfig,
        EarthTideConfig,
        DoodsonHarmonicTideConfig,
        PoleTideConfig,
        OceanPoleTideConfig,
        CentrifugalConfig,
        SolidMoonTideConfig,
    )
}
"""Config classes keyed by their type tag."""


def tide_config_from_dict(data: Mapping[str, Any]) -> TideConfig:
    """Build a tide config from a tagged mapping.

    List values are converted to tuples.

    Args:
        data: Mapping with a ``"type"`` key and the config's fields.

    Returns:
        The config instance.

    Raises:
        ValueError: If the type is missing or unknown, or a key is not a
            field of the config.

    Examples:
        ```python
        from tidejax.tides.config import tide_config_from_dict
        config = tide_config_from_dict({"type": "poleTide", "mean_pole_model": "secular"})
        ```
    """
    params = dict(data)
    tag = params.pop("type", None)
    if tag not in TIDE_CONFIG_TYPES:
        raise ValueError(
            f"Unknown tide type {tag!r}. Must be one of {sorted(TIDE_CONFIG_TYPES)}"
        )
    cls = TIDE_CONFIG_TYPES[tag]
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(params) - names)
    if unknown:
        raise ValueError(f"Unknown fields {unknown} for tide type '{tag}'")
    params = {k: tuple(v) if isinstance(v, list) else v for k, v in params.items()}
    return cls(**params)
