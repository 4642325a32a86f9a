"""Configuration of the Earth rotation provider.

File paths may start with the ``{dataDir}`` placeholder, which is
resolved against the data directory (``$TIDEJAX_DATA``, default
``~/.cache/tidejax``) when the provider is created.
"""

from __future__ import annotations

from dataclasses import dataclass

_EOP_FORMATS = ("auto", "standard", "c04", "columns")


@dataclass(frozen=True)
class EarthRotationConfig:
    """Configuration for :func:`~tidejax.earth_rotation.factory.create_earth_rotation`.

    Args:
        model: ``"iers2010"`` or ``"era"``.
        eop_file: EOP series file.  ``None`` disables the EOP table.
        eop_format: Layout of *eop_file*, one of ``"auto"``,
            ``"standard"``, ``"c04"`` or ``"columns"``.
        truncated_nutation: Use IAU 2000B instead of IAU 2006/2000A.
        interpolation_degree: Degree of the EOP interpolation polynomial.
        ocean_tide_eop_file: Diurnal / semidiurnal ocean tide EOP table.
            ``None`` disables the correction.
        ut1_utc: Constant UT1-UTC [s], only used by the ``"era"`` model.

    Examples:
        ```python
        from tidejax.earth_rotation.config import EarthRotationConfig
        config = EarthRotationConfig(eop_file="eop.txt", interpolation_degree=1)
        ```
    """

    model: str = "iers2010"
    eop_file: str | None = "{dataDir}/earthRotation/EOP_14C04_IAU2000.txt"
    eop_format: str = "auto"
    truncated_nutation: bool = False
    interpolation_degree: int = 3
    ocean_tide_eop_file: str | None = None
    ut1_utc: float = 0.0

    def __post_init__(self) -> None:
        if self.model not in ("iers2010", "era"):
            raise ValueError(f"model must be 'iers2010' or 'era', got '{self.model}'")
        if self.eop_format not in _EOP_FORMATS:
            raise ValueError(
                f"eop_format must be one of {_EOP_FORMATS}, got '{self.eop_format}'"
            )
        if self.interpolation_degree < 0:
            raise ValueError(
                f"interpolation_degree must be non-negative, got {self.interpolation_degree}"
            )
