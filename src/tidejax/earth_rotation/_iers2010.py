"""Earth rotation according to the IERS Conventions 2010.

:class:`EarthRotationIers2010` interpolates an EOP series, adds the
short-period ocean tide and libration corrections, and evaluates the
IAU 2006/2000A precession-nutation through ``pyerfa``:

- polar motion ``(xp, yp)`` and ``dX, dY`` from the EOP table,
- UT1-UTC from the interpolated UT1-GPS, so leap seconds never enter
  the interpolation,
- diurnal and semidiurnal ocean tide variations from a coefficient table
  (IERS Conventions Tables 8.2 and 8.3 layout), warned about when absent,
- libration in polar motion and in UT1 / LOD,
- X, Y from ``erfa.xy06`` (or ``erfa.xys00b`` with truncated
  nutation), s from ``erfa.s06`` and s' from :func:`tidejax.sofa.sp00`.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp

from tidejax.config import get_dtype
from tidejax.constants import DEG2RAD
from tidejax.earth_rotation._base import EarthOrientation, EarthRotation
from tidejax.earth_rotation._short_period import (
    PM_LIBRATION,
    UT_LIBRATION,
    ShortPeriodSeries,
    evaluate_series,
)
from tidejax.eop import EOPData
from tidejax.epoch import Epoch
from tidejax.errors import MissingDependencyError, OutOfRangeError
from tidejax.interpolation import PolynomialInterpolator
from tidejax.sofa import sp00
from tidejax.time_scales import gps_to_tt, gps_to_utc

try:
    import erfa
except ImportError:
    erfa = None

logger = logging.getLogger(__name__)

_UAS2RAD: float = 1e-6 * DEG2RAD / 3600.0
_US2S: float = 1e-6


class EarthRotationIers2010(EarthRotation):
    """IERS 2010 Earth rotation driven by an EOP series.

    Args:
        eop: Earth orientation parameter series.  When ``None`` the
            interpolated EOPs are zero and only the models are evaluated.
        truncated_nutation: Use the truncated IAU 2000B nutation
            (``erfa.xys00b``) instead of IAU 2006/2000A.
        interpolation_degree: Degree of the EOP interpolation polynomial.
        ocean_tide_eop: Diurnal / semidiurnal ocean tide EOP series with
            outputs ``(x_p, y_p, UT1, LOD)`` in µas and µs.

    Raises:
        MalformedInputError: If *eop* holds fewer than
            ``interpolation_degree + 1`` samples.
    """

    def __init__(
        self,
        eop: EOPData | None = None,
        truncated_nutation: bool = False,
        interpolation_degree: int = 3,
        ocean_tide_eop: ShortPeriodSeries | None = None,
    ) -> None:
        self.eop = eop
        self.truncated_nutation = truncated_nutation
        self.interpolator = PolynomialInterpolator(interpolation_degree)
        self.ocean_tide_eop = ocean_tide_eop

        self._values = None
        if eop is not None:
            self.interpolator.check_nodes(eop.mjd)
            self._values = jnp.stack(
                [eop.pm_x, eop.pm_y, eop.ut1_gps, eop.lod, eop.dX, eop.dY], axis=1
            )
            logger.debug(
                "EOP series MJD %.1f to %.1f (%d samples)", eop.mjd_min, eop.mjd_max, eop.size
            )
        else:
            logger.info("No EOP series given; interpolated EOPs are zero")
        if ocean_tide_eop is None:
            logger.warning(
                "No ocean tide EOP model given; diurnal and semidiurnal ocean tide "
                "variations of polar motion and UT1 are not applied"
            )

    def earth_orientation_parameter(self, time_gps: Epoch) -> EarthOrientation:
        """Earth orientation angles at *time_gps*.

        Args:
            time_gps: Query instant in GPS time.

        Returns:
            EarthOrientation: Angles in radians, UT1-UTC and LOD in seconds.

        Raises:
            MissingDependencyError: If ``pyerfa`` is not installed.
            OutOfRangeError: If the UTC instant lies outside the EOP series.
        """
        if erfa is None:
            raise MissingDependencyError(
                "EarthRotationIers2010 needs the 'pyerfa' package for precession-nutation"
            )

        dtype = get_dtype()
        time_utc = gps_to_utc(time_gps)
        mjd_utc = time_utc.mjd()

        if self.eop is not None:
            if mjd_utc < self.eop.mjd_min or mjd_utc > self.eop.mjd_max:
                raise OutOfRangeError(f"No EOPs available: {time_gps}")
            xp, yp, ut1_gps, lod, dx, dy = self.interpolator.interpolate(
                mjd_utc, self.eop.mjd, self._values
            )
            delta_ut = ut1_gps + (time_gps - time_utc)
        else:
            xp = yp = delta_ut = lod = dx = dy = jnp.zeros((), dtype=dtype)

        if self.ocean_tide_eop is not None:
            ocean = evaluate_series(self.ocean_tide_eop, mjd_utc)
            xp = xp + ocean[0] * _UAS2RAD
            yp = yp + ocean[1] * _UAS2RAD
            delta_ut = delta_ut + ocean[2] * _US2S
            lod = lod + ocean[3] * _US2S

        pm = evaluate_series(PM_LIBRATION, mjd_utc)
        xp = xp + pm[0] * _UAS2RAD
        yp = yp + pm[1] * _UAS2RAD

        ut = evaluate_series(UT_LIBRATION, mjd_utc)
        delta_ut = delta_ut + ut[0] * _US2S
        lod = lod + ut[1] * _US2S

        dj1, dj2 = gps_to_tt(time_gps).jd_parts()
        sp = sp00(jnp.asarray(dj1, dtype=dtype), jnp.asarray(dj2, dtype=dtype))
        if self.truncated_nutation:
            x, y, s = erfa.xys00b(dj1, dj2)
        else:
            x, y = erfa.xy06(dj1, dj2)
            s = erfa.s06(dj1, dj2, x, y)

        return EarthOrientation(
            xp=jnp.asarray(xp, dtype=dtype),
            yp=jnp.asarray(yp, dtype=dtype),
            sp=sp,
            delta_ut=jnp.asarray(delta_ut, dtype=dtype),
            lod=jnp.asarray(lod, dtype=dtype),
            x=jnp.asarray(x, dtype=dtype) + dx,
            y=jnp.asarray(y, dtype=dtype) + dy,
            s=jnp.asarray(s, dtype=dtype),
        )
