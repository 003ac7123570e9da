"""
Physical and Calibration Constants for Flat-Earth Geodesy.

This module provides the reference ellipsoid constants with their uncertainty
bounds and sources, together with the empirical polynomial coefficients used
by the flat projection to turn degrees into kilometres.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Mean Earth radius: IUGG
- Flat projection coefficients: mapbox/cheap-ruler, derived from the
  NGA "Length of a Degree of Latitude and Longitude" series
"""

from dataclasses import dataclass
from typing import Final, Tuple


@dataclass(frozen=True)
class Constant:
    """A physical constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The unit of the constant (pint-parsable).
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class PhysicalConstants:
    """Registry of Earth geometry constants.

    All constants are class attributes with full metadata including
    uncertainty bounds and authoritative sources.

    Earth Geometry (WGS84)
    ----------------------
    These constants define the reference ellipsoid used by the
    Vincenty oracle. Values are in metres; distances computed from
    them come out in metres as well.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=6_356_752.314245,
        uncertainty=0.0001,
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-minor axis (polar radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_008.8,
        uncertainty=0.1,
        unit="m",
        source="IUGG mean radius",
        description="Mean radius of Earth (spherical comparator only)"
    )


class FlatProjectionCoefficients:
    """Polynomial fit of the WGS84 length of one degree, in kilometres.

    With ``c_n = cos(n * phi)`` at the reference latitude ``phi``:

    - ``kx = KX[0] * c_1 + KX[1] * c_3 + KX[2] * c_5`` (one degree of longitude)
    - ``ky = KY[0] + KY[1] * c_2 + KY[2] * c_4`` (one degree of latitude)

    The signs are part of the coefficients.
    """

    KX: Final[Tuple[float, float, float]] = (111.41513, -0.09455, 0.00012)
    KY: Final[Tuple[float, float, float]] = (111.13209, -0.56605, 0.0012)
