"""
Reference Ellipsoid Models.

This module defines the reference ellipsoid used by the exact (Vincenty)
distance oracle, and the radii of curvature that the flat projection's
polynomial factors approximate.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: WGS84 reference ellipsoid

The length of one degree of latitude is ``pi/180 * M(phi)`` and the length of
one degree of longitude is ``pi/180 * N(phi) * cos(phi)``, where ``M`` and
``N`` are the meridional and prime-vertical radii of curvature. The flat
projection replaces both with cheap cosine polynomials fitted to WGS84.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Torge, W. (2001). Geodesy (3rd ed.). de Gruyter.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from common.constants import PhysicalConstants


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius). Its unit is the unit of every
        distance computed on this ellipsoid.
    f : float
        Flattening: f = (a - b) / a
    name : str
        Identifier for the ellipsoid.

    Derived Parameters
    ------------------
    b : float
        Semi-minor axis (polar radius).
    e2 : float
        First eccentricity squared: e² = (a² - b²) / a²
    ep2 : float
        Second eccentricity squared: e'² = (a² - b²) / b²
    """
    a: float
    f: float
    name: str

    @property
    def b(self) -> float:
        """Semi-minor axis."""
        return self.a * (1 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)

    @property
    def ep2(self) -> float:
        """Second eccentricity squared."""
        return self.e2 / (1 - self.e2)

    @classmethod
    def from_axes(cls, a: float, b: float, name: str = "custom") -> 'EllipsoidParameters':
        """Create an ellipsoid from its semi-major and semi-minor axes."""
        return cls(a=a, f=(a - b) / a, name=name)


# WGS84 ellipsoid - the standard reference for this system
WGS84Ellipsoid = EllipsoidParameters(
    a=PhysicalConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=PhysicalConstants.EARTH_FLATTENING.value,
    name="WGS84"
)


def radius_of_curvature_meridian(
    latitude_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the meridian plane.

    This is the radius of curvature for north-south motion along
    a meridian (line of constant longitude).

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature M in the ellipsoid's unit.

    Notes
    -----
    M = a(1 - e²) / (1 - e² sin²φ)^(3/2)

    At the equator (φ=0): M ≈ 6,335,439 m
    At the poles (φ=±90°): M ≈ 6,399,594 m
    """
    sin_lat = np.sin(np.radians(latitude_deg))
    denominator = (1 - ellipsoid.e2 * sin_lat**2) ** 1.5
    return ellipsoid.a * (1 - ellipsoid.e2) / denominator


def radius_of_curvature_prime_vertical(
    latitude_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the prime vertical.

    This is the radius of curvature for east-west motion along
    a parallel (line of constant latitude).

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature N in the ellipsoid's unit.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)

    At the equator (φ=0): N = a ≈ 6,378,137 m
    At the poles (φ=±90°): N ≈ 6,399,594 m
    """
    sin_lat = np.sin(np.radians(latitude_deg))
    denominator = np.sqrt(1 - ellipsoid.e2 * sin_lat**2)
    return ellipsoid.a / denominator


def degree_lengths(
    latitude_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> Tuple[float, float]:
    """Exact length of one degree of longitude and of latitude.

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    Tuple[float, float]
        (longitude_degree_length, latitude_degree_length) in the
        ellipsoid's unit. These are the quantities `FlatProjection.kx`
        and `FlatProjection.ky` approximate (in kilometres).
    """
    per_radian = np.pi / 180.0
    cos_lat = np.cos(np.radians(latitude_deg))
    along_parallel = per_radian * radius_of_curvature_prime_vertical(latitude_deg, ellipsoid) * cos_lat
    along_meridian = per_radian * radius_of_curvature_meridian(latitude_deg, ellipsoid)
    return along_parallel, along_meridian
