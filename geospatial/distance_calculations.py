"""
Exact Ellipsoidal Distance Calculations.

This module provides the reference distances against which the flat
projection is validated. They are independent of the flat projection
and valid well beyond its ~500 km range.

Scientific Context
------------------
Domain: Geodesy, geodesics on an ellipsoid of revolution
Model: Vincenty's inverse method (iterative series on the auxiliary sphere)

Known Limitations
-----------------
1. Vincenty's iteration does not converge for some nearly antipodal
   point pairs. This is reported as `VincentyConvergenceError` (or NaN in
   the batch form), never as a finite distance.

2. The haversine comparator assumes a spherical Earth and is off by up to
   about 0.5%. It is here for benchmarking only.

Implementation
--------------
`vincenty_inverse` is a direct implementation of Vincenty (1975).
`geodesic_inverse` wraps the `pyproj` library, which uses the GeographicLib
algorithms by Charles Karney and converges for every point pair; it is used
to cross-check the Vincenty results.

References
----------
- Vincenty, T. (1975). Direct and inverse solutions of geodesics on the
  ellipsoid with application of nested equations. Survey Review, 23(176).
- Karney, C.F.F. (2013). Algorithms for geodesics. Journal of Geodesy, 87(1), 43-55.
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyproj import Geod

from common.constants import PhysicalConstants
from common.logging_config import get_logger
from geospatial.coordinate_models import WGS84Ellipsoid, EllipsoidParameters

logger = get_logger(__name__)

# Create the geodesic calculator for WGS84
_wgs84_geod = Geod(ellps='WGS84')


class VincentyConvergenceError(ArithmeticError):
    """Vincenty's iteration did not converge within its iteration budget.

    Attributes
    ----------
    iterations : int
        Number of iterations performed.
    last_change : float
        Size of the last update of λ in radians.
    """

    def __init__(self, iterations: int, last_change: float):
        self.iterations = iterations
        self.last_change = last_change
        super().__init__(
            f"Vincenty inverse failed to converge after {iterations} iterations "
            f"(last change in lambda {last_change:.3e} rad); "
            f"points are probably nearly antipodal"
        )


@dataclass(frozen=True)
class VincentyConfig:
    """Iteration settings for `vincenty_inverse`.

    Attributes
    ----------
    max_iterations : int
        Iteration budget (default: 100).
    tolerance : float
        Convergence threshold on the change of λ in radians (default: 1e-12).
    """
    max_iterations: int = 100
    tolerance: float = 1e-12

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")


@dataclass(frozen=True)
class VincentyResult:
    """Result of a Vincenty inverse calculation.

    Attributes
    ----------
    distance : float
        Ellipsoidal distance in the unit of the ellipsoid axes
        (metres for WGS84).
    azimuth_forward_deg : float
        Initial azimuth at point 1 in degrees, clockwise from north.
    azimuth_final_deg : float
        Azimuth of the geodesic at point 2 in degrees, clockwise from north
        (direction of travel, not the direction back to point 1).
    iterations : int
        Number of λ iterations performed.
    """
    distance: float
    azimuth_forward_deg: float
    azimuth_final_deg: float
    iterations: int


@dataclass
class GeodesicResult:
    """Result of a GeographicLib (pyproj) geodesic calculation.

    Attributes
    ----------
    distance_m : float
        Geodesic distance in meters.
    azimuth_forward_deg : float
        Forward azimuth at point 1 in degrees, clockwise from north.
    azimuth_back_deg : float
        Back azimuth (from point 2 towards point 1) in degrees.
    """
    distance_m: float
    azimuth_forward_deg: float
    azimuth_back_deg: float


def vincenty_inverse(
    lon1_deg: float,
    lat1_deg: float,
    lon2_deg: float,
    lat2_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
    config: Optional[VincentyConfig] = None
) -> VincentyResult:
    """Solve the inverse geodesic problem with Vincenty's method.

    Parameters
    ----------
    lon1_deg, lat1_deg : float
        First point in degrees.
    lon2_deg, lat2_deg : float
        Second point in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).
    config : VincentyConfig, optional
        Iteration budget and tolerance.

    Returns
    -------
    VincentyResult
        Distance in the ellipsoid's unit and the azimuths in degrees.

    Raises
    ------
    VincentyConvergenceError
        If λ has not settled within the iteration budget.

    Notes
    -----
    Two degenerate cases are resolved explicitly:

    - ``sin σ == 0`` (coincident points): distance 0.
    - ``cos² α == 0`` (both points on the equator): ``cos 2σm`` is 0/0
      and is taken as 0.

    Examples
    --------
    >>> result = vincenty_inverse(6.186389, 50.823194, 6.953333, 51.301389)
    >>> round(result.distance / 1000, 4)
    75.6356
    """
    config = config or VincentyConfig()
    b, f = ellipsoid.b, ellipsoid.f

    L = np.radians(lon2_deg - lon1_deg)
    U1 = np.arctan((1 - f) * np.tan(np.radians(lat1_deg)))
    U2 = np.arctan((1 - f) * np.tan(np.radians(lat2_deg)))
    sin_u1, cos_u1 = np.sin(U1), np.cos(U1)
    sin_u2, cos_u2 = np.sin(U2), np.cos(U2)

    lam = L
    change = np.inf
    for iteration in range(1, config.max_iterations + 1):
        sin_lam, cos_lam = np.sin(lam), np.cos(lam)
        sin_sigma = np.sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0.0:
            # Coincident points
            return VincentyResult(
                distance=0.0,
                azimuth_forward_deg=0.0,
                azimuth_final_deg=0.0,
                iterations=iteration
            )

        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = np.arctan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha**2

        if cos_sq_alpha != 0.0:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        else:
            # Equatorial line
            cos_2sigma_m = 0.0

        C = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = L + (1 - C) * f * sin_alpha * (
            sigma + C * sin_sigma * (
                cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m**2)
            )
        )
        change = abs(lam - lam_prev)
        if change <= config.tolerance:
            break
    else:
        logger.warning(
            f"Vincenty inverse did not converge for "
            f"({lon1_deg}, {lat1_deg}) -> ({lon2_deg}, {lat2_deg})"
        )
        raise VincentyConvergenceError(iteration, float(change))

    u_sq = cos_sq_alpha * ellipsoid.ep2
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = B * sin_sigma * (
        cos_2sigma_m + B / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m**2)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
        )
    )
    distance = b * A * (sigma - delta_sigma)

    azimuth_forward = np.arctan2(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
    azimuth_final = np.arctan2(cos_u1 * sin_lam, -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos_lam)

    logger.debug(f"Vincenty inverse converged after {iteration} iterations")

    return VincentyResult(
        distance=float(distance),
        azimuth_forward_deg=float(np.degrees(azimuth_forward) % 360.0),
        azimuth_final_deg=float(np.degrees(azimuth_final) % 360.0),
        iterations=iteration
    )


def vincenty_distance(
    lon1_deg: float,
    lat1_deg: float,
    lon2_deg: float,
    lat2_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
    config: Optional[VincentyConfig] = None
) -> float:
    """Compute the Vincenty distance between two points.

    This is a convenience function that returns only the distance.

    Returns
    -------
    float
        Distance in the ellipsoid's unit (metres for WGS84).

    Raises
    ------
    VincentyConvergenceError
        If the iteration does not converge.
    """
    return vincenty_inverse(lon1_deg, lat1_deg, lon2_deg, lat2_deg, ellipsoid, config).distance


def vincenty_distance_batch(
    lon1_deg: ArrayLike,
    lat1_deg: ArrayLike,
    lon2_deg: ArrayLike,
    lat2_deg: ArrayLike,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid,
    config: Optional[VincentyConfig] = None
) -> NDArray[np.float64]:
    """Compute Vincenty distances for arrays of point pairs.

    Inputs are broadcast against each other.

    Returns
    -------
    ndarray
        Distances in the ellipsoid's unit. Pairs for which the iteration
        did not converge are NaN.
    """
    lon1, lat1, lon2, lat2 = np.broadcast_arrays(
        np.asarray(lon1_deg, dtype=np.float64),
        np.asarray(lat1_deg, dtype=np.float64),
        np.asarray(lon2_deg, dtype=np.float64),
        np.asarray(lat2_deg, dtype=np.float64),
    )
    distances = np.full(lon1.shape, np.nan)

    for index in np.ndindex(lon1.shape):
        try:
            distances[index] = vincenty_distance(
                lon1[index], lat1[index], lon2[index], lat2[index], ellipsoid, config
            )
        except VincentyConvergenceError:
            continue

    failed = int(np.isnan(distances).sum())
    if failed:
        logger.warning(f"{failed} of {distances.size} point pairs did not converge")

    return distances


def geodesic_inverse(
    lon1_deg: float,
    lat1_deg: float,
    lon2_deg: float,
    lat2_deg: float
) -> GeodesicResult:
    """Solve the inverse geodesic problem on WGS84 with GeographicLib.

    Parameters
    ----------
    lon1_deg, lat1_deg : float
        First point in degrees.
    lon2_deg, lat2_deg : float
        Second point in degrees.

    Returns
    -------
    GeodesicResult
        Distance in meters, forward and back azimuths in degrees.

    Notes
    -----
    Accurate to better than 15 nanometers for any pair of points,
    including those where Vincenty's method fails.
    """
    az_forward_deg, az_back_deg, distance_m = _wgs84_geod.inv(
        lon1_deg, lat1_deg, lon2_deg, lat2_deg
    )

    return GeodesicResult(
        distance_m=float(distance_m),
        azimuth_forward_deg=float(az_forward_deg % 360.0),
        azimuth_back_deg=float(az_back_deg % 360.0)
    )


def haversine_distance(
    lon1_deg: ArrayLike,
    lat1_deg: ArrayLike,
    lon2_deg: ArrayLike,
    lat2_deg: ArrayLike,
    radius: float = PhysicalConstants.EARTH_MEAN_RADIUS.value
) -> NDArray[np.float64]:
    """Great-circle distance on a sphere.

    Parameters
    ----------
    lon1_deg, lat1_deg, lon2_deg, lat2_deg : float or array_like
        Coordinates in degrees.
    radius : float
        Sphere radius; its unit is the unit of the result
        (default: IUGG mean Earth radius in metres).

    Returns
    -------
    float or ndarray
        Spherical distance.

    WARNING
    -------
    Spherical model, up to about 0.5% off the ellipsoidal distance.
    """
    lat1 = np.radians(lat1_deg)
    lat2 = np.radians(lat2_deg)
    dlat = lat2 - lat1
    dlon = np.radians(np.subtract(lon2_deg, lon1_deg))

    a = np.sin(dlat / 2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return radius * c
