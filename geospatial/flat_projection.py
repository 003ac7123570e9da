"""
Flat Surface Projection for Fast Geodesic Approximations.

This module projects WGS84 coordinates onto a locally flat east/north plane
in which distances, bearings and offsets are plain Euclidean arithmetic.
Around the reference latitude the results stay very close to the exact
ellipsoidal values for distances up to about 500 km.

Scientific Context
------------------
Domain: Geodesy, local tangent plane approximation
Model: Per-latitude linear scaling of degrees into kilometres

The scale factors ``kx`` and ``ky`` are cosine polynomials fitted to the
WGS84 prime-vertical and meridional radii of curvature (see
`geospatial.coordinate_models.degree_lengths` for the exact quantities).
They are accurate within about ±5° of latitude from the reference; further
away the results degrade silently, as any linearization does.

Example
-------
>>> proj = FlatProjection(51.05, 6.0)
>>> p1 = proj.project(6.186389, 50.823194)
>>> p2 = proj.project(6.953333, 51.301389)
>>> round(float(p1.distance(p2)), 3)
75.648

References
----------
- mapbox/cheap-ruler: https://github.com/mapbox/cheap-ruler
- NGA, Length of a Degree of Latitude and Longitude Calculator
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray

from common.constants import FlatProjectionCoefficients
from common.logging_config import get_logger
from common.types import GeoCoordinate

logger = get_logger(__name__)

Scalar = Union[float, np.floating, NDArray[np.floating]]


@dataclass(frozen=True)
class FlatPoint:
    """A geographic point as projected by a `FlatProjection`.

    Attributes
    ----------
    x : float or ndarray
        Distance east of the projection origin in KILOMETRES.
    y : float or ndarray
        Distance north of the projection origin in KILOMETRES.

    Notes
    -----
    A `FlatPoint` does not know which projection produced it. Keep the
    projection around if the point has to be converted back to degrees.

    Both fields may be numpy arrays of equal shape, in which case every
    method works element-wise.
    """
    x: Scalar  # km, positive east
    y: Scalar  # km, positive north

    def distance(self, other: 'FlatPoint') -> Scalar:
        """Approximate distance in kilometres from this point to another.

        Examples
        --------
        >>> proj = FlatProjection(51.05, 6.0)
        >>> p1 = proj.project(6.186389, 50.823194)
        >>> p2 = proj.project(6.953333, 51.301389)
        >>> round(float(p1.distance(p2)), 3)
        75.648
        """
        return np.sqrt(self.distance_squared(other))

    def distance_squared(self, other: 'FlatPoint') -> Scalar:
        """Approximate squared distance in square kilometres.

        Use this for comparisons (e.g. nearest-neighbour filtering) where
        the square root is not needed.
        """
        dx, dy = self._delta(other)
        return _distance_squared(dx, dy)

    def bearing(self, other: 'FlatPoint') -> Scalar:
        """Approximate average bearing in degrees from this point to another.

        0° is north, 90° is east. Results lie in [-180, 180]; coincident
        points and due-south targets give -180.

        Examples
        --------
        >>> proj = FlatProjection(51.05, 6.0)
        >>> p1 = proj.project(6.186389, 50.823194)
        >>> p2 = proj.project(6.953333, 51.301389)
        >>> round(float(p1.bearing(p2)), 3)
        45.312
        """
        dx, dy = self._delta(other)
        return _bearing(dx, dy)

    def distance_bearing(self, other: 'FlatPoint') -> Tuple[Scalar, Scalar]:
        """Approximate distance (km) and bearing (degrees) in one pass.

        Returns
        -------
        Tuple
            ``(distance, bearing)`` computed from a single coordinate delta.
        """
        dx, dy = self._delta(other)
        return np.sqrt(_distance_squared(dx, dy)), _bearing(dx, dy)

    def destination(self, distance: Scalar, bearing: Scalar) -> 'FlatPoint':
        """Point reached after travelling `distance` km towards `bearing` degrees.

        Parameters
        ----------
        distance : float
            Distance in kilometres.
        bearing : float
            Bearing in degrees, 0° north, clockwise.

        Returns
        -------
        FlatPoint
            The destination point.
        """
        t = np.result_type(self.x, self.y)
        angle = np.radians(np.asarray(bearing, dtype=t))
        distance = np.asarray(distance, dtype=t)
        return self.offset(np.sin(angle) * distance, np.cos(angle) * distance)

    def offset(self, dx: Scalar, dy: Scalar) -> 'FlatPoint':
        """Point shifted by `dx` km east and `dy` km north.

        The result keeps the precision of this point's coordinates.
        """
        t = np.result_type(self.x, self.y)
        x = np.asarray(self.x + np.asarray(dx, dtype=t))
        y = np.asarray(self.y + np.asarray(dy, dtype=t))
        return FlatPoint(x=x[()], y=y[()])

    def _delta(self, other: 'FlatPoint') -> Tuple[Scalar, Scalar]:
        return self.x - other.x, self.y - other.y


def _distance_squared(dx: Scalar, dy: Scalar) -> Scalar:
    return dx**2 + dy**2


def _bearing(dx: Scalar, dy: Scalar) -> Scalar:
    # Navigational convention: x is east, y is north, clockwise from north.
    return np.degrees(np.arctan2(-dx, -dy))


@dataclass(frozen=True)
class FlatProjection:
    """Projection from WGS84 degrees to a local kilometre plane.

    Parameters
    ----------
    latitude : float
        Reference latitude in degrees. The projection is most accurate
        near this latitude. Not validated.
    longitude : float, optional
        Reference longitude in degrees. When given, the projection origin
        is ``(longitude, latitude)``. When omitted, the origin is (0, 0):
        ``x`` and ``y`` are measured from the prime meridian and the
        equator, and callers should subtract a common longitude before
        projecting points near the antimeridian.
    dtype : numpy floating type
        Precision used for the scale factors and all projected values
        (``np.float64`` by default, ``np.float32`` supported).

    Attributes
    ----------
    kx : float
        Kilometres per degree of longitude at the reference latitude.
    ky : float
        Kilometres per degree of latitude at the reference latitude.
    origin_longitude, origin_latitude : float
        Origin of the projected plane in degrees.

    Examples
    --------
    >>> proj = FlatProjection(50.0, 30.0)
    >>> point = proj.project(30.5, 50.5)
    >>> lon, lat = proj.unproject(point)
    """
    latitude: float
    longitude: Optional[float] = None
    dtype: type = np.float64
    kx: Scalar = field(init=False)
    ky: Scalar = field(init=False)
    origin_longitude: Scalar = field(init=False)
    origin_latitude: Scalar = field(init=False)

    def __post_init__(self):
        """Derive the scale factors for the reference latitude."""
        t = self.dtype
        latitude = t(self.latitude)
        object.__setattr__(self, "latitude", latitude)
        if self.longitude is None:
            object.__setattr__(self, "origin_longitude", t(0.0))
            object.__setattr__(self, "origin_latitude", t(0.0))
        else:
            object.__setattr__(self, "longitude", t(self.longitude))
            object.__setattr__(self, "origin_longitude", self.longitude)
            object.__setattr__(self, "origin_latitude", latitude)

        # Chebyshev recurrence: cos((n+1)φ) = 2 cos φ cos(nφ) - cos((n-1)φ)
        two = t(2.0)
        cos = np.cos(np.radians(latitude))
        cos2 = two * cos * cos - t(1.0)
        cos3 = two * cos * cos2 - cos
        cos4 = two * cos * cos3 - cos2
        cos5 = two * cos * cos4 - cos3

        kx1, kx3, kx5 = (t(c) for c in FlatProjectionCoefficients.KX)
        ky0, ky2, ky4 = (t(c) for c in FlatProjectionCoefficients.KY)
        object.__setattr__(self, "kx", kx1 * cos + kx3 * cos3 + kx5 * cos5)
        object.__setattr__(self, "ky", ky0 + ky2 * cos2 + ky4 * cos4)

        logger.debug(
            f"Flat projection at lat={self.latitude} origin=({self.origin_longitude}, "
            f"{self.origin_latitude}): kx={self.kx:.6f} km/deg, ky={self.ky:.6f} km/deg"
        )

    @classmethod
    def from_points(
        cls,
        points: Iterable[Union[GeoCoordinate, Tuple[float, float]]],
        dtype: type = np.float64
    ) -> 'FlatProjection':
        """Projection centred on the mean position of a set of points.

        Parameters
        ----------
        points : iterable of GeoCoordinate or (longitude, latitude)
            The points the projection will be used for.
        dtype : numpy floating type
            Precision of the projection.

        Raises
        ------
        ValueError
            If `points` is empty.
        """
        coords = np.array(
            [p.as_tuple() if isinstance(p, GeoCoordinate) else tuple(p) for p in points],
            dtype=np.float64
        )
        if coords.size == 0:
            raise ValueError("Cannot centre a projection on an empty set of points")

        longitude, latitude = coords.mean(axis=0)
        return cls(latitude=float(latitude), longitude=float(longitude), dtype=dtype)

    def project(self, longitude: ArrayLike, latitude: ArrayLike) -> FlatPoint:
        """Convert longitude/latitude in degrees to a `FlatPoint`.

        Parameters
        ----------
        longitude, latitude : float or array_like
            Coordinates in degrees. Arrays are projected element-wise.

        Returns
        -------
        FlatPoint
            East/north offsets in kilometres from the projection origin.
        """
        x = (self._cast(longitude) - self.origin_longitude) * self.kx
        y = (self._cast(latitude) - self.origin_latitude) * self.ky
        return FlatPoint(x=x, y=y)

    def unproject(self, point: FlatPoint) -> Tuple[Scalar, Scalar]:
        """Convert a `FlatPoint` back to ``(longitude, latitude)`` in degrees."""
        return (
            point.x / self.kx + self.origin_longitude,
            point.y / self.ky + self.origin_latitude,
        )

    def _cast(self, value: ArrayLike) -> Scalar:
        # [()] unwraps 0-d arrays to numpy scalars and leaves arrays alone
        return np.asarray(value, dtype=self.dtype)[()]
