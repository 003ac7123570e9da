"""
Type Definitions for Geographic Input and Output.

Geographic coordinates cross the projection boundary as plain
``(longitude, latitude)`` pairs in decimal degrees. `GeoCoordinate` names
that pair so call sites read clearly; it is not part of the planar algebra.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GeoCoordinate:
    """A geographic coordinate on the WGS84 ellipsoid.

    Attributes
    ----------
    longitude : float
        Longitude in DEGREES, positive east.
    latitude : float
        Latitude in DEGREES, positive north.

    Notes
    -----
    Longitude always comes first, matching ``FlatProjection.project``.
    No range checks are applied.

    Examples
    --------
    >>> aachen = GeoCoordinate(longitude=6.186389, latitude=50.823194)
    >>> aachen.as_tuple()
    (6.186389, 50.823194)
    """
    longitude: float  # degrees
    latitude: float  # degrees

    def as_tuple(self) -> Tuple[float, float]:
        """Return ``(longitude, latitude)``."""
        return self.longitude, self.latitude
