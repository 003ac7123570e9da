"""
Geospatial Module for Fast Geodesic Approximations.

This module provides:
- A flat projection of WGS84 coordinates onto a local kilometre plane
- Planar distance, bearing, destination and offset on projected points
- Exact ellipsoidal distances (Vincenty, GeographicLib) used as ground truth
- Reference ellipsoid models and radii of curvature
"""

from geospatial.coordinate_models import (
    EllipsoidParameters,
    WGS84Ellipsoid,
    degree_lengths,
    radius_of_curvature_meridian,
    radius_of_curvature_prime_vertical,
)

from geospatial.flat_projection import (
    FlatPoint,
    FlatProjection,
)

from geospatial.distance_calculations import (
    VincentyConfig,
    VincentyConvergenceError,
    VincentyResult,
    vincenty_inverse,
    vincenty_distance,
    vincenty_distance_batch,
    geodesic_inverse,
    haversine_distance,
)

__all__ = [
    # Coordinate models
    "EllipsoidParameters",
    "WGS84Ellipsoid",
    "degree_lengths",
    "radius_of_curvature_meridian",
    "radius_of_curvature_prime_vertical",
    # Flat projection
    "FlatPoint",
    "FlatProjection",
    # Distance calculations
    "VincentyConfig",
    "VincentyConvergenceError",
    "VincentyResult",
    "vincenty_inverse",
    "vincenty_distance",
    "vincenty_distance_batch",
    "geodesic_inverse",
    "haversine_distance",
]
