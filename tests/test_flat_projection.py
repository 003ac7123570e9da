"""Tests for the flat projection and planar point algebra."""

import dataclasses
import logging

import numpy as np
import pytest

from common.types import GeoCoordinate
from geospatial.distance_calculations import vincenty_distance
from geospatial.flat_projection import FlatPoint, FlatProjection

AACHEN = (6.186389, 50.823194)
MEIERSBERG = (6.953333, 51.301389)
VINCENTY_DISTANCE_KM = 75.635_595


def _angle_diff(a: float, b: float) -> float:
    return (a - b + 180.0) % 360.0 - 180.0


def test_scale_factors_at_equator() -> None:
    proj = FlatProjection(0.0)

    assert proj.kx == pytest.approx(111.41513 - 0.09455 + 0.00012, rel=1e-12)
    assert proj.ky == pytest.approx(111.13209 - 0.56605 + 0.0012, rel=1e-12)


def test_scale_factors_match_closed_form() -> None:
    lat = 51.05
    phi = np.radians(lat)
    proj = FlatProjection(lat)

    kx = 111.41513 * np.cos(phi) - 0.09455 * np.cos(3 * phi) + 0.00012 * np.cos(5 * phi)
    ky = 111.13209 - 0.56605 * np.cos(2 * phi) + 0.0012 * np.cos(4 * phi)

    assert proj.kx == pytest.approx(kx, rel=1e-12)
    assert proj.ky == pytest.approx(ky, rel=1e-12)


def test_calibration_distance_and_bearing() -> None:
    proj = FlatProjection(51.05, 6.0)

    p1 = proj.project(*AACHEN)
    p2 = proj.project(*MEIERSBERG)

    assert p1.distance(p2) == pytest.approx(75.648, abs=0.005)
    assert p1.distance(p2) == pytest.approx(VINCENTY_DISTANCE_KM, abs=0.02)
    assert p1.bearing(p2) == pytest.approx(45.312, abs=0.001)


def test_calibration_agrees_with_vincenty() -> None:
    proj = FlatProjection(51.05, 6.0)

    flat_km = proj.project(*AACHEN).distance(proj.project(*MEIERSBERG))
    exact_km = vincenty_distance(*AACHEN, *MEIERSBERG) / 1000.0

    assert exact_km == pytest.approx(75.6356, abs=1e-3)
    assert abs(flat_km - exact_km) <= 0.02


def test_mean_latitude_without_origin() -> None:
    average_latitude = (AACHEN[1] + MEIERSBERG[1]) / 2.0
    proj = FlatProjection(average_latitude)

    distance = proj.project(*AACHEN).distance(proj.project(*MEIERSBERG))

    assert distance == pytest.approx(VINCENTY_DISTANCE_KM, abs=0.003)


@pytest.mark.parametrize(
    "bearing, expected_lon, expected_lat",
    [
        (45.0, 30.5098622, 50.5063572),
        (135.0, 30.5098622, 50.4936427),
        (225.0, 30.4901377, 50.4936427),
        (315.0, 30.4901377, 50.5063572),
    ],
    ids=["ne", "se", "sw", "nw"],
)
def test_destination_quadrants(bearing: float, expected_lon: float, expected_lat: float) -> None:
    proj = FlatProjection(50.0, 30.0)
    p1 = proj.project(30.5, 50.5)

    p2 = p1.destination(1.0, bearing)
    lon, lat = proj.unproject(p2)

    assert lon == pytest.approx(expected_lon, abs=1e-5)
    assert lat == pytest.approx(expected_lat, abs=1e-5)
    assert p1.distance(p2) == pytest.approx(1.0, abs=1e-5)


def test_offset() -> None:
    proj = FlatProjection(50.0, 30.0)
    p1 = proj.project(30.5, 50.5)

    p2 = p1.offset(10.0, 10.0)
    lon, lat = proj.unproject(p2)

    assert p2.x == pytest.approx(p1.x + 10.0)
    assert p2.y == pytest.approx(p1.y + 10.0)
    assert lon == pytest.approx(30.6394736, abs=1e-5)
    assert lat == pytest.approx(50.5899044, abs=1e-5)


@pytest.mark.parametrize("ref_lat", [-60.0, -12.5, 0.0, 35.0, 51.05, 70.0])
@pytest.mark.parametrize("dlon, dlat", [(0.0, 0.0), (1.25, -3.5), (-4.9, 4.9), (0.001, 2.0)])
def test_project_unproject_roundtrip(ref_lat: float, dlon: float, dlat: float) -> None:
    ref_lon = 13.4
    proj = FlatProjection(ref_lat, ref_lon)
    lon, lat = ref_lon + dlon, ref_lat + dlat

    lon2, lat2 = proj.unproject(proj.project(lon, lat))

    assert lon2 == pytest.approx(lon, rel=0, abs=1e-12)
    assert lat2 == pytest.approx(lat, rel=0, abs=1e-12)


def test_project_without_origin_measures_from_zero() -> None:
    proj = FlatProjection(50.0)
    point = proj.project(2.0, 3.0)

    assert point.x == pytest.approx(2.0 * proj.kx)
    assert point.y == pytest.approx(3.0 * proj.ky)
    assert proj.origin_longitude == 0.0
    assert proj.origin_latitude == 0.0
    assert proj.unproject(point) == pytest.approx((2.0, 3.0), abs=1e-12)


def test_project_with_origin_measures_from_reference_point() -> None:
    proj = FlatProjection(50.0, 30.0)
    point = proj.project(32.0, 53.0)

    assert proj.origin_longitude == 30.0
    assert proj.origin_latitude == 50.0
    assert point.x == pytest.approx(2.0 * proj.kx)
    assert point.y == pytest.approx(3.0 * proj.ky)


def test_origin_does_not_change_scale_factors() -> None:
    with_origin = FlatProjection(50.0, 30.0)
    without_origin = FlatProjection(50.0)

    assert with_origin.kx == without_origin.kx
    assert with_origin.ky == without_origin.ky


POINTS = [
    FlatPoint(0.0, 0.0),
    FlatPoint(3.0, 4.0),
    FlatPoint(-12.5, 7.25),
    FlatPoint(120.0, -80.0),
]


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_symmetry(a: FlatPoint, b: FlatPoint) -> None:
    assert a.distance(b) == b.distance(a)
    assert a.distance_squared(b) == b.distance_squared(a)


DISTINCT_PAIRS = [(a, b) for a in POINTS for b in POINTS if a != b]


@pytest.mark.parametrize("a, b", DISTINCT_PAIRS)
def test_bearing_antisymmetry(a: FlatPoint, b: FlatPoint) -> None:
    assert abs(_angle_diff(a.bearing(b), b.bearing(a))) == pytest.approx(180.0, abs=1e-9)


def test_bearing_axis_convention() -> None:
    origin = FlatPoint(0.0, 0.0)

    assert origin.bearing(FlatPoint(0.0, 1.0)) == pytest.approx(0.0)
    assert origin.bearing(FlatPoint(1.0, 0.0)) == pytest.approx(90.0)
    assert origin.bearing(FlatPoint(-1.0, 0.0)) == pytest.approx(-90.0)
    assert origin.bearing(FlatPoint(1.0, 1.0)) == pytest.approx(45.0)
    assert origin.bearing(FlatPoint(0.0, -1.0)) == -180.0


def test_bearing_between_coincident_points_is_pinned() -> None:
    point = FlatPoint(3.0, 4.0)

    assert point.distance(point) == 0.0
    assert point.bearing(point) == -180.0


@pytest.mark.parametrize("distance", [0.5, 10.0, 250.0])
@pytest.mark.parametrize("bearing", [-170.0, -90.0, 0.0, 45.0, 90.0, 135.0, 179.0, 300.0])
def test_destination_consistency(distance: float, bearing: float) -> None:
    p = FlatPoint(17.0, -42.0)

    dest = p.destination(distance, bearing)

    assert p.distance(dest) == pytest.approx(distance, rel=1e-12)
    assert _angle_diff(p.bearing(dest), bearing) == pytest.approx(0.0, abs=1e-9)


def test_destination_zero_distance() -> None:
    p = FlatPoint(1.0, 2.0)

    assert p.destination(0.0, 123.0) == p


def test_distance_bearing_matches_separate_calls() -> None:
    proj = FlatProjection(51.05, 6.0)
    p1 = proj.project(*AACHEN)
    p2 = proj.project(*MEIERSBERG)

    distance, bearing = p1.distance_bearing(p2)

    assert distance == p1.distance(p2)
    assert bearing == p1.bearing(p2)
    assert p1.distance_squared(p2) == pytest.approx(distance**2, rel=1e-12)


def test_float32_projection_keeps_precision() -> None:
    proj32 = FlatProjection(50.0, 30.0, dtype=np.float32)
    proj64 = FlatProjection(50.0, 30.0)

    point = proj32.project(30.5, 50.5)
    lon, lat = proj32.unproject(point)

    assert proj32.kx.dtype == np.float32
    assert proj32.ky.dtype == np.float32
    assert point.x.dtype == np.float32
    assert lon.dtype == np.float32
    assert float(proj32.kx) == pytest.approx(float(proj64.kx), rel=1e-6)
    assert float(proj32.ky) == pytest.approx(float(proj64.ky), rel=1e-6)
    assert float(lat) == pytest.approx(50.5, abs=1e-4)


def test_float32_destination_and_offset_keep_dtype() -> None:
    proj = FlatProjection(50.0, 30.0, dtype=np.float32)
    point = proj.project(30.5, 50.5)

    dest = point.destination(1.0, 45.0)
    shifted = point.offset(1.0, 1.0)

    assert dest.x.dtype == np.float32
    assert dest.y.dtype == np.float32
    assert shifted.x.dtype == np.float32
    assert float(point.distance(dest)) == pytest.approx(1.0, abs=1e-4)


def test_project_arrays_elementwise() -> None:
    proj = FlatProjection(51.05, 6.0)
    lons = np.array([AACHEN[0], MEIERSBERG[0], 6.5])
    lats = np.array([AACHEN[1], MEIERSBERG[1], 51.0])

    points = proj.project(lons, lats)
    origin = proj.project(*AACHEN)
    distances = origin.distance(points)

    assert distances.shape == (3,)
    assert distances[0] == 0.0
    assert distances[1] == pytest.approx(float(origin.distance(proj.project(*MEIERSBERG))))
    np.testing.assert_allclose(proj.unproject(points), (lons, lats), rtol=0, atol=1e-12)


def test_projection_and_points_are_immutable() -> None:
    proj = FlatProjection(50.0)
    point = proj.project(1.0, 50.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        proj.kx = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.x = 1.0


def test_from_points_uses_mean_position() -> None:
    proj = FlatProjection.from_points(
        [GeoCoordinate(*AACHEN), MEIERSBERG]
    )

    assert proj.latitude == pytest.approx((AACHEN[1] + MEIERSBERG[1]) / 2.0)
    assert proj.longitude == pytest.approx((AACHEN[0] + MEIERSBERG[0]) / 2.0)
    assert proj.project(*AACHEN).distance(proj.project(*MEIERSBERG)) == pytest.approx(
        VINCENTY_DISTANCE_KM, abs=0.003
    )


def test_from_points_rejects_empty_input() -> None:
    with pytest.raises(ValueError):
        FlatProjection.from_points([])


def test_construction_logs_scale_factors_and_origin(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="geospatial.flat_projection"):
        FlatProjection(50.0, 30.0)

    assert "origin=(30.0, 50.0)" in caplog.text
    assert "km/deg" in caplog.text
