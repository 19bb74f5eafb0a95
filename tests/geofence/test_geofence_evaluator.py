import math

import pytest

from src.attend.attend.core.constants import EARTH_RADIUS_M
from src.attend.attend.core.enums import AccuracyPolicy, GeofenceType
from src.attend.attend.geofence.evaluator import (
    GeofenceEvaluator,
    effective_radius,
    haversine_m,
    point_in_polygon,
)
from src.attend.attend.geofence.model import Geofence, Point

CENTER = Point(lat=40.7484, lng=-73.9857)


def _radius(radius_m=100.0, center=CENTER):
    return Geofence(geofence_id=1, location_id=1, type=GeofenceType.RADIUS, radius_m=radius_m, center=center)


def _north_of_center(meters: float, accuracy=None) -> Point:
    return Point(lat=CENTER.lat + math.degrees(meters / EARTH_RADIUS_M), lng=CENTER.lng, accuracy_m=accuracy)


SQUARE = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))


def test_center_point_is_inside_at_distance_zero():
    result = GeofenceEvaluator().evaluate(CENTER, _radius())

    assert result.inside is True
    assert result.distance_m == pytest.approx(0.0, abs=1e-6)


def test_haversine_along_meridian_matches_arc_length():
    p = _north_of_center(340)
    assert haversine_m(CENTER.lat, CENTER.lng, p.lat, p.lng) == pytest.approx(340.0, rel=1e-6)


@pytest.mark.parametrize("meters", [0, 50, 99, 101, 250, 340, 5000])
def test_inside_iff_distance_within_radius(meters):
    point = _north_of_center(meters)
    result = GeofenceEvaluator().evaluate(point, _radius(100.0))

    expected = haversine_m(point.lat, point.lng, CENTER.lat, CENTER.lng) <= 100.0
    assert result.inside is expected
    assert result.distance_m == pytest.approx(meters, abs=0.01)


def test_missing_coordinate_is_outside_without_distance():
    ev = GeofenceEvaluator()

    assert ev.evaluate(None, _radius()).inside is False
    assert ev.evaluate(Point(lat=CENTER.lat, lng=None), _radius()).distance_m is None


def test_missing_geofence_or_center_is_outside():
    ev = GeofenceEvaluator()

    assert ev.evaluate(CENTER, None).inside is False
    assert ev.evaluate(CENTER, _radius(center=None)).inside is False
    assert ev.evaluate(CENTER, _radius(center=Point(lat=None, lng=None))).inside is False


def test_accuracy_policy_changes_effective_radius():
    point = _north_of_center(120, accuracy=30)
    fence = _radius(100.0)

    assert GeofenceEvaluator(accuracy_policy=AccuracyPolicy.IGNORE).evaluate(point, fence).inside is False
    assert GeofenceEvaluator(accuracy_policy=AccuracyPolicy.WIDEN).evaluate(point, fence).inside is True

    near = _north_of_center(80, accuracy=30)
    assert GeofenceEvaluator(accuracy_policy=AccuracyPolicy.IGNORE).evaluate(near, fence).inside is True
    assert GeofenceEvaluator(accuracy_policy=AccuracyPolicy.SHRINK).evaluate(near, fence).inside is False


def test_effective_radius_never_negative():
    assert effective_radius(50.0, 80.0, AccuracyPolicy.SHRINK) == 0.0
    assert effective_radius(50.0, None, AccuracyPolicy.WIDEN) == 50.0


def test_point_in_polygon_basic():
    assert point_in_polygon(0.5, 0.5, SQUARE) is True
    assert point_in_polygon(1.5, 0.5, SQUARE) is False
    assert point_in_polygon(0.5, -0.1, SQUARE) is False


def test_degenerate_polygon_is_never_inside():
    assert point_in_polygon(0.0, 0.0, ((0.0, 0.0), (1.0, 1.0))) is False


@pytest.mark.parametrize("lat,lng", [(0.5, 0.5), (0.25, 0.9), (1.2, 0.5), (0.5, 1.3), (-0.5, -0.5)])
def test_polygon_verdict_invariant_under_vertex_rotation(lat, lng):
    baseline = point_in_polygon(lat, lng, SQUARE)
    for k in range(1, len(SQUARE)):
        rotated = SQUARE[k:] + SQUARE[:k]
        assert point_in_polygon(lat, lng, rotated) is baseline


def test_polygon_geofence_reports_no_distance():
    fence = Geofence(geofence_id=2, location_id=1, type=GeofenceType.POLYGON, vertices=SQUARE)
    result = GeofenceEvaluator().evaluate(Point(lat=0.5, lng=0.5), fence)

    assert result.inside is True
    assert result.distance_m is None


def test_near_antipodal_points_do_not_crash():
    lat1, lng1 = 80.05814743531747, -75.23459307653654
    lat2, lng2 = -80.05814743531747, 104.76540692346346

    distance = haversine_m(lat1, lng1, lat2, lng2)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-6)

    fence = _radius(100.0, center=Point(lat=lat2, lng=lng2))
    result = GeofenceEvaluator().evaluate(Point(lat=lat1, lng=lng1), fence)
    assert result.inside is False
    assert result.distance_m == pytest.approx(distance)
