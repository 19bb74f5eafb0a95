from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Optional, Sequence

from ..core.constants import EARTH_RADIUS_M
from ..core.enums import AccuracyPolicy, GeofenceType
from .model import Geofence, GeofenceResult, Point


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    lat1, lng1, lat2, lng2 = map(radians, [float(lat1), float(lng1), float(lat2), float(lng2)])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # rounding can leave `a` just outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def point_in_polygon(lat: float, lng: float, vertices: Sequence[tuple[float, float]]) -> bool:
    """Ray casting along the longitude axis. Vertices are (lat, lng) pairs."""
    n = len(vertices)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        lat_i, lng_i = vertices[i]
        lat_j, lng_j = vertices[j]
        if (lat_i > lat) != (lat_j > lat):
            cross_lng = (lng_j - lng_i) * (lat - lat_i) / (lat_j - lat_i) + lng_i
            if lng < cross_lng:
                inside = not inside
        j = i
    return inside


def effective_radius(radius_m: float, accuracy_m: Optional[float], policy: AccuracyPolicy) -> float:
    if policy == AccuracyPolicy.IGNORE or not accuracy_m:
        return radius_m
    if policy == AccuracyPolicy.WIDEN:
        return radius_m + accuracy_m
    return max(0.0, radius_m - accuracy_m)


class GeofenceEvaluator:
    """Decides whether a reported point lies inside a geofence. No I/O."""

    def __init__(self, *, accuracy_policy: AccuracyPolicy = AccuracyPolicy.IGNORE):
        self._accuracy_policy = accuracy_policy

    def evaluate(self, point: Optional[Point], geofence: Optional[Geofence]) -> GeofenceResult:
        if point is None or not point.is_complete or geofence is None:
            return GeofenceResult(inside=False)

        if geofence.type == GeofenceType.POLYGON:
            return GeofenceResult(inside=point_in_polygon(point.lat, point.lng, geofence.vertices))

        center = geofence.center
        if center is None or not center.is_complete or geofence.radius_m is None:
            return GeofenceResult(inside=False)

        distance = haversine_m(point.lat, point.lng, center.lat, center.lng)
        radius = effective_radius(float(geofence.radius_m), point.accuracy_m, self._accuracy_policy)
        return GeofenceResult(inside=distance <= radius, distance_m=distance)
