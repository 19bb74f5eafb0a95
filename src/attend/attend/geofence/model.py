from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import GeofenceType


@dataclass(frozen=True)
class Point:
    """A coordinate in decimal degrees, optionally with device accuracy in meters."""

    lat: Optional[float]
    lng: Optional[float]
    accuracy_m: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.lat is not None and self.lng is not None


@dataclass(frozen=True)
class Geofence:
    """Registered boundary of a location.

    Radius geofences take their center from the location; polygon geofences
    carry an ordered list of (lat, lng) vertices.
    """

    geofence_id: int
    location_id: int
    type: GeofenceType
    radius_m: Optional[float] = None
    center: Optional[Point] = None
    vertices: tuple[tuple[float, float], ...] = ()


@dataclass(frozen=True)
class GeofenceResult:
    inside: bool
    distance_m: Optional[float] = None
