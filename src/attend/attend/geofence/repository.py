from __future__ import annotations

from typing import Optional, Protocol

from .model import Geofence


class GeofenceRepository(Protocol):
    def get_active_for_location(self, *, location_id: int) -> Optional[Geofence]:
        """Active geofence of a location, radius center taken from the location row."""

        raise NotImplementedError
