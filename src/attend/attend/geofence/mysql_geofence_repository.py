from __future__ import annotations

from typing import Optional

from ..core.enums import GeofenceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, json_column, optional_float
from .model import Geofence, Point
from .repository import GeofenceRepository


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_location(self, *, location_id: int) -> Optional[Geofence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.geofence_id, g.location_id, g.type, g.radius_m, g.polygon,
                       l.lat, l.lng
                FROM geofences g
                JOIN locations l ON l.location_id = g.location_id
                WHERE g.location_id=%s AND g.is_active=1
                ORDER BY g.geofence_id DESC
                LIMIT 1
                """,
                (int(location_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            vertices = tuple(
                (float(lat), float(lng)) for lat, lng in (json_column(r.get("polygon"), default=[]) or [])
            )
            return Geofence(
                geofence_id=int(r["geofence_id"]),
                location_id=int(r["location_id"]),
                type=GeofenceType(r["type"]),
                radius_m=optional_float(r.get("radius_m")),
                center=Point(lat=optional_float(r.get("lat")), lng=optional_float(r.get("lng"))),
                vertices=vertices,
            )
