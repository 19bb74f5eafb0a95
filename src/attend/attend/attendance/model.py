from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceMethod, AttendanceStatus


@dataclass(frozen=True)
class NewAttendanceRecord:
    """Insert payload; records are append-only."""

    org_id: int
    session_id: int
    person_id: int
    method: AttendanceMethod
    status: AttendanceStatus
    created_at: datetime
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy_m: Optional[float] = None
    meta: dict = field(default_factory=dict)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in of one person to one session."""

    record_id: int
    org_id: int
    session_id: int
    person_id: int
    method: AttendanceMethod
    status: AttendanceStatus
    created_at: datetime
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy_m: Optional[float] = None
    meta: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "org_id": self.org_id,
            "session_id": self.session_id,
            "person_id": self.person_id,
            "method": self.method.value,
            "status": self.status.value,
            "lat": self.lat,
            "lng": self.lng,
            "accuracy_m": self.accuracy_m,
            "meta": dict(self.meta),
            "created_at": self.created_at.isoformat(),
        }
