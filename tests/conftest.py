from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.attend.attend.attendance.model import AttendanceRecord, NewAttendanceRecord
from src.attend.attend.common.datetime_utils import now_utc
from src.attend.attend.core.enums import GeofenceType, IdentifierType, PersonStatus, SessionStatus
from src.attend.attend.core.exceptions import DuplicateRecordError
from src.attend.attend.geofence.model import Geofence, Point
from src.attend.attend.organizations.model import Organization
from src.attend.attend.people.model import AccessOverride, Person
from src.attend.attend.sessions.model import Session

HALL_LAT = 40.7484
HALL_LNG = -73.9857


@dataclass
class InMemoryOrganizations:
    orgs: dict[str, Organization] = field(default_factory=dict)

    def get_by_slug(self, slug: str) -> Optional[Organization]:
        return self.orgs.get(slug)


@dataclass
class InMemorySessions:
    sessions: dict[int, Session] = field(default_factory=dict)
    assignments: dict[int, set[int]] = field(default_factory=dict)
    group_assignments: dict[int, set[int]] = field(default_factory=dict)

    def get_by_id(self, *, org_id: int, session_id: int) -> Optional[Session]:
        s = self.sessions.get(session_id)
        return s if s and s.org_id == org_id else None

    def find_by_public_code(self, *, org_id: int, public_code: str) -> Optional[Session]:
        for s in self.sessions.values():
            if s.org_id == org_id and s.public_code and s.public_code.upper() == public_code.strip().upper():
                return s
        return None

    def find_by_qr_token(self, *, org_id: int, event_qr_token: str) -> Optional[Session]:
        for s in self.sessions.values():
            if s.org_id == org_id and s.event_qr_token == event_qr_token:
                return s
        return None

    def list_assigned_person_ids(self, *, session_id: int) -> frozenset[int]:
        return frozenset(self.assignments.get(session_id, set()))

    def list_assigned_group_ids(self, *, session_id: int) -> frozenset[int]:
        return frozenset(self.group_assignments.get(session_id, set()))

    def put(self, session: Session) -> Session:
        self.sessions[session.session_id] = session
        return session


@dataclass
class InMemoryGeofences:
    by_location: dict[int, Geofence] = field(default_factory=dict)

    def get_active_for_location(self, *, location_id: int) -> Optional[Geofence]:
        return self.by_location.get(location_id)


@dataclass
class InMemoryPeople:
    people: dict[int, Person] = field(default_factory=dict)
    links: dict[tuple[int, str], int] = field(default_factory=dict)
    groups: dict[int, set[int]] = field(default_factory=dict)
    overrides: list[AccessOverride] = field(default_factory=list)
    allow_overrides: list[AccessOverride] = field(default_factory=list)

    def find_by_identifier(self, *, org_id: int, identifier_type: IdentifierType, identifier: str) -> Optional[Person]:
        for p in self.people.values():
            if p.org_id != org_id:
                continue
            if identifier_type == IdentifierType.PHONE and p.phone == identifier:
                return p
            if identifier_type == IdentifierType.EMAIL and (p.email or "").lower() == identifier.lower():
                return p
            if identifier_type == IdentifierType.CHECKIN_CODE and p.checkin_code == identifier:
                return p
            if identifier_type == IdentifierType.EXTERNAL_ID and p.external_id == identifier:
                return p
        return None

    def get_linked_person_id(self, *, org_id: int, user_id: str) -> Optional[int]:
        return self.links.get((org_id, user_id))

    def list_group_ids(self, *, org_id: int, person_id: int) -> frozenset[int]:
        return frozenset(self.groups.get(person_id, set()))

    def get_deny_override(
        self, *, org_id: int, person_id: int, session_id: int, group_id: Optional[int] = None
    ) -> Optional[AccessOverride]:
        for o in self.overrides:
            if o.org_id != org_id or o.person_id != person_id:
                continue
            org_wide = o.session_id is None and o.group_id is None
            if org_wide or o.session_id == session_id or (o.group_id is not None and o.group_id == group_id):
                return o
        return None

    def get_group_allow_override(self, *, org_id: int, person_id: int, group_id: int) -> Optional[AccessOverride]:
        for o in self.allow_overrides:
            if o.org_id == org_id and o.person_id == person_id and o.group_id == group_id:
                return o
        return None


class InMemoryAttendance:
    def __init__(self):
        self.records: list[AttendanceRecord] = []

    def create_record(self, record: NewAttendanceRecord) -> AttendanceRecord:
        for r in self.records:
            if r.session_id == record.session_id and r.person_id == record.person_id:
                raise DuplicateRecordError("Duplicate entry for key 'uq_attendance_session_person'")
        created = AttendanceRecord(
            record_id=len(self.records) + 1,
            org_id=record.org_id,
            session_id=record.session_id,
            person_id=record.person_id,
            method=record.method,
            status=record.status,
            created_at=record.created_at,
            lat=record.lat,
            lng=record.lng,
            accuracy_m=record.accuracy_m,
            meta=dict(record.meta),
        )
        self.records.append(created)
        return created


@dataclass
class World:
    """Demo tenant: one 100 m geofenced hall and a session open around `now`."""

    now: datetime
    organizations: InMemoryOrganizations
    sessions: InMemorySessions
    geofences: InMemoryGeofences
    people: InMemoryPeople
    attendance: InMemoryAttendance

    def update_session(self, session_id: int = 1, **changes) -> Session:
        return self.sessions.put(replace(self.sessions.sessions[session_id], **changes))


@pytest.fixture
def world() -> World:
    now = now_utc().replace(microsecond=0)

    organizations = InMemoryOrganizations(
        {
            "demo": Organization(org_id=1, slug="demo", name="Demo Organization"),
            "other": Organization(org_id=2, slug="other", name="Other Organization"),
        }
    )

    sessions = InMemorySessions()
    sessions.put(
        Session(
            session_id=1,
            org_id=1,
            name="Daily Standup",
            start_at=now - timedelta(hours=1),
            end_at=now + timedelta(hours=1),
            status=SessionStatus.ACTIVE,
            location_id=1,
            public_code="STANDUP",
            event_qr_token="tok-123",
            allowed_methods={"qr": True, "geo": True, "kiosk": True, "manual": True},
        )
    )

    geofences = InMemoryGeofences(
        {
            1: Geofence(
                geofence_id=1,
                location_id=1,
                type=GeofenceType.RADIUS,
                radius_m=100.0,
                center=Point(lat=HALL_LAT, lng=HALL_LNG),
            )
        }
    )

    people = InMemoryPeople(
        people={
            1: Person(person_id=1, org_id=1, full_name="Ada Admin", checkin_code="ADA001",
                      email="ada@example.com", phone="+15550000001"),
            2: Person(person_id=2, org_id=1, full_name="Ben Member", checkin_code="BEN002",
                      email="ben@example.com", phone="+15550000002", external_id="EMP-2"),
            3: Person(person_id=3, org_id=1, full_name="Cy Former", checkin_code="CY0003",
                      email="cy@example.com", phone="+15550000003", status=PersonStatus.INACTIVE),
        },
        links={(1, "user-ada"): 1},
        # group 10: core team, group 20: guests
        groups={1: {10}, 2: {20}},
    )

    return World(
        now=now,
        organizations=organizations,
        sessions=sessions,
        geofences=geofences,
        people=people,
        attendance=InMemoryAttendance(),
    )
