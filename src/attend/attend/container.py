from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStatusFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .checkin.engine import EligibilityEngine
from .checkin.model import EligibilityConfig
from .checkin.ports import RepositoryDataSource
from .checkin.service import CheckinService
from .core.constants import DEFAULT_DEADLINE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_geofence_repository import MySQLGeofenceRepository
from .geofence.repository import GeofenceRepository
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    organizations_repo: OrganizationRepository
    sessions_repo: SessionRepository
    geofences_repo: GeofenceRepository
    people_repo: PersonRepository
    attendance_repo: AttendanceRepository

    eligibility_engine: EligibilityEngine
    checkin_service: CheckinService


def wire_container(
    *,
    organizations_repo: OrganizationRepository,
    sessions_repo: SessionRepository,
    geofences_repo: GeofenceRepository,
    people_repo: PersonRepository,
    attendance_repo: AttendanceRepository,
    eligibility: EligibilityConfig | None = None,
    late_after_minutes: Optional[int] = None,
    deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    engine = EligibilityEngine(
        RepositoryDataSource(sessions_repo, geofences_repo, people_repo),
        config=eligibility or EligibilityConfig(),
    )
    checkin_service = CheckinService(
        engine,
        organizations_repo,
        sessions_repo,
        people_repo,
        attendance_repo,
        status_factory=AttendanceStatusFactory(late_after_minutes=late_after_minutes),
        deadline_seconds=deadline_seconds,
    )
    return Container(
        conn=conn,
        organizations_repo=organizations_repo,
        sessions_repo=sessions_repo,
        geofences_repo=geofences_repo,
        people_repo=people_repo,
        attendance_repo=attendance_repo,
        eligibility_engine=engine,
        checkin_service=checkin_service,
    )


def build_container(
    *,
    db_config: dict,
    eligibility: EligibilityConfig | None = None,
    late_after_minutes: Optional[int] = None,
    deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        organizations_repo=MySQLOrganizationRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        geofences_repo=MySQLGeofenceRepository(conn),
        people_repo=MySQLPersonRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        eligibility=eligibility,
        late_after_minutes=late_after_minutes,
        deadline_seconds=deadline_seconds,
        conn=conn,
    )
