from __future__ import annotations

from typing import Optional, Protocol

from ..geofence.model import Geofence
from ..geofence.repository import GeofenceRepository
from ..people.model import AccessOverride
from ..people.repository import PersonRepository
from ..sessions.model import Session
from ..sessions.repository import SessionRepository


class EligibilityDataSource(Protocol):
    """Read-only port the eligibility engine depends on."""

    def get_session(self, *, org_id: int, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def get_geofence_for_location(self, *, location_id: int) -> Optional[Geofence]:
        raise NotImplementedError

    def get_person_link(self, *, org_id: int, user_id: str) -> Optional[int]:
        raise NotImplementedError

    def list_assigned_person_ids(self, *, session_id: int) -> frozenset[int]:
        raise NotImplementedError

    def list_assigned_group_ids(self, *, session_id: int) -> frozenset[int]:
        raise NotImplementedError

    def list_person_group_ids(self, *, org_id: int, person_id: int) -> frozenset[int]:
        raise NotImplementedError

    def get_deny_override(
        self, *, org_id: int, person_id: int, session_id: int, group_id: Optional[int] = None
    ) -> Optional[AccessOverride]:
        raise NotImplementedError

    def get_group_allow_override(self, *, org_id: int, person_id: int, group_id: int) -> Optional[AccessOverride]:
        raise NotImplementedError


class RepositoryDataSource(EligibilityDataSource):
    """Adapter: serve the engine port from the feature repositories."""

    def __init__(self, sessions: SessionRepository, geofences: GeofenceRepository, people: PersonRepository):
        self._sessions = sessions
        self._geofences = geofences
        self._people = people

    def get_session(self, *, org_id: int, session_id: int) -> Optional[Session]:
        return self._sessions.get_by_id(org_id=org_id, session_id=session_id)

    def get_geofence_for_location(self, *, location_id: int) -> Optional[Geofence]:
        return self._geofences.get_active_for_location(location_id=location_id)

    def get_person_link(self, *, org_id: int, user_id: str) -> Optional[int]:
        return self._people.get_linked_person_id(org_id=org_id, user_id=user_id)

    def list_assigned_person_ids(self, *, session_id: int) -> frozenset[int]:
        return self._sessions.list_assigned_person_ids(session_id=session_id)

    def list_assigned_group_ids(self, *, session_id: int) -> frozenset[int]:
        return self._sessions.list_assigned_group_ids(session_id=session_id)

    def list_person_group_ids(self, *, org_id: int, person_id: int) -> frozenset[int]:
        return self._people.list_group_ids(org_id=org_id, person_id=person_id)

    def get_deny_override(
        self, *, org_id: int, person_id: int, session_id: int, group_id: Optional[int] = None
    ) -> Optional[AccessOverride]:
        return self._people.get_deny_override(
            org_id=org_id, person_id=person_id, session_id=session_id, group_id=group_id
        )

    def get_group_allow_override(self, *, org_id: int, person_id: int, group_id: int) -> Optional[AccessOverride]:
        return self._people.get_group_allow_override(org_id=org_id, person_id=person_id, group_id=group_id)
