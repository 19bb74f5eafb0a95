from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import IdentifierType
from .model import AccessOverride, Person


class PersonRepository(Protocol):
    """Repository interface for people.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def find_by_identifier(self, *, org_id: int, identifier_type: IdentifierType, identifier: str) -> Optional[Person]:
        raise NotImplementedError

    def get_linked_person_id(self, *, org_id: int, user_id: str) -> Optional[int]:
        """Person linked to an authenticated account inside one organization."""

        raise NotImplementedError

    def list_group_ids(self, *, org_id: int, person_id: int) -> frozenset[int]:
        """Groups of the organization the person is a member of."""

        raise NotImplementedError

    def get_deny_override(
        self, *, org_id: int, person_id: int, session_id: int, group_id: Optional[int] = None
    ) -> Optional[AccessOverride]:
        raise NotImplementedError

    def get_group_allow_override(self, *, org_id: int, person_id: int, group_id: int) -> Optional[AccessOverride]:
        raise NotImplementedError
