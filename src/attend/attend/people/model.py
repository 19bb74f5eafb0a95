from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PersonStatus


@dataclass(frozen=True)
class Person:
    """Domain entity: a member of one organization.

    Note: Plain data object (no DB access code).
    """

    person_id: int
    org_id: int
    full_name: str
    checkin_code: str
    status: PersonStatus = PersonStatus.ACTIVE
    email: Optional[str] = None
    phone: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == PersonStatus.ACTIVE


@dataclass(frozen=True)
class AccessOverride:
    """Admin-set rule for one person.

    Deny rules apply org-wide, to one session or to one group. Allow rules are
    group-scoped and admit a non-member to the sessions of that group.
    """

    org_id: int
    person_id: int
    session_id: Optional[int]
    group_id: Optional[int] = None
    reason: Optional[str] = None
