from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import IdentifierType, PersonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AccessOverride, Person
from .repository import PersonRepository

_IDENTIFIER_WHERE = {
    IdentifierType.PHONE: "phone=%s",
    IdentifierType.EMAIL: "LOWER(email)=LOWER(%s)",
    IdentifierType.CHECKIN_CODE: "checkin_code=%s",
    IdentifierType.EXTERNAL_ID: "external_id=%s",
}

_OVERRIDE_COLUMNS = "org_id, person_id, session_id, group_id, reason"


def _to_override(r: Dict[str, Any]) -> AccessOverride:
    return AccessOverride(
        org_id=int(r["org_id"]),
        person_id=int(r["person_id"]),
        session_id=int(r["session_id"]) if r.get("session_id") is not None else None,
        group_id=int(r["group_id"]) if r.get("group_id") is not None else None,
        reason=r.get("reason"),
    )


def _to_person(r: Dict[str, Any]) -> Person:
    return Person(
        person_id=int(r["person_id"]),
        org_id=int(r["org_id"]),
        full_name=r["full_name"],
        checkin_code=r["checkin_code"],
        status=PersonStatus(r["status"]),
        email=r.get("email"),
        phone=r.get("phone"),
        external_id=r.get("external_id"),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_identifier(self, *, org_id: int, identifier_type: IdentifierType, identifier: str) -> Optional[Person]:
        where = _IDENTIFIER_WHERE[identifier_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, org_id, full_name, checkin_code, status, email, phone, external_id
                FROM people
                WHERE org_id=%s AND {where}
                ORDER BY person_id ASC
                LIMIT 1
                """,
                (int(org_id), identifier),
            )
            r = fetchone(cur)
            return _to_person(r) if r else None

    def get_linked_person_id(self, *, org_id: int, user_id: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT person_id FROM person_user_links WHERE org_id=%s AND user_id=%s",
                (int(org_id), str(user_id)),
            )
            r = fetchone(cur)
            return int(r["person_id"]) if r else None

    def list_group_ids(self, *, org_id: int, person_id: int) -> frozenset[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT gm.group_id
                FROM group_members gm
                JOIN person_groups g ON g.group_id = gm.group_id
                WHERE g.org_id=%s AND gm.person_id=%s
                """,
                (int(org_id), int(person_id)),
            )
            return frozenset(int(r["group_id"]) for r in fetchall(cur))

    def get_deny_override(
        self, *, org_id: int, person_id: int, session_id: int, group_id: Optional[int] = None
    ) -> Optional[AccessOverride]:
        # Org-wide rows have neither session nor group set.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_OVERRIDE_COLUMNS}
                FROM checkin_access_overrides
                WHERE org_id=%s AND person_id=%s AND access='deny'
                  AND (
                    session_id=%s
                    OR (group_id IS NOT NULL AND group_id=%s)
                    OR (session_id IS NULL AND group_id IS NULL)
                  )
                ORDER BY session_id IS NULL, override_id DESC
                LIMIT 1
                """,
                (int(org_id), int(person_id), int(session_id), group_id),
            )
            r = fetchone(cur)
            return _to_override(r) if r else None

    def get_group_allow_override(self, *, org_id: int, person_id: int, group_id: int) -> Optional[AccessOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_OVERRIDE_COLUMNS}
                FROM checkin_access_overrides
                WHERE org_id=%s AND person_id=%s AND group_id=%s AND access='allow'
                ORDER BY override_id DESC
                LIMIT 1
                """,
                (int(org_id), int(person_id), int(group_id)),
            )
            r = fetchone(cur)
            return _to_override(r) if r else None
