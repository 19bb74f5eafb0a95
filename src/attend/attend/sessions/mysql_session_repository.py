from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, json_column
from .model import Session
from .repository import SessionRepository

_SESSION_COLUMNS = """
    session_id, org_id, name, start_at, end_at, status, location_id, group_id,
    public_code, event_qr_token, allowed_methods
"""


def _to_session(r: Dict[str, Any]) -> Session:
    return Session(
        session_id=int(r["session_id"]),
        org_id=int(r["org_id"]),
        name=r["name"],
        start_at=r["start_at"],
        end_at=r["end_at"],
        status=SessionStatus(r["status"]),
        location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
        group_id=int(r["group_id"]) if r.get("group_id") is not None else None,
        public_code=r.get("public_code"),
        event_qr_token=r.get("event_qr_token"),
        allowed_methods=json_column(r.get("allowed_methods"), default={}) or {},
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE {where} LIMIT 1", params)
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_by_id(self, *, org_id: int, session_id: int) -> Optional[Session]:
        return self._one("session_id=%s AND org_id=%s", (int(session_id), int(org_id)))

    def find_by_public_code(self, *, org_id: int, public_code: str) -> Optional[Session]:
        return self._one("org_id=%s AND UPPER(public_code)=UPPER(%s)", (int(org_id), public_code.strip()))

    def find_by_qr_token(self, *, org_id: int, event_qr_token: str) -> Optional[Session]:
        return self._one("org_id=%s AND event_qr_token=%s", (int(org_id), event_qr_token))

    def list_assigned_person_ids(self, *, session_id: int) -> frozenset[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT person_id FROM session_people WHERE session_id=%s", (int(session_id),))
            return frozenset(int(r["person_id"]) for r in fetchall(cur))

    def list_assigned_group_ids(self, *, session_id: int) -> frozenset[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT group_id FROM session_groups WHERE session_id=%s", (int(session_id),))
            return frozenset(int(r["group_id"]) for r in fetchall(cur))
