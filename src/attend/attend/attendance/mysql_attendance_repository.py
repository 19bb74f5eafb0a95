from __future__ import annotations

import json

from ..common.datetime_utils import as_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import AttendanceRecord, NewAttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_record(self, record: NewAttendanceRecord) -> AttendanceRecord:
        created_at = as_utc(record.created_at)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    org_id, session_id, person_id, method, status,
                    lat, lng, accuracy_m, meta, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(record.org_id),
                    int(record.session_id),
                    int(record.person_id),
                    record.method.value,
                    record.status.value,
                    record.lat,
                    record.lng,
                    record.accuracy_m,
                    json.dumps(record.meta),
                    created_at.replace(tzinfo=None),
                ),
            )
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            org_id=record.org_id,
            session_id=record.session_id,
            person_id=record.person_id,
            method=record.method,
            status=record.status,
            created_at=created_at,
            lat=record.lat,
            lng=record.lng,
            accuracy_m=record.accuracy_m,
            meta=dict(record.meta),
        )
