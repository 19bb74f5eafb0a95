from __future__ import annotations

from typing import Protocol

from .model import AttendanceRecord, NewAttendanceRecord


class AttendanceRepository(Protocol):
    def create_record(self, record: NewAttendanceRecord) -> AttendanceRecord:
        """Insert one record.

        Raises DuplicateRecordError when the person already has a record for
        the session (unique constraint).
        """

        raise NotImplementedError
