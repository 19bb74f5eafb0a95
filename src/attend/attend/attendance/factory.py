from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import as_utc
from ..core.enums import AttendanceStatus
from ..sessions.model import Session


@dataclass(frozen=True)
class AttendanceStatusFactory:
    """Choose the stored status of a new check-in.

    With `late_after_minutes` unset every allowed check-in is PRESENT.
    """

    late_after_minutes: Optional[int] = None

    def for_checkin(self, *, now: datetime, session: Session) -> AttendanceStatus:
        if self.late_after_minutes is None:
            return AttendanceStatus.PRESENT

        late_from = as_utc(session.start_at) + timedelta(minutes=int(self.late_after_minutes))
        if as_utc(now) <= late_from:
            return AttendanceStatus.PRESENT
        return AttendanceStatus.LATE
