from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import as_utc
from ..core.enums import DenialReason, SessionStatus
from .model import Session


@dataclass(frozen=True)
class WindowDecision:
    open: bool
    reason: Optional[DenialReason] = None


class SessionWindowPolicy:
    """Decides whether check-in is currently permitted for a session.

    The open interval is [start_at - early_open, end_at + late_close], both
    ends inclusive. Cancelled and completed sessions are closed at every instant.
    """

    def __init__(self, *, early_open_minutes: int = 0, late_close_minutes: int = 0):
        self._early_open = timedelta(minutes=int(early_open_minutes))
        self._late_close = timedelta(minutes=int(late_close_minutes))

    def is_open(self, session: Session, now: datetime) -> WindowDecision:
        if session.status == SessionStatus.CANCELLED:
            return WindowDecision(open=False, reason=DenialReason.SESSION_CANCELLED)
        if session.status == SessionStatus.COMPLETED:
            return WindowDecision(open=False, reason=DenialReason.SESSION_CLOSED)

        now = as_utc(now)
        if now < as_utc(session.start_at) - self._early_open:
            return WindowDecision(open=False, reason=DenialReason.NOT_YET_STARTED)
        if now > as_utc(session.end_at) + self._late_close:
            return WindowDecision(open=False, reason=DenialReason.SESSION_CLOSED)
        return WindowDecision(open=True)
