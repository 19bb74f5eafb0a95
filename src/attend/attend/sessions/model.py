from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import CheckinMethod, SessionStatus

# `event_code` check-ins are stored and configured as "manual".
_METHOD_KEYS = {
    CheckinMethod.QR: "qr",
    CheckinMethod.GEO: "geo",
    CheckinMethod.KIOSK: "kiosk",
    CheckinMethod.EVENT_CODE: "manual",
}


@dataclass(frozen=True)
class Session:
    """Domain entity: one occurrence of an event."""

    session_id: int
    org_id: int
    name: str
    start_at: datetime
    end_at: datetime
    status: SessionStatus
    location_id: Optional[int] = None
    group_id: Optional[int] = None
    public_code: Optional[str] = None
    event_qr_token: Optional[str] = None
    allowed_methods: dict = field(default_factory=dict)

    def method_enabled(self, method: CheckinMethod) -> bool:
        return self.allowed_methods.get(_METHOD_KEYS[method]) is not False

