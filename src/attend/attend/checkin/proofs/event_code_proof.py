from __future__ import annotations

from typing import Optional

from ...core.enums import DenialReason
from ...geofence.model import Geofence
from ...sessions.model import Session
from ..model import EligibilityRequest, ProofResult
from .base import ProofStrategy


class EventCodeProof(ProofStrategy):
    """Typed session code, compared case-insensitively."""

    def verify(self, *, request: EligibilityRequest, session: Session, geofence: Optional[Geofence]) -> ProofResult:
        code = (request.event_code or "").strip()
        expected = (session.public_code or "").strip()
        if not code or not expected or code.upper() != expected.upper():
            return ProofResult(valid=False, reason=DenialReason.INVALID_PROOF)
        return ProofResult(valid=True)
