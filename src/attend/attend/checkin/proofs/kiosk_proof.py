from __future__ import annotations

from typing import Optional

from ...geofence.model import Geofence
from ...sessions.model import Session
from ..model import EligibilityRequest, ProofResult
from .base import ProofStrategy


class KioskProof(ProofStrategy):
    """Kiosk trust comes from device placement, not from a token."""

    def verify(self, *, request: EligibilityRequest, session: Session, geofence: Optional[Geofence]) -> ProofResult:
        return ProofResult(valid=True)
