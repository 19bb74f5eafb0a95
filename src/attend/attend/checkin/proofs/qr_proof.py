from __future__ import annotations

import hmac
from typing import Optional

from ...core.enums import DenialReason
from ...geofence.model import Geofence
from ...sessions.model import Session
from ..model import EligibilityRequest, ProofResult
from .base import ProofStrategy


class QRProof(ProofStrategy):
    """Scanned event QR token must equal the session token exactly."""

    def verify(self, *, request: EligibilityRequest, session: Session, geofence: Optional[Geofence]) -> ProofResult:
        if not request.qr_token or not session.event_qr_token:
            return ProofResult(valid=False, reason=DenialReason.INVALID_PROOF)
        if not hmac.compare_digest(request.qr_token.encode("utf-8"), session.event_qr_token.encode("utf-8")):
            return ProofResult(valid=False, reason=DenialReason.INVALID_PROOF)
        return ProofResult(valid=True)
