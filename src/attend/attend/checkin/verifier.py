from __future__ import annotations

from typing import Optional

from ..core.enums import CheckinMethod
from ..geofence.evaluator import GeofenceEvaluator
from ..geofence.model import Geofence
from ..sessions.model import Session
from .model import EligibilityRequest, ProofResult
from .proofs.base import ProofStrategy
from .proofs.event_code_proof import EventCodeProof
from .proofs.geo_proof import GeoProof
from .proofs.kiosk_proof import KioskProof
from .proofs.qr_proof import QRProof


class ProofVerifierFactory:
    """Factory Pattern: choose the proof strategy for a check-in method."""

    def __init__(self, evaluator: GeofenceEvaluator):
        self._strategies: dict[CheckinMethod, ProofStrategy] = {
            CheckinMethod.QR: QRProof(),
            CheckinMethod.EVENT_CODE: EventCodeProof(),
            CheckinMethod.GEO: GeoProof(evaluator),
            CheckinMethod.KIOSK: KioskProof(),
        }

    def for_method(self, method: CheckinMethod) -> ProofStrategy:
        return self._strategies[CheckinMethod(method)]


class ProofVerifier:
    def __init__(self, factory: ProofVerifierFactory):
        self._factory = factory

    def verify(
        self,
        method: CheckinMethod,
        request: EligibilityRequest,
        session: Session,
        geofence: Optional[Geofence] = None,
    ) -> ProofResult:
        return self._factory.for_method(method).verify(request=request, session=session, geofence=geofence)
