from __future__ import annotations

from typing import Optional

from ...core.enums import DenialReason, GeofenceType
from ...geofence.evaluator import GeofenceEvaluator
from ...geofence.model import Geofence
from ...sessions.model import Session
from ..model import EligibilityRequest, ProofResult
from .base import ProofStrategy


class GeoProof(ProofStrategy):
    """Reported coordinate must fall inside the location's active geofence."""

    def __init__(self, evaluator: GeofenceEvaluator):
        self._evaluator = evaluator

    def verify(self, *, request: EligibilityRequest, session: Session, geofence: Optional[Geofence]) -> ProofResult:
        if geofence is None:
            return ProofResult(valid=False, reason=DenialReason.NO_GEOFENCE_CONFIGURED)

        radius = geofence.radius_m if geofence.type == GeofenceType.RADIUS else None
        result = self._evaluator.evaluate(request.point, geofence)
        if not result.inside:
            return ProofResult(
                valid=False,
                reason=DenialReason.OUTSIDE_GEOFENCE,
                distance_m=result.distance_m,
                radius_m=radius,
            )
        return ProofResult(valid=True, distance_m=result.distance_m, radius_m=radius)
