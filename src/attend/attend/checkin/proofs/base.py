from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...geofence.model import Geofence
from ...sessions.model import Session
from ..model import EligibilityRequest, ProofResult


class ProofStrategy(ABC):
    """Strategy Pattern: how one check-in method proves presence."""

    @abstractmethod
    def verify(self, *, request: EligibilityRequest, session: Session, geofence: Optional[Geofence]) -> ProofResult:
        raise NotImplementedError
