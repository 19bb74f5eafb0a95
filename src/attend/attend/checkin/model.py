from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_EARLY_OPEN_MINUTES, DEFAULT_LATE_CLOSE_MINUTES, DENIAL_MESSAGES
from ..core.enums import AccuracyPolicy, CheckinMethod, DenialReason
from ..geofence.model import Point


@dataclass(frozen=True)
class EligibilityConfig:
    """Knobs of the eligibility engine. Passed in explicitly, never read from env."""

    early_open_minutes: int = DEFAULT_EARLY_OPEN_MINUTES
    late_close_minutes: int = DEFAULT_LATE_CLOSE_MINUTES
    accuracy_policy: AccuracyPolicy = AccuracyPolicy.IGNORE
    enforce_assignments: bool = True
    enforce_overrides: bool = True


@dataclass(frozen=True)
class EligibilityRequest:
    """Normalized check-in attempt.

    Identity is either an authenticated `user_id` (resolved through the
    person-user link) or a `person_id` already resolved by the calling route.
    """

    org_id: int
    session_id: int
    method: CheckinMethod
    user_id: Optional[str] = None
    person_id: Optional[int] = None
    point: Optional[Point] = None
    event_code: Optional[str] = None
    qr_token: Optional[str] = None

    def __repr__(self) -> str:
        # Proof secrets stay out of logs and tracebacks.
        return (
            f"EligibilityRequest(org_id={self.org_id!r}, session_id={self.session_id!r}, "
            f"method={self.method.value!r}, user_id={self.user_id!r}, person_id={self.person_id!r})"
        )


@dataclass(frozen=True)
class ProofResult:
    valid: bool
    reason: Optional[DenialReason] = None
    distance_m: Optional[float] = None
    radius_m: Optional[float] = None


@dataclass(frozen=True)
class EligibilityVerdict:
    allowed: bool
    reason: Optional[DenialReason] = None
    person_id: Optional[int] = None
    distance_meters: Optional[float] = None
    geofence_radius: Optional[float] = None
    requires_login: bool = False
    requires_invite: bool = False
    detail: Optional[str] = None
    checked_at: Optional[datetime] = None

    @classmethod
    def allow(cls, *, person_id: int, checked_at: Optional[datetime] = None) -> "EligibilityVerdict":
        return cls(allowed=True, person_id=person_id, checked_at=checked_at)

    @classmethod
    def deny(cls, reason: DenialReason, **kwargs) -> "EligibilityVerdict":
        return cls(allowed=False, reason=reason, **kwargs)

    @property
    def message(self) -> str:
        if self.allowed:
            return "Eligible for check-in"
        if self.detail:
            return self.detail
        if self.reason == DenialReason.OUTSIDE_GEOFENCE and self.distance_meters is not None:
            return (
                f"You are {round(self.distance_meters)}m away from the check-in zone. "
                f"Please move within {self.geofence_radius:g}m of the location."
            )
        return DENIAL_MESSAGES[self.reason]

    def to_response(self) -> dict:
        """JSON body of a 403 denial. Optional keys are left out when unset."""

        body: dict = {"success": False, "error": self.message, "reason": self.reason.value if self.reason else None}
        if self.distance_meters is not None:
            body["distanceMeters"] = round(self.distance_meters)
        if self.geofence_radius is not None:
            body["geofenceRadius"] = self.geofence_radius
        if self.requires_login:
            body["requiresLogin"] = True
        if self.requires_invite:
            body["requiresInvite"] = True
        return body
