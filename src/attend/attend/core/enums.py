from __future__ import annotations

from enum import Enum


class CheckinMethod(str, Enum):
    """Proof-of-presence method claimed by a check-in attempt."""

    QR = "qr"
    GEO = "geo"
    EVENT_CODE = "event_code"
    KIOSK = "kiosk"


class AttendanceMethod(str, Enum):
    """Method stored on the attendance record."""

    QR = "qr"
    GEO = "geo"
    KIOSK = "kiosk"
    MANUAL = "manual"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PersonStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class GeofenceType(str, Enum):
    RADIUS = "radius"
    POLYGON = "polygon"


class AccuracyPolicy(str, Enum):
    """How the device-reported accuracy affects a radius geofence.

    IGNORE treats the reported point as exact. WIDEN adds the accuracy to the
    radius, SHRINK subtracts it (never below zero).
    """

    IGNORE = "ignore"
    WIDEN = "widen"
    SHRINK = "shrink"


class IdentifierType(str, Enum):
    """How the public self check-in flow identifies a person."""

    PHONE = "phone"
    EMAIL = "email"
    CHECKIN_CODE = "checkin_code"
    EXTERNAL_ID = "external_id"


class DenialReason(str, Enum):
    """Closed set of machine-checkable denial codes."""

    SESSION_NOT_FOUND = "session_not_found"
    NOT_YET_STARTED = "not_yet_started"
    SESSION_CLOSED = "session_closed"
    SESSION_CANCELLED = "session_cancelled"
    AUTHENTICATION_REQUIRED = "authentication_required"
    NO_LINKED_PERSON = "no_linked_person"
    UNIDENTIFIED_PERSON = "unidentified_person"
    METHOD_NOT_ENABLED = "method_not_enabled"
    INVALID_PROOF = "invalid_proof"
    NO_GEOFENCE_CONFIGURED = "no_geofence_configured"
    OUTSIDE_GEOFENCE = "outside_geofence"
    NOT_ASSIGNED = "not_assigned"
    NOT_GROUP_MEMBER = "not_group_member"
    ACCESS_RESTRICTED = "access_restricted"
    ALREADY_CHECKED_IN = "already_checked_in"
