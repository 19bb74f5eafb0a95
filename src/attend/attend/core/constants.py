"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import DenialReason

EARTH_RADIUS_M = 6371000.0

DEFAULT_EARLY_OPEN_MINUTES = 0
DEFAULT_LATE_CLOSE_MINUTES = 0
DEFAULT_DEADLINE_SECONDS = 10.0

EVENT_QR_PREFIX = "attend://event/"
PERSON_QR_PREFIX = "attend://person/"

DENIAL_MESSAGES = {
    DenialReason.SESSION_NOT_FOUND: "Session not found",
    DenialReason.NOT_YET_STARTED: "Check-in is not yet open. Please wait until closer to the session start time.",
    DenialReason.SESSION_CLOSED: "Check-in window has closed for this session",
    DenialReason.SESSION_CANCELLED: "This session has been cancelled",
    DenialReason.AUTHENTICATION_REQUIRED: "Please sign in to check in to this session",
    DenialReason.NO_LINKED_PERSON: (
        "Your account is not linked to a member profile. "
        "Please check your invite or contact an administrator."
    ),
    DenialReason.UNIDENTIFIED_PERSON: "Unable to identify member for check-in",
    DenialReason.METHOD_NOT_ENABLED: "This check-in method is not enabled for this event",
    DenialReason.INVALID_PROOF: "Invalid event code or QR code. Please check and try again.",
    DenialReason.NO_GEOFENCE_CONFIGURED: "Session location is not configured for geofence check-in",
    DenialReason.OUTSIDE_GEOFENCE: "You are outside the check-in zone for this session",
    DenialReason.NOT_ASSIGNED: "You are not assigned to this session",
    DenialReason.NOT_GROUP_MEMBER: "You are not a member of the group for this session",
    DenialReason.ACCESS_RESTRICTED: (
        "Your check-in access has been restricted. Please contact an administrator."
    ),
    DenialReason.ALREADY_CHECKED_IN: "You have already checked in to this session",
}
