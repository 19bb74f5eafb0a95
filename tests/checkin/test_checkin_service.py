import pytest

from src.attend.attend.container import wire_container
from src.attend.attend.core.enums import AttendanceMethod, AttendanceStatus, DenialReason
from src.attend.attend.core.exceptions import (
    AuthorizationError,
    EligibilityDenied,
    NotFoundError,
    ValidationError,
)


def _service(world, **kw):
    container = wire_container(
        organizations_repo=world.organizations,
        sessions_repo=world.sessions,
        geofences_repo=world.geofences,
        people_repo=world.people,
        attendance_repo=world.attendance,
        **kw,
    )
    return container.checkin_service


def test_public_checkin_with_session_code_stores_manual_record(world):
    result = _service(world).public_checkin(
        org_slug="demo", session_code="standup", identifier="ADA@example.com", identifier_type="email"
    )

    assert result.message == "Welcome, Ada Admin! Check-in successful."
    assert result.record.method == AttendanceMethod.MANUAL
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.meta == {"self_checkin": True, "authenticated": False, "identifier_type": "email"}
    assert len(world.attendance.records) == 1


def test_public_checkin_accepts_qr_payload_and_phone_default(world):
    result = _service(world).public_checkin(
        org_slug="demo", qr_token="attend://event/tok-123", identifier="+15550000002"
    )

    assert result.person.person_id == 2
    assert result.record.method == AttendanceMethod.QR


def test_public_checkin_validation_errors(world):
    svc = _service(world)

    with pytest.raises(ValidationError, match="Session code or QR token is required"):
        svc.public_checkin(org_slug="demo", identifier="+15550000001")
    with pytest.raises(ValidationError, match="identify you"):
        svc.public_checkin(org_slug="demo", session_code="STANDUP")
    with pytest.raises(ValidationError, match="Invalid identifier type"):
        svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="x", identifier_type="fax")
    with pytest.raises(ValidationError, match="lat"):
        svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="x", lat=91, lng=0)


def test_public_checkin_not_found_cases(world):
    svc = _service(world)

    with pytest.raises(NotFoundError, match="Organization not found"):
        svc.public_checkin(org_slug="nope", session_code="STANDUP", identifier="+15550000001")
    with pytest.raises(NotFoundError, match="Invalid session code"):
        svc.public_checkin(org_slug="demo", session_code="WRONG", identifier="+15550000001")
    with pytest.raises(NotFoundError, match="couldn't find your profile"):
        svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="+19999999999")
    with pytest.raises(NotFoundError):
        svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="+15550000003")
    assert world.attendance.records == []


def test_second_checkin_is_already_checked_in(world):
    svc = _service(world)
    svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="EMP-2", identifier_type="external_id")

    with pytest.raises(EligibilityDenied) as exc:
        svc.public_checkin(org_slug="demo", session_code="STANDUP", identifier="EMP-2", identifier_type="external_id")

    assert exc.value.verdict.reason == DenialReason.ALREADY_CHECKED_IN
    assert len(world.attendance.records) == 1


def test_authenticated_geo_checkin_stores_coordinates(world):
    result = _service(world).authenticated_checkin(
        org_slug="demo", user_id="user-ada", session_id="1", method="geo", lat="40.7484", lng=-73.9857, accuracy=12
    )

    assert result.message == "Check-in successful!"
    assert result.record.method == AttendanceMethod.GEO
    assert (result.record.lat, result.record.lng, result.record.accuracy_m) == (40.7484, -73.9857, 12.0)
    assert result.record.meta["method_detail"] == "geo"
    assert result.record.meta["authenticated"] is True


def test_authenticated_event_code_is_stored_as_manual(world):
    result = _service(world).authenticated_checkin(
        org_slug="demo", user_id="user-ada", session_id=1, method="event_code", event_code="standup"
    )

    assert result.record.method == AttendanceMethod.MANUAL
    assert result.record.meta["method_detail"] == "event_code"


def test_authenticated_checkin_validation(world):
    svc = _service(world)

    with pytest.raises(ValidationError, match="session_id is required"):
        svc.authenticated_checkin(org_slug="demo", user_id="user-ada", method="qr")
    with pytest.raises(ValidationError, match="session_id must be an integer id"):
        svc.authenticated_checkin(org_slug="demo", user_id="user-ada", session_id="abc", method="qr")
    with pytest.raises(ValidationError, match="Valid method is required"):
        svc.authenticated_checkin(org_slug="demo", user_id="user-ada", session_id=1, method="kiosk")
    with pytest.raises(ValidationError, match="together"):
        svc.authenticated_checkin(org_slug="demo", user_id="user-ada", session_id=1, method="geo", lat=1)


def test_authenticated_checkin_without_user_requires_login(world):
    with pytest.raises(EligibilityDenied) as exc:
        _service(world).authenticated_checkin(
            org_slug="demo", user_id=None, session_id=1, method="qr", qr_token="tok-123"
        )

    assert exc.value.verdict.requires_login is True
    assert world.attendance.records == []


def test_late_status_after_configured_minutes(world):
    # fixture session started an hour ago
    result = _service(world, late_after_minutes=30).authenticated_checkin(
        org_slug="demo", user_id="user-ada", session_id=1, method="qr", qr_token="tok-123"
    )

    assert result.record.status == AttendanceStatus.LATE


def test_kiosk_checkin_unwraps_person_qr(world):
    result = _service(world).kiosk_checkin(org_slug="demo", event_id="1", person_checkin_code="attend://person/BEN002")

    assert result.message == "Welcome, Ben Member!"
    assert result.person.person_id == 2
    assert result.record.method == AttendanceMethod.KIOSK
    assert result.record.meta == {"kiosk": True, "event_kiosk": True}


def test_kiosk_checkin_rejects_missing_and_inactive_people(world):
    svc = _service(world)

    with pytest.raises(ValidationError, match="person_checkin_code is required"):
        svc.kiosk_checkin(org_slug="demo", event_id=1, person_checkin_code="  ")
    with pytest.raises(NotFoundError, match="Person not found"):
        svc.kiosk_checkin(org_slug="demo", event_id=1, person_checkin_code="CY0003")
    with pytest.raises(NotFoundError, match="Person not found"):
        svc.kiosk_checkin(org_slug="demo", event_id=1, person_checkin_code="NOPE")


def test_kiosk_checkin_denied_when_kiosk_disabled(world):
    world.update_session(allowed_methods={"kiosk": False})

    with pytest.raises(EligibilityDenied) as exc:
        _service(world).kiosk_checkin(org_slug="demo", event_id=1, person_checkin_code="ADA001")

    assert exc.value.verdict.reason == DenialReason.METHOD_NOT_ENABLED


def test_event_qr_png_requires_linked_user(world):
    svc = _service(world)

    with pytest.raises(AuthorizationError):
        svc.event_qr_png(org_slug="demo", event_id=1, user_id=None)
    with pytest.raises(AuthorizationError):
        svc.event_qr_png(org_slug="demo", event_id=1, user_id="stranger")

    buf = svc.event_qr_png(org_slug="demo", event_id=1, user_id="user-ada")
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_event_qr_png_missing_token_is_not_found(world):
    world.update_session(event_qr_token=None)

    with pytest.raises(NotFoundError):
        _service(world).event_qr_png(org_slug="demo", event_id=1, user_id="user-ada")
