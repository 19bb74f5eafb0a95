from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..attendance.factory import AttendanceStatusFactory
from ..attendance.model import AttendanceRecord, NewAttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..common.deadline import Deadline
from ..common.qr import event_qr_payload, parse_event_qr, parse_person_qr, render_qr_png
from ..common.validators import optional_float, optional_str, require_non_empty
from ..core.constants import DEFAULT_DEADLINE_SECONDS
from ..core.enums import AttendanceMethod, CheckinMethod, DenialReason, IdentifierType
from ..core.exceptions import (
    AuthorizationError,
    DuplicateRecordError,
    EligibilityDenied,
    NotFoundError,
    ValidationError,
)
from ..geofence.model import Point
from ..organizations.model import Organization
from ..organizations.repository import OrganizationRepository
from ..people.model import Person
from ..people.repository import PersonRepository
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from .engine import EligibilityEngine
from .model import EligibilityRequest, EligibilityVerdict

logger = logging.getLogger(__name__)

AUTH_METHODS = (CheckinMethod.GEO, CheckinMethod.EVENT_CODE, CheckinMethod.QR)

_STORED_METHOD = {
    CheckinMethod.QR: AttendanceMethod.QR,
    CheckinMethod.GEO: AttendanceMethod.GEO,
    CheckinMethod.KIOSK: AttendanceMethod.KIOSK,
    CheckinMethod.EVENT_CODE: AttendanceMethod.MANUAL,
}


@dataclass(frozen=True)
class CheckinResult:
    message: str
    record: AttendanceRecord
    person: Optional[Person] = None


def parse_point(lat: Any, lng: Any, accuracy: Any) -> Optional[Point]:
    lat_f = optional_float(lat, "lat", minimum=-90, maximum=90)
    lng_f = optional_float(lng, "lng", minimum=-180, maximum=180)
    accuracy_f = optional_float(accuracy, "accuracy", minimum=0)
    if lat_f is None and lng_f is None:
        return None
    if lat_f is None or lng_f is None:
        raise ValidationError("lat and lng must be provided together")
    return Point(lat=lat_f, lng=lng_f, accuracy_m=accuracy_f)


def parse_id(value: Any, field_name: str) -> int:
    raw = require_non_empty(value, field_name)
    try:
        parsed = int(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer id")
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be an integer id")
    return parsed


class CheckinService:
    """Use cases behind the three check-in routes.

    Resolves organization and identity, asks the engine for a verdict and, on
    allow, appends the attendance record.
    """

    def __init__(
        self,
        engine: EligibilityEngine,
        organizations: OrganizationRepository,
        sessions: SessionRepository,
        people: PersonRepository,
        attendance: AttendanceRepository,
        *,
        status_factory: AttendanceStatusFactory | None = None,
        deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
    ):
        self._engine = engine
        self._organizations = organizations
        self._sessions = sessions
        self._people = people
        self._attendance = attendance
        self._status_factory = status_factory or AttendanceStatusFactory()
        self._deadline_seconds = float(deadline_seconds)

    def _new_deadline(self, deadline: Optional[Deadline]) -> Deadline:
        return deadline or Deadline.after(self._deadline_seconds)

    def _get_org(self, org_slug: str) -> Organization:
        org = self._organizations.get_by_slug(org_slug)
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def _evaluate(self, request: EligibilityRequest, deadline: Deadline) -> EligibilityVerdict:
        verdict = self._engine.compute_eligibility(request, deadline=deadline)
        if not verdict.allowed:
            raise EligibilityDenied(verdict)
        return verdict

    def _record(
        self,
        *,
        org: Organization,
        session: Session,
        verdict: EligibilityVerdict,
        method: CheckinMethod,
        point: Optional[Point],
        meta: dict,
        deadline: Deadline,
    ) -> AttendanceRecord:
        deadline.check("attendance insert")
        now: datetime = verdict.checked_at or now_utc()
        new_record = NewAttendanceRecord(
            org_id=org.org_id,
            session_id=session.session_id,
            person_id=verdict.person_id,
            method=_STORED_METHOD[method],
            status=self._status_factory.for_checkin(now=now, session=session),
            created_at=now,
            lat=point.lat if point else None,
            lng=point.lng if point else None,
            accuracy_m=point.accuracy_m if point else None,
            meta=meta,
        )
        try:
            return self._attendance.create_record(new_record)
        except DuplicateRecordError:
            logger.info(
                "Duplicate check-in rejected: org=%s session=%s person=%s",
                org.org_id,
                session.session_id,
                verdict.person_id,
            )
            raise EligibilityDenied(
                EligibilityVerdict.deny(DenialReason.ALREADY_CHECKED_IN, person_id=verdict.person_id)
            )

    def public_checkin(
        self,
        *,
        org_slug: str,
        session_code: Any = None,
        qr_token: Any = None,
        identifier: Any = None,
        identifier_type: Any = None,
        lat: Any = None,
        lng: Any = None,
        accuracy: Any = None,
        deadline: Optional[Deadline] = None,
    ) -> CheckinResult:
        session_code = optional_str(session_code)
        qr_token = parse_event_qr(optional_str(qr_token))
        if not session_code and not qr_token:
            raise ValidationError("Session code or QR token is required")

        identifier = optional_str(identifier)
        if not identifier:
            raise ValidationError("Phone number or email is required to identify you")
        try:
            id_type = IdentifierType(optional_str(identifier_type) or IdentifierType.PHONE.value)
        except ValueError:
            raise ValidationError("Invalid identifier type")

        point = parse_point(lat, lng, accuracy)
        deadline = self._new_deadline(deadline)

        with deadline.bound():
            org = self._get_org(org_slug)
            if session_code:
                session = self._sessions.find_by_public_code(org_id=org.org_id, public_code=session_code)
            else:
                session = self._sessions.find_by_qr_token(org_id=org.org_id, event_qr_token=qr_token)
            if not session:
                raise NotFoundError("Invalid session code or QR. Please check and try again.")

            person = self._people.find_by_identifier(org_id=org.org_id, identifier_type=id_type, identifier=identifier)
            if not person or not person.is_active:
                raise NotFoundError(
                    "We couldn't find your profile. Please check your details or contact an administrator."
                )

            method = CheckinMethod.EVENT_CODE if session_code else CheckinMethod.QR
            verdict = self._evaluate(
                EligibilityRequest(
                    org_id=org.org_id,
                    session_id=session.session_id,
                    method=method,
                    person_id=person.person_id,
                    point=point,
                    event_code=session_code,
                    qr_token=qr_token if method == CheckinMethod.QR else None,
                ),
                deadline,
            )

            record = self._record(
                org=org,
                session=session,
                verdict=verdict,
                method=method,
                point=point,
                meta={"self_checkin": True, "authenticated": False, "identifier_type": id_type.value},
                deadline=deadline,
            )
            return CheckinResult(
                message=f"Welcome, {person.full_name}! Check-in successful.",
                record=record,
                person=person,
            )

    def authenticated_checkin(
        self,
        *,
        org_slug: str,
        user_id: Optional[str],
        session_id: Any = None,
        method: Any = None,
        lat: Any = None,
        lng: Any = None,
        accuracy: Any = None,
        event_code: Any = None,
        qr_token: Any = None,
        deadline: Optional[Deadline] = None,
    ) -> CheckinResult:
        session_pk = parse_id(session_id, "session_id")
        try:
            checkin_method = CheckinMethod(optional_str(method) or "")
        except ValueError:
            checkin_method = None
        if checkin_method not in AUTH_METHODS:
            raise ValidationError("Valid method is required (geo, event_code, qr)")

        point = parse_point(lat, lng, accuracy)
        deadline = self._new_deadline(deadline)

        with deadline.bound():
            org = self._get_org(org_slug)
            verdict = self._evaluate(
                EligibilityRequest(
                    org_id=org.org_id,
                    session_id=session_pk,
                    method=checkin_method,
                    user_id=optional_str(user_id),
                    point=point,
                    event_code=optional_str(event_code),
                    qr_token=parse_event_qr(optional_str(qr_token)),
                ),
                deadline,
            )

            session = self._sessions.get_by_id(org_id=org.org_id, session_id=session_pk)
            if not session:
                raise NotFoundError("Session not found")

            record = self._record(
                org=org,
                session=session,
                verdict=verdict,
                method=checkin_method,
                point=point,
                meta={"self_checkin": True, "authenticated": True, "method_detail": checkin_method.value},
                deadline=deadline,
            )
            return CheckinResult(message="Check-in successful!", record=record)

    def kiosk_checkin(
        self,
        *,
        org_slug: str,
        event_id: Any,
        person_checkin_code: Any = None,
        lat: Any = None,
        lng: Any = None,
        accuracy: Any = None,
        deadline: Optional[Deadline] = None,
    ) -> CheckinResult:
        session_pk = parse_id(event_id, "event_id")
        code = parse_person_qr(optional_str(person_checkin_code))
        if not code:
            raise ValidationError("person_checkin_code is required")

        point = parse_point(lat, lng, accuracy)
        deadline = self._new_deadline(deadline)

        with deadline.bound():
            org = self._get_org(org_slug)
            person = self._people.find_by_identifier(
                org_id=org.org_id, identifier_type=IdentifierType.CHECKIN_CODE, identifier=code
            )
            if not person or not person.is_active:
                raise NotFoundError("Person not found")

            verdict = self._evaluate(
                EligibilityRequest(
                    org_id=org.org_id,
                    session_id=session_pk,
                    method=CheckinMethod.KIOSK,
                    person_id=person.person_id,
                    point=point,
                ),
                deadline,
            )

            session = self._sessions.get_by_id(org_id=org.org_id, session_id=session_pk)
            if not session:
                raise NotFoundError("Session not found")

            record = self._record(
                org=org,
                session=session,
                verdict=verdict,
                method=CheckinMethod.KIOSK,
                point=point,
                meta={"kiosk": True, "event_kiosk": True},
                deadline=deadline,
            )
            return CheckinResult(message=f"Welcome, {person.full_name}!", record=record, person=person)

    def event_qr_png(self, *, org_slug: str, event_id: Any, user_id: Optional[str]) -> io.BytesIO:
        """Render the event QR (attend://event/<token>) for members of the organization."""

        session_pk = parse_id(event_id, "event_id")
        org = self._get_org(org_slug)

        user_id = optional_str(user_id)
        if not user_id or self._people.get_linked_person_id(org_id=org.org_id, user_id=user_id) is None:
            raise AuthorizationError("You do not have access to this event")

        session = self._sessions.get_by_id(org_id=org.org_id, session_id=session_pk)
        if not session or not session.event_qr_token:
            raise NotFoundError("Event QR code not found")
        return render_qr_png(event_qr_payload(session.event_qr_token))
