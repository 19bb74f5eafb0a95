"""Self check-in eligibility engine.

A single-pass decision over the gates below, stopping at the first denial:

1. the session exists in the organization
2. the session window is open
3. the caller resolves to a person of the organization
4. the method is enabled for the session
5. the presented proof is valid
6. session assignments (people or groups), the session group and access
   overrides allow the person

The engine only reads. Writing the attendance record stays with the caller.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..common.deadline import Deadline
from ..core.enums import CheckinMethod, DenialReason
from ..geofence.evaluator import GeofenceEvaluator
from ..geofence.model import Geofence
from ..sessions.model import Session
from ..sessions.window import SessionWindowPolicy
from .model import EligibilityConfig, EligibilityRequest, EligibilityVerdict
from .ports import EligibilityDataSource
from .verifier import ProofVerifier, ProofVerifierFactory

logger = logging.getLogger(__name__)


class EligibilityEngine:
    def __init__(
        self,
        data: EligibilityDataSource,
        *,
        config: EligibilityConfig | None = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._data = data
        self._config = config or EligibilityConfig()
        self._clock = clock
        self._window = SessionWindowPolicy(
            early_open_minutes=self._config.early_open_minutes,
            late_close_minutes=self._config.late_close_minutes,
        )
        self._verifier = ProofVerifier(
            ProofVerifierFactory(GeofenceEvaluator(accuracy_policy=self._config.accuracy_policy))
        )

    @property
    def config(self) -> EligibilityConfig:
        return self._config

    def compute_eligibility(
        self,
        request: EligibilityRequest,
        *,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
    ) -> EligibilityVerdict:
        now = now or self._clock()
        # lookups below run under the deadline, see database.mysql_base.db_cursor
        with deadline.bound() if deadline is not None else nullcontext():
            verdict = self._decide(request, now=now, deadline=deadline)
        if verdict.allowed:
            logger.debug("Eligibility allowed: %r", request)
        else:
            logger.info("Eligibility denied (%s): %r", verdict.reason.value, request)
        return verdict

    def _read(self, deadline: Optional[Deadline], what: str, fn, **kwargs):
        if deadline is not None:
            deadline.check(what)
        return fn(**kwargs)

    def _decide(self, request: EligibilityRequest, *, now: datetime, deadline: Optional[Deadline]) -> EligibilityVerdict:
        method = CheckinMethod(request.method)

        session: Optional[Session] = self._read(
            deadline, "session lookup", self._data.get_session, org_id=request.org_id, session_id=request.session_id
        )
        if session is None:
            return EligibilityVerdict.deny(DenialReason.SESSION_NOT_FOUND)

        geofence: Optional[Geofence] = None
        if method == CheckinMethod.GEO and session.location_id is not None:
            geofence = self._read(
                deadline, "geofence lookup", self._data.get_geofence_for_location, location_id=session.location_id
            )

        window = self._window.is_open(session, now)
        if not window.open:
            return EligibilityVerdict.deny(window.reason)

        if request.user_id is not None:
            person_id = self._read(
                deadline, "person link lookup", self._data.get_person_link, org_id=request.org_id, user_id=request.user_id
            )
            if person_id is None:
                return EligibilityVerdict.deny(DenialReason.NO_LINKED_PERSON, requires_invite=True)
        elif request.person_id is not None:
            person_id = request.person_id
        elif method == CheckinMethod.KIOSK:
            return EligibilityVerdict.deny(DenialReason.UNIDENTIFIED_PERSON)
        else:
            return EligibilityVerdict.deny(DenialReason.AUTHENTICATION_REQUIRED, requires_login=True)

        if not session.method_enabled(method):
            return EligibilityVerdict.deny(DenialReason.METHOD_NOT_ENABLED, person_id=person_id)

        proof = self._verifier.verify(method, request, session, geofence)
        if not proof.valid:
            return EligibilityVerdict.deny(
                proof.reason,
                person_id=person_id,
                distance_meters=proof.distance_m,
                geofence_radius=proof.radius_m,
            )

        if self._config.enforce_assignments:
            denial = self._check_assignment(request, session, person_id, deadline)
            if denial is not None:
                return denial

        if self._config.enforce_overrides:
            override = self._read(
                deadline,
                "access override lookup",
                self._data.get_deny_override,
                org_id=request.org_id,
                person_id=person_id,
                session_id=session.session_id,
                group_id=session.group_id,
            )
            if override is not None:
                return EligibilityVerdict.deny(DenialReason.ACCESS_RESTRICTED, person_id=person_id, detail=override.reason)

        return EligibilityVerdict.allow(person_id=person_id, checked_at=now)

    def _check_assignment(
        self, request: EligibilityRequest, session: Session, person_id: int, deadline: Optional[Deadline]
    ) -> Optional[EligibilityVerdict]:
        """Sessions with assigned people or groups admit only those attendees.

        A session bound to a group additionally requires membership of that
        group, unless a group-scoped allow override admits the person.
        """
        assigned_people = self._read(
            deadline, "assignment lookup", self._data.list_assigned_person_ids, session_id=session.session_id
        )
        assigned_groups = self._read(
            deadline, "group assignment lookup", self._data.list_assigned_group_ids, session_id=session.session_id
        )

        memberships: Optional[frozenset[int]] = None
        if (assigned_people or assigned_groups) and person_id not in assigned_people:
            memberships = self._read(
                deadline,
                "group membership lookup",
                self._data.list_person_group_ids,
                org_id=request.org_id,
                person_id=person_id,
            )
            if not memberships & assigned_groups:
                return EligibilityVerdict.deny(DenialReason.NOT_ASSIGNED, person_id=person_id)

        if session.group_id is None:
            return None
        if memberships is None:
            memberships = self._read(
                deadline,
                "group membership lookup",
                self._data.list_person_group_ids,
                org_id=request.org_id,
                person_id=person_id,
            )
        if session.group_id in memberships:
            return None

        allow = self._read(
            deadline,
            "group allow override lookup",
            self._data.get_group_allow_override,
            org_id=request.org_id,
            person_id=person_id,
            group_id=session.group_id,
        )
        if allow is not None:
            return None
        return EligibilityVerdict.deny(DenialReason.NOT_GROUP_MEMBER, person_id=person_id)
