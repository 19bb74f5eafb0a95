from __future__ import annotations

import logging
from typing import Callable

from flask import Flask, jsonify, request, send_file, session

from ..core.enums import DenialReason
from ..core.exceptions import AuthorizationError, EligibilityDenied, NotFoundError, ValidationError
from ..container import Container
from .service import CheckinResult

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _current_user_id():
        # Set by the external sign-in flow on the shared, signed Flask session.
        return session.get("user_id")

    def _handle(action: Callable[[], CheckinResult], render: Callable[[CheckinResult], dict], label: str):
        try:
            result = action()
            return jsonify(render(result)), 200
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except EligibilityDenied as e:
            status = 404 if e.verdict.reason == DenialReason.SESSION_NOT_FOUND else 403
            return jsonify(e.verdict.to_response()), status
        except Exception:
            logger.exception("%s check-in failed", label)
            return jsonify({"success": False, "error": "An unexpected error occurred"}), 500

    def _record_body(result: CheckinResult) -> dict:
        return {"success": True, "message": result.message, "record": result.record.to_dict()}

    def _kiosk_body(result: CheckinResult) -> dict:
        return {
            "success": True,
            "message": result.message,
            "person": {"id": result.person.person_id, "full_name": result.person.full_name},
        }

    @app.route("/<org_slug>/api/self-checkin/public", methods=["POST"], endpoint="self_checkin_public")
    def self_checkin_public(org_slug: str):
        def action() -> CheckinResult:
            body = _json_body()
            return container.checkin_service.public_checkin(
                org_slug=org_slug,
                session_code=body.get("session_code"),
                qr_token=body.get("qr_token"),
                identifier=body.get("identifier"),
                identifier_type=body.get("identifier_type"),
                lat=body.get("lat"),
                lng=body.get("lng"),
                accuracy=body.get("accuracy"),
            )

        return _handle(action, _record_body, "Public self")

    @app.route("/<org_slug>/api/self-checkin/auth", methods=["POST"], endpoint="self_checkin_auth")
    def self_checkin_auth(org_slug: str):
        def action() -> CheckinResult:
            body = _json_body()
            return container.checkin_service.authenticated_checkin(
                org_slug=org_slug,
                user_id=_current_user_id(),
                session_id=body.get("session_id"),
                method=body.get("method"),
                lat=body.get("lat"),
                lng=body.get("lng"),
                accuracy=body.get("accuracy"),
                event_code=body.get("event_code"),
                qr_token=body.get("qr_token"),
            )

        return _handle(action, _record_body, "Authenticated self")

    @app.route("/<org_slug>/api/events/<event_id>/kiosk-checkin", methods=["POST"], endpoint="kiosk_checkin")
    def kiosk_checkin(org_slug: str, event_id: str):
        def action() -> CheckinResult:
            body = _json_body()
            return container.checkin_service.kiosk_checkin(
                org_slug=org_slug,
                event_id=event_id,
                person_checkin_code=body.get("person_checkin_code"),
                lat=body.get("lat"),
                lng=body.get("lng"),
                accuracy=body.get("accuracy"),
            )

        return _handle(action, _kiosk_body, "Kiosk")

    @app.route("/<org_slug>/api/events/<event_id>/qr.png", methods=["GET"], endpoint="event_qr_image")
    def event_qr_image(org_slug: str, event_id: str):
        """Printable event QR for signed-in members of the organization."""
        try:
            buf = container.checkin_service.event_qr_png(
                org_slug=org_slug,
                event_id=event_id,
                user_id=_current_user_id(),
            )
            return send_file(buf, mimetype="image/png")
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "error": str(e)}), 403
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception:
            logger.exception("Event QR rendering failed")
            return jsonify({"success": False, "error": "An unexpected error occurred"}), 500
