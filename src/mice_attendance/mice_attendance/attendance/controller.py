from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.auth import login_required
from ..common.datetime_utils import parse_iso_datetime
from ..common.qr import decode_qr_image
from ..common.responses import error_response
from ..core.enums import ScanMode
from ..core.exceptions import DomainError, PersistenceFailure, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _scan(code: str, event_id, scan_mode, at_s=None):
        """Run one scan and turn every outcome into exactly one JSON response."""

        try:
            at = parse_iso_datetime(at_s) if at_s else None
        except ValueError:
            return error_response(ValidationError("timestamp must be an ISO-8601 datetime"))

        try:
            result = container.scan_service.scan(code, event_id, scan_mode, at=at)
            return jsonify(result.to_dict()), 200
        except PersistenceFailure as e:
            action = "time out" if str(scan_mode).strip().lower() == ScanMode.OUT.value else "time in"
            return error_response(e, message=f"Failed to record {action}")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Attendance scan failed")
            return jsonify({"success": False, "error": "Failed to process attendance"}), 500

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance")
    @login_required
    def api_attendance():
        """Scanner endpoint: {qrCode, eventId, scanMode: "in"|"out"}."""

        data = request.get_json(silent=True) or {}
        qr_code = (data.get("qrCode") or "").strip()
        event_id = data.get("eventId")
        scan_mode = data.get("scanMode")

        if not qr_code or not event_id or not scan_mode:
            return error_response(ValidationError("Missing required fields: qrCode, eventId, or scanMode"))

        return _scan(qr_code, event_id, scan_mode, data.get("timestamp"))

    @app.route("/api/attendance/image", methods=["POST"], endpoint="api_attendance_image")
    @login_required
    def api_attendance_image():
        """Same as /api/attendance, but the QR code comes from an uploaded camera frame."""

        if "image" not in request.files:
            return error_response(ValidationError("Missing image file"))

        event_id = request.form.get("eventId")
        scan_mode = request.form.get("scanMode")
        if not event_id or not scan_mode:
            return error_response(ValidationError("Missing required fields: eventId or scanMode"))

        try:
            code = decode_qr_image(request.files["image"].stream)
        except ValidationError as e:
            return error_response(e)

        return _scan(code, event_id, scan_mode, request.form.get("timestamp"))

    @app.route("/api/events/<int:event_id>/attendance", methods=["GET"], endpoint="api_event_attendance")
    @login_required
    def api_event_attendance(event_id: int):
        try:
            event = container.event_service.get_event(event_id)
            rows = container.ledger.report(event.event_id)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "event": event.to_dict(),
                "records": [r.to_dict() for r in rows],
            }
        )
