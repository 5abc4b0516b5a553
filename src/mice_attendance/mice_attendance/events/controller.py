from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, login_required
from ..common.datetime_utils import parse_iso_date, parse_time_of_day
from ..common.responses import error_response
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/events", methods=["GET"], endpoint="api_events")
    @login_required
    def api_events():
        # The scanner needs this list to pick the event being checked into.
        events = container.event_service.list_events()
        return jsonify({"success": True, "events": [e.to_dict() for e in events]})

    @app.route("/api/events", methods=["POST"], endpoint="api_create_event")
    @admin_required
    def api_create_event():
        data = request.get_json(silent=True) or request.form
        try:
            date_s = data.get("date") or ""
            start_s = data.get("start_time") or ""
            end_s = data.get("end_time") or ""
            if not date_s or not start_s or not end_s:
                raise ValidationError("Event date, start time and end time are required")
            try:
                event_date = parse_iso_date(date_s)
                start_time = parse_time_of_day(start_s)
                end_time = parse_time_of_day(end_s)
            except ValueError:
                raise ValidationError("Use YYYY-MM-DD for the date and HH:MM for times") from None

            event = container.event_service.create_event(
                name=data.get("name", ""),
                event_date=event_date,
                start_time=start_time,
                end_time=end_time,
                description=data.get("description"),
                location=data.get("location"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "event": event.to_dict()}), 201

    @app.route("/api/events/<int:event_id>", methods=["GET"], endpoint="api_event")
    @login_required
    def api_event(event_id: int):
        try:
            event = container.event_service.get_event(event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "event": event.to_dict()})

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="api_delete_event")
    @admin_required
    def api_delete_event(event_id: int):
        try:
            container.event_service.delete_event(event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})
