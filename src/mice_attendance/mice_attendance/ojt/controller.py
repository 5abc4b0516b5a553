from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request, session

from ..common.auth import login_required
from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _current_user_id() -> int:
        return int(session["user_id"])

    def _date_arg(value, *, field: str, default: date | None = None) -> date | None:
        if not value:
            return default
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError(f"{field} must be a YYYY-MM-DD date") from None

    @app.route("/api/ojt/logs", methods=["GET"], endpoint="api_ojt_logs")
    @login_required
    def api_ojt_logs():
        logs = container.ojt_service.list_logs(user_id=_current_user_id())
        return jsonify({"success": True, "logs": [log.to_dict() for log in logs]})

    @app.route("/api/ojt/logs", methods=["POST"], endpoint="api_ojt_create_log")
    @login_required
    def api_ojt_create_log():
        data = request.get_json(silent=True) or request.form
        try:
            log = container.ojt_service.log_day(
                user_id=_current_user_id(),
                work_date=_date_arg(data.get("date"), field="date"),
                hours=data.get("hours"),
                notes=data.get("notes"),
                audio_url=data.get("audio_url"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "log": log.to_dict()}), 201

    @app.route("/api/ojt/logs/<int:log_id>", methods=["PUT", "PATCH"], endpoint="api_ojt_update_log")
    @login_required
    def api_ojt_update_log(log_id: int):
        data = request.get_json(silent=True) or {}
        try:
            log = container.ojt_service.update_log(
                user_id=_current_user_id(),
                log_id=log_id,
                work_date=_date_arg(data.get("date"), field="date"),
                hours=data.get("hours"),
                notes=data.get("notes"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "log": log.to_dict()})

    @app.route("/api/ojt/logs/<int:log_id>", methods=["DELETE"], endpoint="api_ojt_delete_log")
    @login_required
    def api_ojt_delete_log(log_id: int):
        try:
            container.ojt_service.delete_log(user_id=_current_user_id(), log_id=log_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/ojt/progress", methods=["GET"], endpoint="api_ojt_progress")
    @login_required
    def api_ojt_progress():
        progress = container.ojt_service.progress(user_id=_current_user_id())
        return jsonify({"success": True, "progress": progress.to_dict()})

    @app.route("/api/ojt/journals", methods=["GET"], endpoint="api_ojt_journals")
    @login_required
    def api_ojt_journals():
        journals = container.ojt_service.list_journals(user_id=_current_user_id())
        return jsonify({"success": True, "journals": [j.to_dict() for j in journals]})

    @app.route("/api/ojt/journals", methods=["POST"], endpoint="api_ojt_save_journal")
    @login_required
    def api_ojt_save_journal():
        data = request.get_json(silent=True) or request.form
        try:
            journal = container.ojt_service.save_journal(
                user_id=_current_user_id(),
                text=data.get("journal_text", ""),
                week_of=_date_arg(data.get("week_of"), field="week_of", default=date.today()),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "journal": journal.to_dict()})

    @app.route("/api/ojt/summary", methods=["GET"], endpoint="api_ojt_summary")
    @login_required
    def api_ojt_summary():
        try:
            week_of = _date_arg(request.args.get("week_of"), field="week_of", default=date.today())
        except ValidationError as e:
            return error_response(e)
        summary = container.ojt_service.weekly_summary(user_id=_current_user_id(), week_of=week_of)
        return jsonify({"success": True, "summary": summary.to_dict()})
