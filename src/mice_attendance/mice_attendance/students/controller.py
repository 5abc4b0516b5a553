from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.auth import admin_required
from ..common.responses import error_response
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    @admin_required
    def api_students():
        students = container.student_service.list_students()
        return jsonify({"success": True, "students": [s.to_dict() for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="api_create_student")
    @admin_required
    def api_create_student():
        data = request.get_json(silent=True) or request.form
        try:
            student = container.student_service.create_student(
                name=data.get("name", ""),
                email=data.get("email", ""),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "student": student.to_dict()}), 201

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="api_student")
    @admin_required
    def api_student(student_id: int):
        try:
            student = container.student_service.get_student(student_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "student": student.to_dict()})

    @app.route("/api/students/<int:student_id>", methods=["PUT", "PATCH"], endpoint="api_update_student")
    @admin_required
    def api_update_student(student_id: int):
        data = request.get_json(silent=True) or {}
        try:
            student = container.student_service.update_student(
                student_id,
                name=data.get("name"),
                email=data.get("email"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "student": student.to_dict()})

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @admin_required
    def api_delete_student(student_id: int):
        try:
            container.student_service.delete_student(student_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/students/<int:student_id>/qr.png", methods=["GET"], endpoint="api_student_qr")
    @admin_required
    def api_student_qr(student_id: int):
        """Printable QR code carrying the student's scan token."""

        try:
            png = container.student_service.qr_png(student_id)
        except DomainError as e:
            return error_response(e)
        return send_file(io.BytesIO(png), mimetype="image/png", download_name=f"student_{student_id}_qr.png")
