from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.auth import login_required
from ..common.responses import error_response
from ..core.exceptions import AuthenticationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        username = data.get("username", "")
        password = data.get("password", "")
        remember = data.get("remember_me")

        try:
            s_user = container.auth_service.authenticate(username, password)
        except AuthenticationError as e:
            return error_response(e)

        session.clear()
        session.permanent = bool(remember)
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return jsonify({"success": True, "user": s_user.to_dict()}), 200

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "user": {"id": session["user_id"], "name": session.get("name"), "role": session.get("role")},
            }
        )
