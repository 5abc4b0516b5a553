from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import admin_required
from ..core.exceptions import NotificationFailure
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/email", methods=["GET"], endpoint="api_email_check")
    @admin_required
    def api_email_check():
        """Check that the configured mail server accepts a connection."""

        try:
            container.mail_transport.verify()
        except NotificationFailure as e:
            return jsonify({"status": "error", "error": str(e)}), 500
        return jsonify({"status": "ok"})
