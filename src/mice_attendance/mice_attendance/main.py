from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_mail import Mail

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_MAIL_TIMEOUT_SECONDS, MAIL_SENDER_NAME
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .events.controller import register as register_events
from .notifications.controller import register as register_notifications
from .notifications.transport import FlaskMailTransport
from .ojt.controller import register as register_ojt
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _configure_mail(app: Flask, mail_config: dict) -> None:
    app.config.update(
        MAIL_SERVER=mail_config.get("server", "localhost"),
        MAIL_PORT=int(mail_config.get("port", 587)),
        MAIL_USE_TLS=bool(mail_config.get("use_tls", True)),
        MAIL_USE_SSL=bool(mail_config.get("use_ssl", False)),
        MAIL_USERNAME=mail_config.get("username"),
        MAIL_PASSWORD=mail_config.get("password"),
        MAIL_DEFAULT_SENDER=mail_config.get("sender"),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt ``container`` (e.g. in-memory repositories in tests) to
    skip settings-driven database and mail wiring.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        mail_config = dict(getattr(settings, "MAIL_CONFIG", {}))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("demo seed ready")

        _configure_mail(app, mail_config)
        transport = FlaskMailTransport(
            app,
            Mail(app),
            sender=(MAIL_SENDER_NAME, mail_config.get("sender") or mail_config.get("username") or "no-reply@localhost"),
            timeout=float(mail_config.get("timeout", DEFAULT_MAIL_TIMEOUT_SECONDS)),
        )
        atexit.register(transport.close)
        container = build_container(
            db_config=db_config,
            mail_transport=transport,
            ojt_required_hours=getattr(settings, "OJT_REQUIRED_HOURS", None),
        )

    app.extensions["mice_container"] = container

    register_users(app, container)
    register_students(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_notifications(app, container)
    register_ojt(app, container)

    return app
