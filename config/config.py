"""Settings shared by every environment module.

Values come from the process environment (a ``.env`` file is loaded by
``create_app``); environment modules override what differs.
"""

import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "mice-attendance-dev-key"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "mice_attendance")
    DB_CONNECT_TIMEOUT = int(os.environ.get("DB_CONNECT_TIMEOUT", "5"))

    MAIL_SERVER = os.environ.get("EMAIL_SERVER_HOST", "smtp.gmail.com")
    MAIL_PORT = int(os.environ.get("EMAIL_SERVER_PORT", "587"))
    MAIL_USE_TLS = _flag("EMAIL_USE_TLS", "1")
    MAIL_USE_SSL = _flag("EMAIL_USE_SSL", "0")
    MAIL_USERNAME = os.environ.get("EMAIL_SERVER_USER")
    MAIL_PASSWORD = os.environ.get("EMAIL_SERVER_PASSWORD")
    MAIL_SENDER = os.environ.get("EMAIL_FROM") or MAIL_USERNAME
    MAIL_TIMEOUT_SECONDS = float(os.environ.get("MAIL_TIMEOUT_SECONDS", "10"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    OJT_REQUIRED_HOURS = float(os.environ.get("OJT_REQUIRED_HOURS", "500"))

    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")


def db_config(**overrides) -> dict:
    cfg = {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
        "connection_timeout": Config.DB_CONNECT_TIMEOUT,
    }
    cfg.update(overrides)
    return cfg


def mail_config(**overrides) -> dict:
    cfg = {
        "server": Config.MAIL_SERVER,
        "port": Config.MAIL_PORT,
        "use_tls": Config.MAIL_USE_TLS,
        "use_ssl": Config.MAIL_USE_SSL,
        "username": Config.MAIL_USERNAME,
        "password": Config.MAIL_PASSWORD,
        "sender": Config.MAIL_SENDER,
        "timeout": Config.MAIL_TIMEOUT_SECONDS,
    }
    cfg.update(overrides)
    return cfg
