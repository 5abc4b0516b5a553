import os

from .config import db_config, mail_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config(database=os.getenv("DB_NAME", "mice_attendance_test"))
MAIL_CONFIG = mail_config(timeout=2)

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
OJT_REQUIRED_HOURS = 500.0

AUTO_INIT_DB = False
AUTO_SEED_DB = False
