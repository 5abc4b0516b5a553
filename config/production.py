import os

from .config import Config, db_config, mail_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()
MAIL_CONFIG = mail_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL
OJT_REQUIRED_HOURS = Config.OJT_REQUIRED_HOURS

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
