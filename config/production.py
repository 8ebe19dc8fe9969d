import os

from .config import Config, db_config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")

TEACHER_REGISTRATION_CODE = Config.TEACHER_REGISTRATION_CODE
SESSION_LIFETIME_HOURS = Config.SESSION_LIFETIME_HOURS
SESSION_COOKIE_SECURE = True
LOG_LEVEL = Config.LOG_LEVEL
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
