import os

from .config import Config, db_config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")

TEACHER_REGISTRATION_CODE = Config.TEACHER_REGISTRATION_CODE or "dev-registration-code"
SESSION_LIFETIME_HOURS = Config.SESSION_LIFETIME_HOURS
SESSION_COOKIE_SECURE = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = Config.LOG_FORMAT
