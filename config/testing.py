from .config import db_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config("resource_room_test")

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

TEACHER_REGISTRATION_CODE = "test-code"
SESSION_LIFETIME_HOURS = 24
SESSION_COOKIE_SECURE = False
LOG_LEVEL = "WARNING"
LOG_FORMAT = "text"
