import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


def db_config(default_database: str = "resource_room") -> dict:
    return {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "3306")),
        "user": os.environ.get("DB_USER", "root"),
        "password": os.environ.get("DB_PASSWORD", ""),
        "database": os.environ.get("DB_NAME", default_database),
    }


class Config:
    TEACHER_REGISTRATION_CODE = os.environ.get("TEACHER_REGISTRATION_CODE")
    SESSION_LIFETIME_HOURS = int(os.environ.get("SESSION_LIFETIME_HOURS", "24"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")
