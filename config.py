from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CSRF (Flask-WTF): токен отдаём через /api/v1/csrf, фронт шлёт его в заголовке
    WTF_CSRF_TIME_LIMIT = None
    WTF_CSRF_HEADERS = ["X-CSRF-Token", "X-CSRFToken"]

    # генерация занятий
    LESSONS_DEFAULT_TIMEZONE = os.getenv("LESSONS_DEFAULT_TIMEZONE", "Europe/Kyiv")
    LESSONS_MONTHS_AHEAD = int(os.getenv("LESSONS_MONTHS_AHEAD", "1"))
    LESSONS_PUBLIC_ID_PREFIX = "LSN"

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"email": "admin@example.com", "password": "pass", "role": "ADMIN"},
        {"email": "t1@example.com",    "password": "pass", "role": "TEACHER"},
    ]

class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

config_map = {
    "dev": DevConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
