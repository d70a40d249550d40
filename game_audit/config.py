import json
import os
from datetime import timedelta
from dotenv import load_dotenv
load_dotenv()


def _int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def _bool_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _list_env(key: str, default: list[str]) -> list[str]:
    raw = os.getenv(key)
    if not raw:
        return default
    try:
        parsed = json.loads(raw)
        if isinstance(parsed, list):
            return [str(item) for item in parsed]
    except (json.JSONDecodeError, TypeError):
        pass
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    APP_NAME = os.getenv('APP_NAME', 'Game Audit')
    APP_VERSION = os.getenv('APP_VERSION', '1.0.0')
    SECRET_KEY = os.getenv('SECRET_KEY', 'changeme')
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///game_audit.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = _bool_env('SQLALCHEMY_ECHO', False)
    MAIL_SERVER = os.getenv('MAIL_SERVER')
    MAIL_PORT = _int_env('MAIL_PORT', 587)
    MAIL_USE_TLS = _bool_env('MAIL_USE_TLS', True)
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.getenv('MAIL_DEFAULT_SENDER')
    MAIL_FALLBACK_TO_NO_AUTH = _bool_env('MAIL_FALLBACK_TO_NO_AUTH', True)
    LANGUAGES = _list_env('LANGUAGES', ['en'])
    BABEL_DEFAULT_LOCALE = os.getenv('DEFAULT_LANGUAGE', 'en')
    BABEL_TRANSLATION_DIRECTORIES = os.path.join(
        os.path.dirname(__file__), 'translations')
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=45)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_DIR = os.getenv('LOG_DIR', os.path.join(os.getcwd(), 'logs'))
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=_int_env('JWT_ACCESS_TOKEN_MINUTES', 60))
    # Business dates ("today" for the edit window) are evaluated in this zone.
    APP_TIMEZONE = os.getenv('APP_TIMEZONE')
    PASSWORD_RESET_MAX_AGE = _int_env('PASSWORD_RESET_MAX_AGE', 3600)
    PAGE_SIZE = _int_env('PAGE_SIZE', 20)
    BASE_URL = os.getenv('BASE_URL')
