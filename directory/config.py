"""
Application configuration.
"""
import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _int_env(name, default):
    value = os.environ.get(name)
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _build_database_url():
    """Build the MySQL URL from the DB_* variables unless DATABASE_URL is set."""
    explicit = os.environ.get('DATABASE_URL')
    if explicit:
        return explicit
    return URL.create(
        'mysql+pymysql',
        username=os.environ.get('DB_USER') or 'root',
        password=os.environ.get('DB_PASSWORD') or '',
        host=os.environ.get('DB_HOST') or 'localhost',
        port=_int_env('DB_PORT', 3306),
        database=os.environ.get('MYSQL_DATABASE') or 'appdb',
        query={'charset': 'utf8mb4'},
    ).render_as_string(hide_password=False)


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'

    # Database connection
    DATABASE_URL = _build_database_url()

    # Pool settings
    DB_CONNECTION_LIMIT = _int_env('DB_CONNECTION_LIMIT', 10)
    DB_POOL_TIMEOUT = _int_env('DB_POOL_TIMEOUT', 10)
    DB_POOL_RECYCLE = _int_env('DB_POOL_RECYCLE', 3600)

    # Create tb_user / tb_province on startup (handy for local development)
    DB_CREATE_TABLES = os.environ.get('DB_CREATE_TABLES', 'False').lower() == 'true'

    SERVICE_NAME = 'user-directory'
