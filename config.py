import os
from sqlalchemy.pool import QueuePool
from urllib.parse import urlparse
import pymysql
pymysql.install_as_MySQLdb()


def env_flag(name, default="False"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change_this_secret_key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 2,
        "pool_timeout": 10,
        "pool_pre_ping": True,
    }

    # Retry wrapper for transient connection failures (delay in milliseconds)
    DATABASE_RETRY_ATTEMPTS = int(os.getenv("DATABASE_RETRY_ATTEMPTS", "3"))
    DATABASE_RETRY_DELAY = int(os.getenv("DATABASE_RETRY_DELAY", "1000"))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if origin.strip()
    ]

    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "access_token")
    AUTH_COOKIE_SECURE = env_flag("AUTH_COOKIE_SECURE", "True")
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")
    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = env_flag("MAIL_USE_TLS", "True")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@college-algebra.local")
    CONTACT_NOTIFY_EMAIL = os.getenv("CONTACT_NOTIFY_EMAIL")

    # Demo values in analytics responses are only emitted when this is on
    ANALYTICS_DEMO_PLACEHOLDERS = env_flag("ANALYTICS_DEMO_PLACEHOLDERS")
    ANALYTICS_DEMO_SEED = int(os.getenv("ANALYTICS_DEMO_SEED", "42"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class DevConfig(Config):
    """Development Configuration"""
    DEBUG = True
    TESTING = False
    AUTH_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'mysql+pymysql://root:@localhost/algebra_db')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DATABASE_RETRY_ATTEMPTS = 2
    DATABASE_RETRY_DELAY = 0
    AUTH_COOKIE_SECURE = False
    MAIL_SUPPRESS_SEND = True
    CONTACT_NOTIFY_EMAIL = None
    ANALYTICS_DEMO_PLACEHOLDERS = False


class ProdConfig(Config):
    """Production Configuration (Heroku deployment)"""
    DEBUG = False

    raw_db_url = os.getenv('DATABASE_URL')

    if raw_db_url:
        if raw_db_url.startswith("mysql://"):
            raw_db_url = raw_db_url.replace("mysql://", "mysql+pymysql://", 1)

        parsed_url = urlparse(raw_db_url)
        SQLALCHEMY_DATABASE_URI = f"{parsed_url.scheme}://{parsed_url.netloc}{parsed_url.path}"
    else:
        SQLALCHEMY_DATABASE_URI = os.getenv('JAWSDB_URL', 'sqlite:///algebra.db')


config_dict = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProdConfig
}
