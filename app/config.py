"""
config.py
---------

This module defines configuration classes for the Flask application based on
the environment.

Classes:
    - Config: Base configuration common to all environments.
    - DevelopmentConfig: Configuration for development.
    - TestingConfig: Configuration for testing.
    - StagingConfig: Configuration for staging.
    - ProductionConfig: Configuration for production.

Besides the database URL, the base class carries the JWT settings, the
admin e-mail fallback list, affiliate link parameters, the NewsAPI key and
the audit/rate-limit switches.
"""

import os
from dotenv import load_dotenv

# Error messages constants
DATABASE_URL_ERROR = "DATABASE_URL environment variable is not set."

# Load .env file ONLY if not running in Docker
# This hook ensures environment variables are loaded for flask commands
if not os.environ.get("IN_DOCKER_CONTAINER") and not os.environ.get(
    "APP_MODE"
):
    env = os.environ.get("FLASK_ENV", "development")
    ENV_FILE = f".env.{env}"
    if os.path.exists(ENV_FILE):
        load_dotenv(ENV_FILE)
    # Fallback to generic .env if environment-specific file doesn't exist
    elif os.path.exists(".env"):
        load_dotenv(".env")


def _env_flag(name, default="false"):
    return os.environ.get(name, default).strip().lower() in (
        "1",
        "true",
        "yes",
        "on",
    )


def _env_list(name):
    raw = os.environ.get(name, "")
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    """Base configuration common to all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Authentication
    JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
    JWT_EXPIRATION_SECONDS = int(
        os.environ.get("JWT_EXPIRATION_SECONDS", "86400")
    )
    ADMIN_EMAILS = _env_list("ADMIN_EMAILS")

    # Affiliate links
    AFFILIATE_ENABLED = _env_flag("AFFILIATE_ENABLED", "true")
    AFFILIATE_UTM_SOURCE = os.environ.get("AFFILIATE_UTM_SOURCE", "vaultx")
    AFFILIATE_UTM_MEDIUM = os.environ.get("AFFILIATE_UTM_MEDIUM", "affiliate")
    AFFILIATE_UTM_CAMPAIGN = os.environ.get(
        "AFFILIATE_UTM_CAMPAIGN", "ai-tools"
    )
    AFFILIATE_REF = os.environ.get("AFFILIATE_REF", "vaultx")

    # External services
    NEWS_API_KEY = os.environ.get("NEWS_API_KEY")
    NEWS_API_URL = os.environ.get(
        "NEWS_API_URL", "https://newsapi.org/v2/everything"
    )
    OUTBOUND_HTTP_TIMEOUT = float(os.environ.get("OUTBOUND_HTTP_TIMEOUT", "10"))

    # Cross-cutting switches
    ENABLE_AUDIT_LOGGING = _env_flag("ENABLE_AUDIT_LOGGING")
    RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", "true")


class DevelopmentConfig(Config):
    """Configuration for the development environment."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    if not SQLALCHEMY_DATABASE_URI:
        raise ValueError(DATABASE_URL_ERROR)


class TestingConfig(Config):
    """Configuration for the testing environment."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    if not SQLALCHEMY_DATABASE_URI:
        raise ValueError(DATABASE_URL_ERROR)


class StagingConfig(Config):
    """Configuration for the staging environment."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    if not SQLALCHEMY_DATABASE_URI:
        raise ValueError(DATABASE_URL_ERROR)


class ProductionConfig(Config):
    """Configuration for the production environment."""

    DEBUG = False
    ENABLE_AUDIT_LOGGING = True
    SESSION_COOKIE_SECURE = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    if not SQLALCHEMY_DATABASE_URI:
        raise ValueError(DATABASE_URL_ERROR)
