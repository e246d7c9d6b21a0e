"""
config.py
---------

Admin-only ``GET /api/admin/config``: a snapshot of the running
configuration. Secrets are reported as set/unset, never echoed.
"""

import os
from flask import current_app
from flask_restful import Resource
from app.services.rate_limit import admin_limiter, rate_limited
from app.utils import require_admin


class ConfigResource(Resource):
    """Resource for providing the application configuration."""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """
        Retrieve the current application configuration.

        Returns:
            dict: Non-secret settings and HTTP status code 200.
        """
        config = current_app.config
        return {
            "FLASK_ENV": os.getenv("FLASK_ENV"),
            "LOG_LEVEL": os.getenv("LOG_LEVEL"),
            "DEBUG": bool(config.get("DEBUG")),
            "DATABASE_CONFIGURED": bool(config.get("SQLALCHEMY_DATABASE_URI")),
            "JWT_SECRET": bool(os.getenv("JWT_SECRET")),
            "JWT_EXPIRATION_SECONDS": config.get("JWT_EXPIRATION_SECONDS"),
            "ADMIN_EMAILS_COUNT": len(config.get("ADMIN_EMAILS") or []),
            "AFFILIATE_ENABLED": bool(config.get("AFFILIATE_ENABLED")),
            "NEWS_API_KEY": bool(config.get("NEWS_API_KEY")),
            "ENABLE_AUDIT_LOGGING": bool(config.get("ENABLE_AUDIT_LOGGING")),
            "RATE_LIMIT_ENABLED": bool(config.get("RATE_LIMIT_ENABLED")),
        }, 200
