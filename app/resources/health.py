"""
health.py
---------
Liveness/readiness endpoint, served at both ``/health`` and ``/api/health``.

The check runs ``SELECT 1`` against the database and reports whether the
optional integrations (news feed, audit trail) are configured.
"""

import os
from datetime import datetime, timezone
from flask import current_app
from flask_restful import Resource
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.logger import logger
from app.models.db import db
from app.resources.version import API_VERSION


def _utc_stamp():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthResource(Resource):
    """Service health: 200 when the database answers, 503 otherwise."""

    def get(self):
        """
        GET /health

        Returns:
            dict: ``status``, ``service``, ``version``, ``environment``,
            ``timestamp`` and the individual ``checks``.

        Status Codes:
            - 200: Service is healthy
            - 503: Database unreachable or misbehaving
        """
        logger.debug("Health check requested")

        database = self._check_database()
        payload = {
            "status": "healthy" if database["healthy"] else "unhealthy",
            "service": "catalog_api",
            "timestamp": _utc_stamp(),
            "version": API_VERSION,
            "environment": os.getenv("FLASK_ENV", "development"),
            "checks": {
                "database": database,
                "news_feed": {
                    "configured": bool(current_app.config.get("NEWS_API_KEY"))
                },
                "audit_logging": {
                    "enabled": bool(
                        current_app.config.get("ENABLE_AUDIT_LOGGING")
                    )
                },
            },
        }
        return payload, 200 if database["healthy"] else 503

    def _check_database(self):
        started = datetime.now(timezone.utc)
        try:
            value = db.session.execute(text("SELECT 1")).scalar()
        except (OSError, SQLAlchemyError) as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "healthy": False,
                "message": f"Database connection failed: {str(e)}",
            }

        if value != 1:
            return {
                "healthy": False,
                "message": "Database query returned unexpected result",
            }
        elapsed = (datetime.now(timezone.utc) - started).total_seconds()
        return {
            "healthy": True,
            "message": "Database connection successful",
            "response_time_ms": round(elapsed * 1000, 2),
        }
