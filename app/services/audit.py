"""
audit.py
--------

Audit trail for authentication and administrative actions.

When audit logging is enabled (always in production, otherwise through
``ENABLE_AUDIT_LOGGING``) entries are written to the ``audit_logs`` table.
When disabled they are only emitted as structured log lines. A failing
audit write never breaks the calling request.
"""

from flask import current_app, g, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.analytics import AuditLog
from app.models.db import db
from app.services.rate_limit import client_ip

CRUD_ACTIONS = ("CREATE", "READ", "UPDATE", "DELETE")


class AuditLogger:
    """Writes audit entries for the current request's user."""

    @property
    def enabled(self):
        return bool(current_app.config.get("ENABLE_AUDIT_LOGGING"))

    def log_action(
        self,
        action,
        resource_type,
        resource_id=None,
        details=None,
        user_id=None,
        user_email=None,
        ip_address=None,
        user_agent=None,
    ):
        """
        Record ``action`` on ``resource_type``.

        Missing user and client fields are filled from the current request
        (``g.user`` and request headers) when there is one.

        Returns:
            AuditLog or None: the stored entry, or None when logging is
            disabled or the write failed.
        """
        if has_request_context():
            user = getattr(g, "user", None)
            if user is not None:
                user_id = user_id or user.id
                user_email = user_email or user.email
            ip_address = ip_address or client_ip()
            user_agent = user_agent or request.headers.get("User-Agent")

        entry = {
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "user_id": user_id,
            "user_email": user_email,
            "details": details or {},
            "ip_address": ip_address,
            "user_agent": user_agent,
        }
        if not self.enabled:
            logger.info("Audit log.", **entry)
            return None

        try:
            return AuditLog.log_action(**entry)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to write audit entry.", error=str(e), **entry)
            return None

    def log_login(self, user):
        return self.log_action(
            "LOGIN",
            "AUTH",
            user_id=user.id,
            user_email=user.email,
            details={"method": "password"},
        )

    def log_logout(self, user):
        return self.log_action(
            "LOGOUT", "AUTH", user_id=user.id, user_email=user.email
        )

    def log_crud(self, action, resource_type, resource_id, details=None):
        if action not in CRUD_ACTIONS:
            raise ValueError(f"Unsupported CRUD action: {action}")
        return self.log_action(
            action, resource_type, resource_id=resource_id, details=details
        )

    def log_sensitive_operation(self, action, details=None):
        return self.log_action(action, "SENSITIVE", details=details)

    def query(self, **filters):
        """Filtered audit entries and total; empty when logging is disabled."""
        if not self.enabled:
            return [], 0
        return AuditLog.search(**filters)


audit_logger = AuditLogger()
