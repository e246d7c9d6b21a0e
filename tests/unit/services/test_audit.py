"""
Tests for the audit trail service.
"""

import pytest
from flask import g
from sqlalchemy.exc import SQLAlchemyError

from app.models.analytics import AuditLog
from app.services.audit import audit_logger


def test_disabled_audit_only_logs(app):
    assert audit_logger.enabled is False
    assert audit_logger.log_action("CREATE", "TOOL", resource_id="t1") is None
    assert AuditLog.query.count() == 0
    assert audit_logger.query() == ([], 0)


def test_enabled_audit_writes_rows(app, user):
    app.config["ENABLE_AUDIT_LOGGING"] = True

    entry = audit_logger.log_login(user)

    assert entry.action == "LOGIN"
    assert entry.resource_type == "AUTH"
    assert entry.user_id == user.id
    assert entry.details == {"method": "password"}
    assert AuditLog.query.count() == 1


def test_request_context_fills_user_and_client(app, admin):
    app.config["ENABLE_AUDIT_LOGGING"] = True
    with app.test_request_context(
        headers={"User-Agent": "pytest", "X-Forwarded-For": "203.0.113.9"}
    ):
        g.user = admin
        entry = audit_logger.log_crud("UPDATE", "TOOL", "t1", {"name": "New"})

    assert entry.user_id == admin.id
    assert entry.user_email == admin.email
    assert entry.ip_address == "203.0.113.9"
    assert entry.user_agent == "pytest"
    assert entry.details == {"name": "New"}


def test_log_crud_rejects_unknown_action(app):
    with pytest.raises(ValueError):
        audit_logger.log_crud("PUBLISH", "TOOL", "t1")


def test_sensitive_operation(app):
    app.config["ENABLE_AUDIT_LOGGING"] = True
    entry = audit_logger.log_sensitive_operation("ROLE_CHANGE", {"to": "admin"})
    assert entry.resource_type == "SENSITIVE"


def test_query_filters(app, user, admin):
    app.config["ENABLE_AUDIT_LOGGING"] = True
    audit_logger.log_login(user)
    audit_logger.log_login(admin)
    audit_logger.log_logout(admin)

    entries, total = audit_logger.query(user_id=admin.id)
    assert total == 2
    entries, total = audit_logger.query(action="LOGOUT")
    assert total == 1
    assert entries[0].user_id == admin.id
    entries, total = audit_logger.query(limit=1, offset=0)
    assert total == 3
    assert len(entries) == 1


def test_write_failure_does_not_raise(app, monkeypatch):
    app.config["ENABLE_AUDIT_LOGGING"] = True

    def broken(**_kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(AuditLog, "log_action", broken)
    assert audit_logger.log_action("DELETE", "TOOL") is None
