"""
analytics.py
------------

Models for tracked events and their rollups (search statistics, per-tool
interaction counters, affiliate clicks) plus the admin audit trail.
"""

import uuid
from datetime import datetime, timezone

from app.models.db import db

INTERACTION_COLUMNS = {
    "view": "view_count",
    "favorite": "favorite_count",
    "share": "share_count",
    "bookmark": "bookmark_count",
    "click_external": "external_click_count",
}


def _now():
    return datetime.now(timezone.utc)


def _count(value):
    """Non-negative integer from a client-supplied count; junk counts as 0."""
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


class AnalyticsEvent(db.Model):
    """A raw event sent by the front-end tracker."""

    __tablename__ = "analytics_events"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    event_type = db.Column(db.String(50), nullable=False)
    event_data = db.Column(db.JSON, default=dict)
    user_id = db.Column(db.String(36), nullable=True)
    session_id = db.Column(db.String(100), nullable=True)
    timestamp = db.Column(db.DateTime, default=_now, nullable=False)
    user_agent = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    referrer = db.Column(db.Text, nullable=True)
    page = db.Column(db.String(500), nullable=True)

    __table_args__ = (
        db.Index("idx_analytics_events_type", "event_type"),
        db.Index("idx_analytics_events_timestamp", "timestamp"),
    )

    def __repr__(self):
        return f"<AnalyticsEvent {self.event_type} @ {self.timestamp}>"

    @classmethod
    def record(cls, **fields):
        """Add an event to the session. The caller commits."""
        event = cls(**fields)
        db.session.add(event)
        return event


class SearchStatistic(db.Model):
    """Aggregated statistics per search query."""

    __tablename__ = "search_statistics"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    search_query = db.Column("query", db.String(500), nullable=False, unique=True)
    search_count = db.Column(db.Integer, nullable=False, default=0)
    total_results = db.Column(db.Integer, nullable=False, default=0)
    average_results = db.Column(db.Float, nullable=False, default=0.0)
    filters_used = db.Column(db.JSON, default=list)
    last_searched = db.Column(db.DateTime, default=_now, nullable=False)

    def __repr__(self):
        return f"<SearchStatistic {self.search_query!r} x{self.search_count}>"

    @classmethod
    def record(cls, query, results_count=0, filters=None):
        """
        Fold one search into the statistics row for ``query``.

        Args:
            query (str): The search text.
            results_count (int): Number of results returned to the user.
            filters (list): Names of the filters that were applied.

        Returns:
            SearchStatistic: The updated (or new) row. Not committed.
        """
        stat = cls.query.filter_by(search_query=query).first()
        if stat is None:
            stat = cls(
                search_query=query,
                search_count=0,
                total_results=0,
                average_results=0.0,
                filters_used=[],
            )
            db.session.add(stat)

        stat.search_count = (stat.search_count or 0) + 1
        stat.total_results = (stat.total_results or 0) + _count(results_count)
        stat.average_results = stat.total_results / stat.search_count
        merged = list(stat.filters_used or [])
        for name in filters if isinstance(filters, (list, tuple)) else []:
            if isinstance(name, str) and name not in merged:
                merged.append(name)
        stat.filters_used = merged
        stat.last_searched = _now()
        return stat


class ToolInteractionStat(db.Model):
    """Per-tool interaction counters."""

    __tablename__ = "tool_interaction_stats"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tool_id = db.Column(db.String(36), nullable=False, unique=True)
    tool_name = db.Column(db.String(200), nullable=True)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    favorite_count = db.Column(db.Integer, nullable=False, default=0)
    share_count = db.Column(db.Integer, nullable=False, default=0)
    bookmark_count = db.Column(db.Integer, nullable=False, default=0)
    external_click_count = db.Column(db.Integer, nullable=False, default=0)
    last_interaction = db.Column(db.DateTime, default=_now, nullable=False)

    def __repr__(self):
        return f"<ToolInteractionStat {self.tool_id}>"

    @property
    def total_interactions(self):
        return sum(
            getattr(self, column) or 0 for column in INTERACTION_COLUMNS.values()
        )

    @classmethod
    def record(cls, tool_id, action, tool_name=None):
        """
        Increment the counter matching ``action``. Unknown actions only
        refresh ``last_interaction``. Not committed.
        """
        stat = cls.query.filter_by(tool_id=tool_id).first()
        if stat is None:
            stat = cls(tool_id=tool_id)
            for column in INTERACTION_COLUMNS.values():
                setattr(stat, column, 0)
            db.session.add(stat)

        if tool_name:
            stat.tool_name = tool_name
        column = INTERACTION_COLUMNS.get(action) if isinstance(action, str) else None
        if column:
            setattr(stat, column, (getattr(stat, column) or 0) + 1)
        stat.last_interaction = _now()
        return stat


class AffiliateClick(db.Model):
    """An outbound click on an affiliate link."""

    __tablename__ = "affiliate_clicks"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tool_id = db.Column(db.String(36), nullable=False, index=True)
    original_url = db.Column(db.Text, nullable=False)
    affiliate_url = db.Column(db.Text, nullable=False)
    user_agent = db.Column(db.Text, nullable=True)
    referrer = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    timestamp = db.Column(db.DateTime, default=_now, nullable=False)

    def __repr__(self):
        return f"<AffiliateClick {self.tool_id} @ {self.timestamp}>"


class AuditLog(db.Model):
    """Audit trail of administrative and authentication actions."""

    __tablename__ = "audit_logs"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id = db.Column(db.String(36), nullable=True)
    user_email = db.Column(db.String(255), nullable=True)
    action = db.Column(db.String(50), nullable=False)
    resource_type = db.Column(db.String(50), nullable=False)
    resource_id = db.Column(db.String(36), nullable=True)
    details = db.Column(db.JSON, default=dict)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)

    __table_args__ = (
        db.Index("idx_audit_logs_user_id", "user_id"),
        db.Index("idx_audit_logs_action", "action"),
        db.Index("idx_audit_logs_created_at", "created_at"),
    )

    def __repr__(self):
        return (
            f"<AuditLog {self.action} on {self.resource_type}"
            f"/{self.resource_id} by {self.user_id}>"
        )

    @classmethod
    def log_action(
        cls,
        action,
        resource_type,
        user_id=None,
        user_email=None,
        resource_id=None,
        details=None,
        ip_address=None,
        user_agent=None,
    ):
        """
        Log an action in the audit trail.

        Args:
            action (str): Action performed (``CREATE``, ``LOGIN``...).
            resource_type (str): Kind of resource touched.
            user_id (str): Acting user.
            user_email (str): Acting user's e-mail.
            resource_id (str): Identifier of the resource, if any.
            details (dict): Additional details.
            ip_address (str): Client address.
            user_agent (str): Client user agent.

        Returns:
            AuditLog: The created log entry.
        """
        log_entry = cls(
            action=action,
            resource_type=resource_type,
            user_id=user_id,
            user_email=user_email,
            resource_id=resource_id,
            details=details or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.session.add(log_entry)
        db.session.commit()
        return log_entry

    @classmethod
    def search(
        cls,
        user_id=None,
        action=None,
        resource_type=None,
        start_date=None,
        end_date=None,
        limit=100,
        offset=0,
    ):
        """Filtered, newest-first page of audit entries and the total count."""
        query = cls.query
        if user_id:
            query = query.filter(cls.user_id == user_id)
        if action:
            query = query.filter(cls.action == action)
        if resource_type:
            query = query.filter(cls.resource_type == resource_type)
        if start_date:
            query = query.filter(cls.created_at >= start_date)
        if end_date:
            query = query.filter(cls.created_at <= end_date)
        total = query.count()
        entries = (
            query.order_by(cls.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return entries, total
