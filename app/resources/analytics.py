"""
analytics.py
------------

Event tracking and affiliate click recording, plus the admin analytics
overview.

Resources:
    - TrackEventResource: POST /api/analytics/track
    - AffiliateClickResource: POST/GET /api/analytics/affiliate-click
    - AdminAnalyticsResource: GET /api/admin/analytics
"""

from datetime import datetime, timedelta, timezone

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.analytics import (
    INTERACTION_COLUMNS,
    AffiliateClick,
    AnalyticsEvent,
    SearchStatistic,
    ToolInteractionStat,
)
from app.models.catalog import Tool
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.analytics_schema import (
    AffiliateClickCreateSchema,
    AffiliateClickSchema,
    SearchStatisticSchema,
    TrackEventSchema,
)
from app.services.affiliate import calculate_affiliate_revenue, get_affiliate_metrics
from app.services.rate_limit import (
    admin_limiter,
    client_ip,
    public_event_limiter,
    rate_limited,
)
from app.utils import load_current_user, parse_int_arg, require_admin

track_event_schema = TrackEventSchema()
affiliate_click_create_schema = AffiliateClickCreateSchema()
affiliate_clicks_schema = AffiliateClickSchema(many=True)
search_statistics_schema = SearchStatisticSchema(many=True)


def parse_event_timestamp(value):
    """
    Parse an ISO-8601 string or epoch milliseconds into an aware UTC
    datetime.

    Raises:
        ValueError: if ``value`` is neither.
    """
    if isinstance(value, bool):
        raise ValueError("Invalid timestamp")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    raise ValueError("Invalid timestamp")


def _text(value):
    """``value`` when it is a non-empty string, else None."""
    return value if isinstance(value, str) and value else None


def _filter_names(filters):
    """Names of the applied search filters, from a dict or a list of names."""
    if isinstance(filters, dict):
        return [str(name) for name in filters]
    if isinstance(filters, list):
        return [name for name in filters if isinstance(name, str)]
    return []


class TrackEventResource(Resource, BaseCatalogResource):
    """POST /api/analytics/track"""

    @rate_limited(public_event_limiter)
    def post(self):
        """
        Store a front-end event.

        ``search`` events with ``data.query`` update the per-query search
        statistics; ``tool_interaction`` events with ``data.toolId`` bump
        the tool's interaction counter named by ``data.action``.
        """
        try:
            payload = track_event_schema.load(self._payload())
        except ValidationError as err:
            return {"error": "Missing required fields", "details": err.messages}, 400
        try:
            timestamp = parse_event_timestamp(payload["timestamp"])
        except (ValueError, OverflowError, OSError):
            return {"error": "Invalid timestamp"}, 400

        data = payload["data"]
        user = load_current_user()
        try:
            AnalyticsEvent.record(
                event_type=payload["event_type"],
                event_data=data,
                user_id=user.id if user else None,
                session_id=payload.get("session_id") or _text(data.get("sessionId")),
                timestamp=timestamp,
                user_agent=_text(data.get("userAgent"))
                or request.headers.get("User-Agent"),
                ip_address=client_ip(),
                referrer=payload.get("referrer")
                or _text(data.get("referrer"))
                or request.headers.get("Referer"),
                page=payload.get("page") or _text(data.get("page")) or "unknown",
            )
            db.session.commit()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to track analytics event")

        if payload["event_type"] == "search" and data.get("query"):
            self._update_rollup(
                "search statistics",
                SearchStatistic.record,
                str(data["query"]),
                results_count=data.get("results"),
                filters=_filter_names(data.get("filters")),
            )
        if payload["event_type"] == "tool_interaction" and data.get("toolId"):
            self._update_rollup(
                "tool interaction stats",
                ToolInteractionStat.record,
                str(data["toolId"]),
                data.get("action"),
                tool_name=_text(data.get("toolName")),
            )

        return {"success": True}, 200

    @staticmethod
    def _update_rollup(name, record, *args, **kwargs):
        """
        Apply one statistics update in its own transaction. A failure is
        logged and rolled back; the stored event is kept either way.
        """
        try:
            record(*args, **kwargs)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning(
                "Failed to update analytics rollup.", rollup=name, error=str(e)
            )


class AffiliateClickResource(Resource, BaseCatalogResource):
    """POST/GET /api/analytics/affiliate-click"""

    @rate_limited(public_event_limiter)
    def post(self):
        try:
            data = affiliate_click_create_schema.load(self._payload())
        except ValidationError as err:
            return {"error": "Missing required fields", "details": err.messages}, 400

        try:
            click = AffiliateClick(
                tool_id=data["tool_id"],
                original_url=data["original_url"],
                affiliate_url=data["affiliate_url"],
                user_agent=data.get("user_agent")
                or request.headers.get("User-Agent"),
                referrer=data.get("referrer") or request.headers.get("Referer"),
                ip_address=client_ip(),
            )
            db.session.add(click)
            tool = Tool.get_by_id(data["tool_id"])
            if tool is not None:
                tool.affiliate_clicks = (tool.affiliate_clicks or 0) + 1
            db.session.commit()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to track affiliate click")

        logger.info("Affiliate click tracked.", tool_id=data["tool_id"])
        return {"success": True, "id": click.id}, 201

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        limit = parse_int_arg("limit", 100, minimum=1, maximum=1000)
        query = AffiliateClick.query
        tool_id = request.args.get("toolId")
        if tool_id:
            query = query.filter(AffiliateClick.tool_id == tool_id)
        clicks = query.order_by(AffiliateClick.timestamp.desc()).limit(limit).all()
        return {"clicks": affiliate_clicks_schema.dump(clicks)}, 200


class AdminAnalyticsResource(Resource):
    """GET /api/admin/analytics"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """
        Overview over the last ``days`` (default 30): event counts by type,
        top searches, most-interacted tools and affiliate metrics.
        """
        days = parse_int_arg("days", 30, minimum=1, maximum=365)
        since = datetime.now(timezone.utc) - timedelta(days=days)

        event_counts = dict(
            db.session.query(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id))
            .filter(AnalyticsEvent.timestamp >= since)
            .group_by(AnalyticsEvent.event_type)
            .all()
        )
        top_searches = (
            SearchStatistic.query.order_by(SearchStatistic.search_count.desc())
            .limit(10)
            .all()
        )
        interactions = ToolInteractionStat.query.all()
        interactions.sort(key=lambda stat: stat.total_interactions, reverse=True)

        click_rows = (
            db.session.query(AffiliateClick.tool_id, func.count(AffiliateClick.id))
            .filter(AffiliateClick.timestamp >= since)
            .group_by(AffiliateClick.tool_id)
            .all()
        )
        links = [
            {
                "tool_id": tool_id,
                "clicks": clicks,
                "revenue": calculate_affiliate_revenue(clicks),
            }
            for tool_id, clicks in click_rows
        ]

        return {
            "period_days": days,
            "events": {
                "total": sum(event_counts.values()),
                "by_type": event_counts,
            },
            "top_searches": search_statistics_schema.dump(top_searches),
            "top_tools": [
                dict(
                    {"tool_id": stat.tool_id, "tool_name": stat.tool_name},
                    **{
                        column: getattr(stat, column) or 0
                        for column in INTERACTION_COLUMNS.values()
                    },
                    total_interactions=stat.total_interactions,
                )
                for stat in interactions[:10]
            ],
            "affiliate": get_affiliate_metrics(links),
        }, 200
