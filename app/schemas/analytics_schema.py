"""
analytics_schema.py
-------------------

Schemas for tracked events, affiliate clicks, search payloads and the audit
trail.
"""

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field

from app.models.analytics import AffiliateClick, AuditLog, SearchStatistic
from app.services.trending import TIME_PERIODS


class SearchStatisticSchema(SQLAlchemyAutoSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        model = SearchStatistic

    search_query = auto_field(data_key="query")


class AffiliateClickSchema(SQLAlchemyAutoSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        model = AffiliateClick


class AuditLogSchema(SQLAlchemyAutoSchema):
    """Schema for AuditLog model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = AuditLog


class TrackEventSchema(Schema):
    """
    Payload of ``POST /api/analytics/track``.

    ``timestamp`` is accepted as an ISO-8601 string or as milliseconds since
    the epoch, as browsers send either.
    """

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    event_type = fields.String(
        required=True, data_key="eventType", validate=validate.Length(min=1, max=50)
    )
    data = fields.Dict(required=True)
    timestamp = fields.Raw(required=True)
    session_id = fields.String(allow_none=True, data_key="sessionId")
    page = fields.String(allow_none=True)
    referrer = fields.String(allow_none=True)


class AffiliateClickCreateSchema(Schema):
    """Payload of ``POST /api/analytics/affiliate-click``."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    tool_id = fields.String(required=True, data_key="toolId")
    original_url = fields.String(required=True, data_key="originalUrl")
    affiliate_url = fields.String(required=True, data_key="affiliateUrl")
    user_agent = fields.String(allow_none=True, data_key="userAgent")
    referrer = fields.String(allow_none=True)


class AdvancedSearchFiltersSchema(Schema):
    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    category = fields.List(fields.String(), load_default=list)
    rating = fields.Float(allow_none=True)
    popularity = fields.Integer(allow_none=True)
    price = fields.String(allow_none=True)
    date_range = fields.String(
        allow_none=True,
        data_key="dateRange",
        validate=validate.OneOf(("all", "week", "month", "year")),
    )
    features = fields.List(fields.String(), load_default=list)


class AdvancedSearchSchema(Schema):
    """Payload of ``POST /api/search/advanced``."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    query = fields.String(
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "Search query is required"},
    )
    filters = fields.Nested(AdvancedSearchFiltersSchema, load_default=dict)
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=20, validate=validate.Range(min=1, max=100))


class TrendingQuerySchema(Schema):
    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    limit = fields.Integer(load_default=12, validate=validate.Range(min=1, max=100))
    period = fields.String(load_default="week", validate=validate.OneOf(TIME_PERIODS))
