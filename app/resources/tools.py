"""
tools.py
--------

Public catalog endpoints for tools: listing, detail, trending rankings and
sponsored placements. Only ``published`` tools are ever returned.

Resources:
    - ToolListResource: GET /api/tools
    - ToolDetailResource: GET /api/tools/<tool_id>
    - TrendingToolsResource: GET /api/tools/trending
    - TrendingCategoriesResource: GET /api/tools/trending/categories
    - TrendingInsightsResource: GET /api/tools/trending/insights
    - SponsoredToolsResource: GET /api/sponsored
    - ToolSubmissionResource: POST /api/tools/submit
"""

from datetime import datetime, timezone

from flask import current_app, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.catalog import (
    SPONSORED_POSITIONS,
    SponsoredSlot,
    Tool,
    ToolSubmission,
)
from app.resources.base import BaseCatalogResource
from app.schemas.analytics_schema import TrendingQuerySchema
from app.schemas.catalog_schema import ToolSchema, ToolSubmissionCreateSchema
from app.services.affiliate import (
    AffiliateConfig,
    generate_affiliate_url,
    get_disclosure_text,
    get_sponsored_tools,
    is_sponsored,
)
from app.services.rate_limit import public_event_limiter, rate_limited
from app.services.trending import (
    calculate_trending_score,
    get_time_based_trending,
    get_trending_badge,
    get_trending_categories,
    get_trending_insights,
)
from app.utils import load_current_user, parse_int_arg

tool_schema = ToolSchema()
tools_schema = ToolSchema(many=True)
trending_query_schema = TrendingQuerySchema()
tool_submission_create_schema = ToolSubmissionCreateSchema()

SORTABLE_COLUMNS = {
    "name": Tool.name,
    "rating": Tool.rating,
    "review_count": Tool.review_count,
    "weekly_users": Tool.weekly_users,
    "created_at": Tool.created_at,
    "updated_at": Tool.updated_at,
}


def _active_slots(now):
    return SponsoredSlot.query.filter(
        SponsoredSlot.start_date <= now, SponsoredSlot.end_date >= now
    ).all()


class ToolListResource(Resource, BaseCatalogResource):
    """GET /api/tools"""

    def get(self):
        """
        Paginated list of published tools.

        Query parameters: ``page``, ``limit`` (max 100), ``category``,
        ``search`` (name or description), ``sort_by`` (name, rating,
        review_count, weekly_users, created_at, updated_at) and
        ``sort_order`` (asc/desc).
        """
        page = parse_int_arg("page", 1, minimum=1)
        limit = parse_int_arg("limit", 20, minimum=1, maximum=100)
        category = request.args.get("category")
        search = (request.args.get("search") or "").strip()
        sort_by = request.args.get("sort_by", "weekly_users")
        sort_order = request.args.get("sort_order", "desc")

        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            return {"error": f"Invalid sort_by: {sort_by}"}, 400

        query = Tool.published()
        if category:
            query = query.filter(Tool.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Tool.name.ilike(pattern), Tool.description.ilike(pattern))
            )
        query = query.order_by(column.asc() if sort_order == "asc" else column.desc())

        tools, pagination = self._paginate(query, page, limit)
        return {"tools": tools_schema.dump(tools), "pagination": pagination}, 200


class ToolDetailResource(Resource):
    """GET /api/tools/<tool_id>"""

    def get(self, tool_id):
        tool = Tool.get_by_id(tool_id)
        if tool is None or tool.status != "published":
            return {"error": "Tool not found"}, 404

        config = AffiliateConfig.from_app_config(current_app.config)
        now = datetime.now(timezone.utc)
        sponsored = is_sponsored(tool.id, "top", _active_slots(now), now)
        affiliate_link = None
        if tool.affiliate_url:
            affiliate_link = generate_affiliate_url(
                tool.affiliate_url, tool.id, config
            )
        elif tool.website:
            affiliate_link = generate_affiliate_url(tool.website, tool.id, config)
        has_affiliate = bool(tool.affiliate_url) and config.enabled

        return {
            "tool": tool_schema.dump(tool),
            "affiliate_url": affiliate_link,
            "sponsored": sponsored,
            "disclosure": get_disclosure_text(sponsored, has_affiliate, config),
        }, 200


class TrendingToolsResource(Resource, BaseCatalogResource):
    """GET /api/tools/trending?limit=&period=day|week|month"""

    def get(self):
        try:
            args = trending_query_schema.load(request.args)
        except ValidationError as err:
            return self._validation_error(err)

        ranked = get_time_based_trending(Tool.published().all(), args["period"])
        results = []
        for index, tool in enumerate(ranked[: args["limit"]]):
            score = calculate_trending_score(tool)
            results.append(
                {
                    "tool": tool_schema.dump(tool),
                    "score": round(score["score"], 4),
                    "factors": score["factors"],
                    "badge": get_trending_badge(index),
                }
            )
        logger.debug(
            "Trending tools computed.", period=args["period"], count=len(results)
        )
        return {"period": args["period"], "tools": results}, 200


class TrendingCategoriesResource(Resource):
    """GET /api/tools/trending/categories"""

    def get(self):
        limit = parse_int_arg("limit", 8, minimum=1, maximum=50)
        categories = get_trending_categories(Tool.published().all(), limit=limit)
        for entry in categories:
            entry["total_score"] = round(entry["total_score"], 4)
        return {"categories": categories}, 200


class TrendingInsightsResource(Resource):
    """GET /api/tools/trending/insights"""

    def get(self):
        insights = get_trending_insights(Tool.published().all())
        return {
            key: tool_schema.dump(tool) if tool is not None else None
            for key, tool in insights.items()
        }, 200


class SponsoredToolsResource(Resource):
    """GET /api/sponsored?position=top|sidebar|category|search"""

    def get(self):
        position = request.args.get("position", "top")
        if position not in SPONSORED_POSITIONS:
            return {"error": f"Invalid position: {position}"}, 400

        now = datetime.now(timezone.utc)
        slots = _active_slots(now)
        tool_ids = {slot.tool_id for slot in slots}
        tools = (
            Tool.published().filter(Tool.id.in_(tool_ids)).all() if tool_ids else []
        )
        sponsored = get_sponsored_tools(position, slots, tools, now)
        return {
            "position": position,
            "tools": tools_schema.dump(sponsored),
            "disclosure": get_disclosure_text(bool(sponsored), False),
        }, 200


class ToolSubmissionResource(Resource, BaseCatalogResource):
    """POST /api/tools/submit"""

    @rate_limited(public_event_limiter)
    def post(self):
        """
        Queue a tool suggestion for admin review. Anonymous visitors may
        submit; a signed-in user is recorded as ``submitted_by``.
        """
        try:
            data = tool_submission_create_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        user = load_current_user()
        try:
            submission = ToolSubmission.create(
                name=data["name"].strip(),
                description=data["description"].strip(),
                website=data["website"],
                category=data["category"].strip(),
                submitter_email=data["submitter_email"].lower(),
                additional_info=data.get("additional_info"),
                submitted_by=user.id if user else None,
                status="pending",
            )
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to submit tool")

        logger.info("Tool submitted for review.", submission_id=submission.id)
        return {
            "success": True,
            "id": submission.id,
            "status": submission.status,
            "message": "Thank you! Your tool submission has been received. "
            "We'll review it and get back to you soon.",
        }, 201
