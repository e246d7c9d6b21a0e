"""
reviews.py
----------

Public review endpoints: submission, listing, helpful votes and abuse
reports. Tool aggregates are refreshed by the review model on every write.
"""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.catalog import Review, ReviewReport, ReviewVote, Tool
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.catalog_schema import (
    MIN_REVIEW_CONTENT,
    ReviewCreateSchema,
    ReviewReportCreateSchema,
    ReviewReportSchema,
    ReviewSchema,
    ReviewVoteSchema,
)
from app.services.rate_limit import public_event_limiter, rate_limited
from app.utils import load_current_user, parse_int_arg

review_schema = ReviewSchema()
reviews_schema = ReviewSchema(many=True)
review_create_schema = ReviewCreateSchema()
review_vote_schema = ReviewVoteSchema()
review_report_create_schema = ReviewReportCreateSchema()
review_report_schema = ReviewReportSchema()

SORTABLE_COLUMNS = {
    "created_at": Review.created_at,
    "rating": Review.rating,
    "helpful_count": Review.helpful_count,
}
REQUIRED_FIELDS = ("tool_id", "user_name", "rating", "title", "content")


def _first_error(messages):
    """Map schema errors onto the short messages clients display."""
    if any(
        "Missing data for required field." in messages.get(field, [])
        for field in REQUIRED_FIELDS
    ):
        return "Missing required fields"
    if "rating" in messages:
        return "Rating must be between 1 and 5"
    if "content" in messages:
        return (
            f"Review content must be between {MIN_REVIEW_CONTENT} "
            "and 2000 characters"
        )
    return "Validation error"


class ReviewListResource(Resource, BaseCatalogResource):
    """POST/GET /api/reviews"""

    @rate_limited(public_event_limiter)
    def post(self):
        """
        Submit a review.

        Returns:
            201: ``{"message": ..., "review": {...}}``
            400: Missing fields, rating outside 1..5, content too short
            404: Unknown tool
            409: This reviewer already reviewed the tool
        """
        payload = self._payload()
        for key in ("user_name", "title", "content"):
            if isinstance(payload.get(key), str):
                payload[key] = payload[key].strip()
        for key in ("use_case", "user_email"):
            if isinstance(payload.get(key), str):
                payload[key] = payload[key].strip() or None
        try:
            data = review_create_schema.load(payload)
        except ValidationError as err:
            logger.warning("Invalid review submission.", errors=err.messages)
            return {"error": _first_error(err.messages), "details": err.messages}, 400

        tool = Tool.get_by_id(data["tool_id"])
        if tool is None:
            return {"error": "Tool not found"}, 404
        if Review.exists_for(tool.id, data["user_name"]):
            return {"error": "You have already reviewed this tool"}, 409

        data["pros"] = [p.strip() for p in data["pros"] if p and p.strip()]
        data["cons"] = [c.strip() for c in data["cons"] if c and c.strip()]
        user = load_current_user()
        try:
            review = Review.create(
                **data,
                user_id=user.id if user else None,
                verified_user=False,
                status="active",
            )
        except IntegrityError:
            db.session.rollback()
            return {"error": "You have already reviewed this tool"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to submit review")

        logger.info("Review submitted.", review_id=review.id, tool_id=tool.id)
        return {
            "message": "Review submitted successfully",
            "review": review_schema.dump(review),
        }, 201

    def get(self):
        """Active reviews of ``tool_id`` with ``limit``/``offset`` paging."""
        tool_id = request.args.get("tool_id")
        if not tool_id:
            return {"error": "Tool ID is required"}, 400

        limit = parse_int_arg("limit", 10, minimum=1, maximum=100)
        offset = parse_int_arg("offset", 0, minimum=0)
        column = SORTABLE_COLUMNS.get(
            request.args.get("sort_by", "created_at"), Review.created_at
        )
        ascending = request.args.get("sort_order", "desc") == "asc"

        query = Review.query.filter_by(tool_id=tool_id, status="active")
        total = query.count()
        reviews = (
            query.order_by(column.asc() if ascending else column.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return {
            "reviews": reviews_schema.dump(reviews),
            "total": total,
            "limit": limit,
            "offset": offset,
        }, 200


class ReviewVoteResource(Resource, BaseCatalogResource):
    """POST /api/reviews/<review_id>/vote"""

    @rate_limited(public_event_limiter)
    def post(self, review_id):
        try:
            data = review_vote_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        review = Review.get_by_id(review_id)
        if review is None or review.status != "active":
            return {"error": "Review not found"}, 404

        try:
            ReviewVote.cast(review, data["voter"], data["vote_type"])
        except IntegrityError:
            db.session.rollback()
            return {"error": "You have already voted on this review"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to record vote")

        return {
            "message": "Vote recorded",
            "helpful_count": review.helpful_count,
        }, 200


class ReviewReportResource(Resource, BaseCatalogResource):
    """POST /api/reviews/<review_id>/report"""

    @rate_limited(public_event_limiter)
    def post(self, review_id):
        try:
            data = review_report_create_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        if Review.get_by_id(review_id) is None:
            return {"error": "Review not found"}, 404

        try:
            report = ReviewReport.create(review_id=review_id, **data)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to report review")

        logger.info("Review reported.", review_id=review_id, report_id=report.id)
        return {
            "message": "Report submitted",
            "report": review_report_schema.dump(report),
        }, 201
