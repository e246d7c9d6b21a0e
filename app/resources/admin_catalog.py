"""
admin_catalog.py
----------------

Admin back-office for the catalog: tools, submitted tools, categories,
review moderation and sponsored slots. Every method requires the admin role and is counted
against the admin rate limiter; mutations are written to the audit trail
and stamp the matching content cache entry.
"""

from flask import current_app, g, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.catalog import (
    Category,
    Review,
    ReviewReport,
    SponsoredSlot,
    Tool,
    ToolSubmission,
)
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.catalog_schema import (
    CategorySchema,
    CategoryWriteSchema,
    ReportResolutionSchema,
    ReviewModerationSchema,
    ReviewReportSchema,
    ReviewSchema,
    SponsoredSlotCreateSchema,
    SponsoredSlotSchema,
    SubmissionReviewSchema,
    ToolSchema,
    ToolSubmissionSchema,
    ToolWriteSchema,
)
from app.services.affiliate import validate_affiliate_url
from app.services.audit import audit_logger
from app.services.enrichment import EnrichmentError, enrich_from_url
from app.services.rate_limit import admin_limiter, rate_limited
from app.services.revalidation import mark_stale
from app.services.tool_validation import is_mock_data, validate_tool_data
from app.utils import keys_to_snake, require_admin

tool_schema = ToolSchema()
tools_schema = ToolSchema(many=True)
tool_write_schema = ToolWriteSchema()
category_schema = CategorySchema()
category_write_schema = CategoryWriteSchema()
review_schema = ReviewSchema()
review_moderation_schema = ReviewModerationSchema()
review_reports_schema = ReviewReportSchema(many=True)
review_report_schema = ReviewReportSchema()
report_resolution_schema = ReportResolutionSchema()
sponsored_slot_schema = SponsoredSlotSchema()
sponsored_slots_schema = SponsoredSlotSchema(many=True)
sponsored_slot_create_schema = SponsoredSlotCreateSchema()
tool_submissions_schema = ToolSubmissionSchema(many=True)
tool_submission_schema = ToolSubmissionSchema()
submission_review_schema = SubmissionReviewSchema()

PUBLISH_REQUIRED_FIELDS = ("name", "website", "category", "description")


def _editor():
    return g.user.email if getattr(g, "user", None) else None


class AdminToolsResource(Resource, BaseCatalogResource):
    """GET/POST/PUT/DELETE /api/admin/tools"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """Every tool regardless of status, most recently updated first."""
        query = Tool.query
        status = request.args.get("status")
        if status:
            query = query.filter(Tool.status == status)
        tools = query.order_by(Tool.updated_at.desc()).all()
        return {"tools": tools_schema.dump(tools)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        try:
            data = tool_write_schema.load(keys_to_snake(self._payload()))
        except ValidationError as err:
            return self._validation_error(err)

        try:
            tool = Tool.create(**data)
        except IntegrityError:
            db.session.rollback()
            return {"error": "A tool with this name already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create tool")

        audit_logger.log_crud("CREATE", "TOOL", tool.id, {"name": tool.name})
        mark_stale("tools", updated_by=_editor())
        logger.info("Tool created.", tool_id=tool.id)
        return {"success": True, "tool": tool_schema.dump(tool)}, 201

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        payload = keys_to_snake(self._payload())
        tool_id = payload.pop("id", None)
        if not tool_id:
            return {"error": "Missing id"}, 400
        tool = Tool.get_by_id(tool_id)
        if tool is None:
            return {"error": "Tool not found"}, 404
        try:
            updates = tool_write_schema.load(payload, partial=True)
        except ValidationError as err:
            return self._validation_error(err)

        try:
            tool.update(**updates)
        except IntegrityError:
            db.session.rollback()
            return {"error": "A tool with this name already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update tool")

        audit_logger.log_crud("UPDATE", "TOOL", tool.id, {"fields": sorted(updates)})
        mark_stale("tools", updated_by=_editor())
        return {"success": True, "tool": tool_schema.dump(tool)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self):
        tool_id = request.args.get("id")
        if not tool_id:
            return {"error": "Missing id"}, 400
        tool = Tool.get_by_id(tool_id)
        if tool is None:
            return {"error": "Tool not found"}, 404
        name = tool.name
        try:
            tool.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete tool")

        audit_logger.log_crud("DELETE", "TOOL", tool_id, {"name": name})
        mark_stale("tools", updated_by=_editor())
        return {"success": True}, 200


class AdminToolPublishResource(Resource, BaseCatalogResource):
    """POST /api/admin/tools/publish"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        tool_id = self._payload().get("id")
        if not tool_id:
            return {"error": "Missing id"}, 400
        tool = Tool.get_by_id(tool_id)
        if tool is None:
            return {"error": "Tool not found"}, 404

        missing = [
            field
            for field in PUBLISH_REQUIRED_FIELDS
            if not str(getattr(tool, field) or "").strip()
        ]
        if missing:
            return {"error": f"Missing required fields: {', '.join(missing)}"}, 400
        if not validate_affiliate_url(tool.website):
            return {"error": "website must be a valid URL"}, 400

        try:
            tool.update(status="published")
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to publish tool")

        audit_logger.log_crud("UPDATE", "TOOL", tool.id, {"status": "published"})
        mark_stale("tools", updated_by=_editor())
        return {"success": True}, 200


class AdminToolEnrichResource(Resource, BaseCatalogResource):
    """POST /api/admin/tools/enrich"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        url = (self._payload().get("url") or "").strip()
        if not url:
            return {"error": "Missing url"}, 400
        if not validate_affiliate_url(url) or not url.startswith(("http://", "https://")):
            return {"error": "Invalid url"}, 400
        try:
            suggestion = enrich_from_url(
                url, timeout=current_app.config.get("OUTBOUND_HTTP_TIMEOUT", 10)
            )
        except EnrichmentError as e:
            return {"error": str(e) or "Failed to enrich"}, 500
        return {"suggestion": suggestion}, 200


class AdminToolValidateResource(Resource, BaseCatalogResource):
    """POST /api/admin/tools/validate"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        """
        Plausibility report for a tool.

        Body is either ``{"id": ...}`` to check a stored tool or the tool
        fields themselves (camelCase or snake_case).
        """
        payload = keys_to_snake(self._payload())
        if payload.get("id") and len(payload) == 1:
            tool = Tool.get_by_id(payload["id"])
            if tool is None:
                return {"error": "Tool not found"}, 404
            subject = tool
        elif payload:
            subject = payload
        else:
            return {"error": "Missing tool data"}, 400

        report = validate_tool_data(subject)
        report["is_mock_data"] = is_mock_data(subject)
        return report, 200


class AdminToolSubmissionsResource(Resource, BaseCatalogResource):
    """GET/PUT /api/admin/tools/submissions"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """Submissions newest first, optionally filtered by ``status``."""
        query = ToolSubmission.query
        status = request.args.get("status")
        if status:
            query = query.filter(ToolSubmission.status == status)
        submissions = query.order_by(ToolSubmission.submitted_at.desc()).all()
        return {"submissions": tool_submissions_schema.dump(submissions)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        """
        Approve or reject a pending submission.

        Approval creates a draft tool from the submitted fields; publishing
        it goes through ``POST /api/admin/tools/publish`` as usual.
        """
        try:
            data = submission_review_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)
        submission = ToolSubmission.get_by_id(data["id"])
        if submission is None:
            return {"error": "Submission not found"}, 404
        if submission.status != "pending":
            return {"error": "Submission has already been reviewed"}, 409

        tool = None
        try:
            if data["status"] == "approved":
                tool = Tool(**submission.to_tool_fields())
                db.session.add(tool)
                db.session.flush()
            submission.mark_reviewed(
                data["status"],
                admin_notes=data.get("admin_notes"),
                tool_id=tool.id if tool else None,
            )
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return {"error": "A tool with this name already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to review submission")

        audit_logger.log_crud(
            "UPDATE", "TOOL_SUBMISSION", submission.id, {"status": data["status"]}
        )
        if tool is not None:
            audit_logger.log_crud(
                "CREATE", "TOOL", tool.id,
                {"name": tool.name, "submission_id": submission.id},
            )
            mark_stale("tools", updated_by=_editor())
        logger.info(
            "Tool submission reviewed.",
            submission_id=submission.id,
            status=submission.status,
        )
        return {
            "success": True,
            "submission": tool_submission_schema.dump(submission),
            "tool": tool_schema.dump(tool) if tool else None,
        }, 200


class AdminCategoriesResource(Resource, BaseCatalogResource):
    """POST/PUT/DELETE /api/admin/categories"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        try:
            data = category_write_schema.load(keys_to_snake(self._payload()))
        except ValidationError as err:
            return self._validation_error(err)
        if Category.get_by_name(data["name"]) is not None:
            return {"error": "Category already exists"}, 409
        try:
            category = Category.create(**data)
        except IntegrityError:
            db.session.rollback()
            return {"error": "Category already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create category")

        audit_logger.log_crud("CREATE", "CATEGORY", category.id, {"name": category.name})
        mark_stale("categories", updated_by=_editor())
        return {"success": True, "category": category_schema.dump(category)}, 201

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        payload = keys_to_snake(self._payload())
        category_id = payload.pop("id", None)
        if not category_id:
            return {"error": "Missing id"}, 400
        category = Category.get_by_id(category_id)
        if category is None:
            return {"error": "Category not found"}, 404
        try:
            updates = category_write_schema.load(payload, partial=True)
        except ValidationError as err:
            return self._validation_error(err)
        try:
            category.update(**updates)
        except IntegrityError:
            db.session.rollback()
            return {"error": "Category already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update category")

        audit_logger.log_crud("UPDATE", "CATEGORY", category.id, {"fields": sorted(updates)})
        mark_stale("categories", updated_by=_editor())
        return {"success": True, "category": category_schema.dump(category)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self):
        if not request.args.get("id"):
            return {"error": "Missing id"}, 400
        category = Category.get_by_id(request.args["id"])
        if category is None:
            return {"error": "Category not found"}, 404
        category_id = category.id
        try:
            category.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete category")

        audit_logger.log_crud("DELETE", "CATEGORY", category_id)
        mark_stale("categories", updated_by=_editor())
        return {"success": True}, 200


class AdminReviewsResource(Resource, BaseCatalogResource):
    """PUT /api/admin/reviews: change a review's moderation status."""

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        try:
            data = review_moderation_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)
        review = Review.get_by_id(data["id"])
        if review is None:
            return {"error": "Review not found"}, 404
        try:
            review.update(status=data["status"])
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update review")

        audit_logger.log_crud("UPDATE", "REVIEW", review.id, {"status": data["status"]})
        mark_stale("reviews", updated_by=_editor())
        return {"success": True, "review": review_schema.dump(review)}, 200


class AdminReviewReportsResource(Resource, BaseCatalogResource):
    """GET/PUT /api/admin/reviews/reports"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        query = ReviewReport.query
        status = request.args.get("status")
        if status:
            query = query.filter(ReviewReport.status == status)
        reports = query.order_by(ReviewReport.created_at.desc()).all()
        return {"reports": review_reports_schema.dump(reports)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        try:
            data = report_resolution_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)
        report = ReviewReport.get_by_id(data["id"])
        if report is None:
            return {"error": "Report not found"}, 404
        try:
            report.resolve(data["status"], data.get("admin_notes"))
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update report")

        audit_logger.log_crud("UPDATE", "REVIEW_REPORT", report.id, {"status": data["status"]})
        return {"success": True, "report": review_report_schema.dump(report)}, 200


class AdminSponsoredResource(Resource, BaseCatalogResource):
    """GET/POST/DELETE /api/admin/sponsored"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        slots = SponsoredSlot.query.order_by(
            SponsoredSlot.start_date.desc(), SponsoredSlot.priority.desc()
        ).all()
        return {"slots": sponsored_slots_schema.dump(slots)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        try:
            data = sponsored_slot_create_schema.load(keys_to_snake(self._payload()))
        except ValidationError as err:
            return self._validation_error(err)
        if Tool.get_by_id(data["tool_id"]) is None:
            return {"error": "Tool not found"}, 404
        try:
            slot = SponsoredSlot.create(**data)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create sponsored slot")

        audit_logger.log_crud(
            "CREATE", "SPONSORED_SLOT", slot.id,
            {"tool_id": slot.tool_id, "position": slot.position},
        )
        return {"success": True, "slot": sponsored_slot_schema.dump(slot)}, 201

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self):
        if not request.args.get("id"):
            return {"error": "Missing id"}, 400
        slot = SponsoredSlot.get_by_id(request.args["id"])
        if slot is None:
            return {"error": "Sponsored slot not found"}, 404
        slot_id = slot.id
        try:
            slot.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete sponsored slot")

        audit_logger.log_crud("DELETE", "SPONSORED_SLOT", slot_id)
        return {"success": True}, 200
