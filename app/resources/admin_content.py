"""
admin_content.py
----------------

Admin back-office for editorial content and site automation: blog posts,
contact messages, cache revalidation, the automation dashboard and the
audit log viewer.
"""

from datetime import timezone

from flask import g, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.catalog import Tool
from app.models.content import BlogPost, ContactMessage, ContentCache, slugify
from app.models.db import db
from app.models.workflow import Workflow
from app.resources.analytics import parse_event_timestamp
from app.resources.base import BaseCatalogResource
from app.schemas.analytics_schema import AuditLogSchema
from app.schemas.content_schema import (
    BlogPostSchema,
    BlogPostWriteSchema,
    ContactMessageSchema,
    ContactStatusSchema,
    ContentCacheSchema,
)
from app.schemas.workflow_schema import WorkflowSchema
from app.services.audit import audit_logger
from app.services.rate_limit import admin_limiter, rate_limited
from app.services.revalidation import cache_status, refresh_content, revalidate_tools
from app.services.tool_validation import summarize_catalog
from app.utils import is_valid_uuid, keys_to_camel, parse_int_arg, require_admin

blog_post_schema = BlogPostSchema()
blog_post_write_schema = BlogPostWriteSchema()
contact_messages_schema = ContactMessageSchema(many=True)
contact_message_schema = ContactMessageSchema()
contact_status_schema = ContactStatusSchema()
content_cache_schema = ContentCacheSchema(many=True)
audit_logs_schema = AuditLogSchema(many=True)
workflows_schema = WorkflowSchema(many=True)

AUTOMATION_ACTIONS = ("refresh-data", "run-data-quality", "get-automation-settings")


def _editor():
    return g.user.email if getattr(g, "user", None) else None


def _dump_post(post):
    return keys_to_camel(blog_post_schema.dump(post))


def _mark_blog_stale():
    refresh_content("blog", updated_by=_editor())


class AdminBlogResource(Resource, BaseCatalogResource):
    """GET/POST/PUT/DELETE /api/admin/blog"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """Every post regardless of status, most recently updated first."""
        query = BlogPost.query
        status = request.args.get("status")
        if status and status != "all":
            query = query.filter(BlogPost.status == status)
        posts = query.order_by(BlogPost.updated_at.desc()).all()
        return {"posts": [_dump_post(post) for post in posts]}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        try:
            data = blog_post_write_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        data["slug"] = data.get("slug") or slugify(data["title"])
        if BlogPost.get_by_slug(data["slug"]) is not None:
            return {"error": "A post with this slug already exists"}, 409
        try:
            post = BlogPost.create(**data)
        except IntegrityError:
            db.session.rollback()
            return {"error": "A post with this slug already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create blog post")

        _mark_blog_stale()
        audit_logger.log_crud("CREATE", "BLOG_POST", post.id, {"slug": post.slug})
        return {"post": _dump_post(post)}, 201

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        payload = self._payload()
        post_id = payload.get("id")
        if not post_id:
            return {"error": "Post ID is required"}, 400
        post = BlogPost.get_by_id(post_id)
        if post is None:
            return {"error": "Post not found"}, 404
        try:
            updates = blog_post_write_schema.load(payload, partial=True)
        except ValidationError as err:
            return self._validation_error(err)

        try:
            post.update(**updates)
        except IntegrityError:
            db.session.rollback()
            return {"error": "A post with this slug already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update blog post")

        _mark_blog_stale()
        audit_logger.log_crud("UPDATE", "BLOG_POST", post.id, {"fields": sorted(updates)})
        return {"post": _dump_post(post)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self):
        post_id = request.args.get("id")
        if not post_id:
            return {"error": "Post ID is required"}, 400
        post = BlogPost.get_by_id(post_id)
        if post is None:
            return {"error": "Post not found"}, 404
        try:
            post.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete blog post")

        _mark_blog_stale()
        audit_logger.log_crud("DELETE", "BLOG_POST", post_id)
        return {"success": True}, 200


class AdminContactResource(Resource, BaseCatalogResource):
    """GET/PUT/DELETE /api/admin/contact"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        query = ContactMessage.query
        status = request.args.get("status")
        if status and status != "all":
            query = query.filter(ContactMessage.status == status)
        messages = query.order_by(ContactMessage.created_at.desc()).all()
        return {"messages": contact_messages_schema.dump(messages)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self):
        payload = self._payload()
        if not payload.get("id") or not payload.get("status"):
            return {"error": "ID and status are required"}, 400
        try:
            data = contact_status_schema.load(payload)
        except ValidationError:
            return {"error": "Invalid status"}, 400
        if not is_valid_uuid(data["id"]):
            return {"error": "Invalid message ID"}, 400

        message = ContactMessage.get_by_id(data["id"])
        if message is None:
            return {"error": "Message not found"}, 404
        try:
            message.update(status=data["status"])
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update message")

        audit_logger.log_crud(
            "UPDATE", "CONTACT_MESSAGE", message.id, {"status": data["status"]}
        )
        return {"success": True, "message": contact_message_schema.dump(message)}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self):
        message_id = request.args.get("id")
        if not message_id:
            return {"error": "Message ID is required"}, 400
        if not is_valid_uuid(message_id):
            return {"error": "Invalid message ID"}, 400
        message = ContactMessage.get_by_id(message_id)
        if message is None:
            return {"error": "Message not found"}, 404
        try:
            message.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete message")

        audit_logger.log_crud("DELETE", "CONTACT_MESSAGE", message_id)
        return {"success": True}, 200


class RevalidateToolsResource(Resource, BaseCatalogResource):
    """POST /api/revalidate/tools"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        paths = self._payload().get("paths")
        if paths is not None and not (
            isinstance(paths, list) and all(isinstance(p, str) for p in paths)
        ):
            return {"error": "paths must be a list of strings"}, 400
        try:
            result = revalidate_tools(paths, updated_by=_editor())
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to revalidate")
        return {"message": "Revalidation successful", **result}, 200

    def get(self):
        return {"error": "Use POST with admin auth to revalidate"}, 405


class RefreshContentResource(Resource, BaseCatalogResource):
    """POST/GET /api/admin/refresh-content"""

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        payload = self._payload()
        content_type = payload.get("type")
        if not content_type:
            return {"error": "Content type is required"}, 400
        try:
            result = refresh_content(
                content_type,
                content_id=payload.get("contentId"),
                updated_by=_editor(),
            )
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to refresh content")

        audit_logger.log_action(
            "REFRESH", "CONTENT", resource_id=payload.get("contentId"),
            details={"type": content_type},
        )
        return {"success": True, "type": content_type, **result}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        return {"cache_status": content_cache_schema.dump(cache_status())}, 200


class AutomationResource(Resource, BaseCatalogResource):
    """GET/POST /api/admin/automation"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """
        Catalog overview for the automation dashboard: tool counts by source,
        category and status, plus the last refresh of each content type.
        """
        sources = dict(
            db.session.query(Tool.source, func.count(Tool.id)).group_by(Tool.source).all()
        )
        categories = dict(
            db.session.query(Tool.category, func.count(Tool.id))
            .group_by(Tool.category)
            .all()
        )
        statuses = dict(
            db.session.query(Tool.status, func.count(Tool.id)).group_by(Tool.status).all()
        )
        stamps = {
            entry.content_type: entry.last_updated.replace(tzinfo=timezone.utc).isoformat()
            for entry in ContentCache.query.all()
        }
        return {
            "status": "ready",
            "toolsFound": sum(statuses.values()),
            "published": statuses.get("published", 0),
            "draft": statuses.get("draft", 0),
            "sources": sources,
            "categories": categories,
            "lastRefreshed": stamps,
        }, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        action = self._payload().get("action")
        if action not in AUTOMATION_ACTIONS:
            return {"error": "Invalid action"}, 400

        try:
            if action == "refresh-data":
                tools = revalidate_tools(updated_by=_editor())
                categories = refresh_content("categories", updated_by=_editor())
                result = {"tools": tools, "categories": categories}
            elif action == "run-data-quality":
                result = summarize_catalog(Tool.query.all())
            else:
                workflows = Workflow.query.order_by(Workflow.name).all()
                result = {"workflows": workflows_schema.dump(workflows)}
        except SQLAlchemyError as e:
            return self._database_error(e, "Automation action failed")

        logger.info("Automation action run.", action=action, admin=_editor())
        return {"success": True, "action": action, "result": result}, 200


class AuditLogsResource(Resource):
    """GET /api/admin/audit-logs"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        filters = {
            "user_id": request.args.get("user_id"),
            "action": request.args.get("action"),
            "resource_type": request.args.get("resource_type"),
        }
        for name in ("start_date", "end_date"):
            value = request.args.get(name)
            if not value:
                continue
            try:
                parsed = parse_event_timestamp(value)
            except ValueError:
                return {"error": f"Invalid {name}"}, 400
            filters[name] = parsed.replace(tzinfo=None)

        limit = parse_int_arg("limit", 100, minimum=1, maximum=1000)
        offset = parse_int_arg("offset", 0, minimum=0)
        logs, total = audit_logger.query(limit=limit, offset=offset, **filters)
        return {
            "logs": audit_logs_schema.dump(logs),
            "total": total,
            "limit": limit,
            "offset": offset,
            "enabled": audit_logger.enabled,
        }, 200
