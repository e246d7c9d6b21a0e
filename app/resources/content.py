"""
content.py
----------

Public editorial endpoints: blog, contact form, newsletter signup and the
AI news feed.
"""

from flask import current_app, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.content import BlogPost, ContactMessage, Signup
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.content_schema import (
    BlogPostSchema,
    ContactCreateSchema,
    SignupCreateSchema,
)
from app.services.news import NewsServiceError, fetch_news
from app.services.rate_limit import public_event_limiter, rate_limited
from app.utils import parse_int_arg

blog_post_schema = BlogPostSchema()
blog_posts_schema = BlogPostSchema(many=True)
contact_create_schema = ContactCreateSchema()
signup_create_schema = SignupCreateSchema()


def _first_message(messages):
    for errors in messages.values():
        if isinstance(errors, list) and errors:
            return errors[0]
    return "Validation error"


class BlogListResource(Resource, BaseCatalogResource):
    """GET /api/blog"""

    def get(self):
        """
        Published posts, newest first.

        Query parameters: ``category``, ``q`` (title or excerpt),
        ``featured`` (true/false), ``page``, ``limit``.
        """
        page = parse_int_arg("page", 1, minimum=1)
        limit = parse_int_arg("limit", 10, minimum=1, maximum=50)
        query = BlogPost.published()

        category = request.args.get("category")
        if category and category != "all":
            query = query.filter(BlogPost.category == category)
        q = (request.args.get("q") or "").strip()
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                or_(BlogPost.title.ilike(pattern), BlogPost.excerpt.ilike(pattern))
            )
        featured = request.args.get("featured")
        if featured is not None:
            query = query.filter(BlogPost.featured == (featured.lower() == "true"))

        posts, pagination = self._paginate(
            query.order_by(BlogPost.published_at.desc()), page, limit
        )
        return {"posts": blog_posts_schema.dump(posts), "pagination": pagination}, 200


class BlogCategoriesResource(Resource):
    """GET /api/blog/categories"""

    def get(self):
        rows = (
            db.session.query(BlogPost.category, func.count(BlogPost.id))
            .filter(BlogPost.status == "published", BlogPost.category.isnot(None))
            .group_by(BlogPost.category)
            .order_by(BlogPost.category)
            .all()
        )
        return {
            "categories": [{"name": name, "count": count} for name, count in rows]
        }, 200


class BlogPostResource(Resource):
    """GET /api/blog/<slug>"""

    def get(self, slug):
        post = BlogPost.get_by_slug(slug)
        if post is None or post.status != "published":
            return {"error": "Post not found"}, 404
        return {"post": blog_post_schema.dump(post)}, 200


class ContactResource(Resource, BaseCatalogResource):
    """POST /api/contact"""

    @rate_limited(public_event_limiter)
    def post(self):
        payload = self._payload()
        try:
            data = contact_create_schema.load(payload)
        except ValidationError as err:
            if "email" in err.messages and all(
                payload.get(key) for key in ("name", "email", "subject", "message")
            ):
                return {"error": "Please provide a valid email address"}, 400
            return {"error": "All fields are required", "details": err.messages}, 400

        data["email"] = data["email"].lower()
        try:
            message = ContactMessage.create(**data)
        except SQLAlchemyError as e:
            return self._database_error(
                e, "Failed to send message. Please try again."
            )

        logger.info("Contact message received.", message_id=message.id)
        return {
            "success": True,
            "message": "Message sent successfully! We'll get back to you soon.",
            "id": message.id,
        }, 201


class SignupResource(Resource, BaseCatalogResource):
    """POST /api/signup"""

    @rate_limited(public_event_limiter)
    def post(self):
        try:
            data = signup_create_schema.load(self._payload())
        except ValidationError as err:
            return {"error": _first_message(err.messages)}, 400

        email = data["email"].lower()
        if Signup.query.filter_by(email=email).first() is not None:
            return {"error": "Email already registered"}, 409
        try:
            Signup.create(email)
        except IntegrityError:
            db.session.rollback()
            return {"error": "Email already registered"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to register signup")

        logger.info("Newsletter signup.", email=email)
        return {"success": True, "message": "Thanks for signing up!"}, 201


class NewsResource(Resource):
    """GET /api/news"""

    def get(self):
        config = current_app.config
        try:
            news = fetch_news(
                config.get("NEWS_API_KEY"),
                config.get("NEWS_API_URL"),
                timeout=config.get("OUTBOUND_HTTP_TIMEOUT", 10),
            )
        except NewsServiceError:
            return {"error": "Failed to fetch news"}, 500
        return {"news": news}, 200
