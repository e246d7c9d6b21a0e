"""
content_schema.py
-----------------

Schemas for blog posts, contact messages, newsletter signups and content
cache stamps.
"""

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from app.models.content import (
    BLOG_STATUSES,
    CONTACT_STATUSES,
    BlogPost,
    ContactMessage,
    ContentCache,
    Signup,
)


class BlogPostSchema(SQLAlchemyAutoSchema):
    """Schema for BlogPost model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = BlogPost


class ContactMessageSchema(SQLAlchemyAutoSchema):
    """Schema for ContactMessage model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = ContactMessage


class SignupSchema(SQLAlchemyAutoSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        model = Signup


class ContentCacheSchema(SQLAlchemyAutoSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        model = ContentCache


class BlogPostWriteSchema(Schema):
    """
    Admin blog payload. Keys are camelCase on the wire and snake_case once
    loaded.
    """

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=1, max=300))
    slug = fields.String(validate=validate.Regexp(r"^[a-z0-9]+(?:-[a-z0-9]+)*$"))
    excerpt = fields.String(allow_none=True)
    content = fields.String(load_default="")
    author = fields.String(allow_none=True)
    category = fields.String(allow_none=True)
    read_time = fields.String(allow_none=True, data_key="readTime")
    featured = fields.Boolean()
    status = fields.String(validate=validate.OneOf(BLOG_STATUSES))
    tags = fields.List(fields.String())
    seo_title = fields.String(allow_none=True, data_key="seoTitle")
    seo_description = fields.String(allow_none=True, data_key="seoDescription")
    seo_keywords = fields.List(fields.String(), data_key="seoKeywords")
    featured_image = fields.String(allow_none=True, data_key="featuredImage")
    published_at = fields.DateTime(allow_none=True, data_key="publishedAt")


class _TrimmedSchema(Schema):
    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }


class ContactCreateSchema(_TrimmedSchema):
    """Public contact form payload. Every field is required."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email format"})
    subject = fields.String(required=True, validate=validate.Length(min=1, max=300))
    message = fields.String(required=True, validate=validate.Length(min=1))


class ContactStatusSchema(Schema):
    id = fields.String(required=True)
    status = fields.String(
        required=True,
        validate=validate.OneOf(CONTACT_STATUSES, error="Invalid status"),
    )


class SignupCreateSchema(_TrimmedSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    email = fields.Email(required=True, error_messages={"invalid": "Invalid email format"})
