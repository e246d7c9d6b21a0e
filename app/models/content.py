"""
content.py
----------

Models for editorial content and inbound messages: blog posts, contact form
messages, newsletter signups, and the content cache stamps used to signal
that a listing must be regenerated.
"""

import re
import uuid
from datetime import datetime, timezone

from app.models.db import db

BLOG_STATUSES = ("draft", "published", "archived")
CONTACT_STATUSES = ("unread", "read", "replied", "archived")


def _now():
    return datetime.now(timezone.utc)


def slugify(value):
    """Lower-case ``value`` and collapse anything non-alphanumeric to dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower())
    return slug.strip("-")


class BlogPost(db.Model):
    """
    Data model for a blog article.

    ``published_at`` is stamped the first time the post reaches the
    ``published`` status.
    """

    __tablename__ = "blog_posts"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title = db.Column(db.String(300), nullable=False)
    slug = db.Column(db.String(300), nullable=False, unique=True)
    excerpt = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False, default="")
    author = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    read_time = db.Column(db.String(30), nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    status = db.Column(db.String(20), nullable=False, default="draft")
    tags = db.Column(db.JSON, default=list)
    seo_title = db.Column(db.String(300), nullable=True)
    seo_description = db.Column(db.Text, nullable=True)
    seo_keywords = db.Column(db.JSON, default=list)
    featured_image = db.Column(db.String(500), nullable=True)
    published_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('draft', 'published', 'archived')",
            name="check_blog_status",
        ),
        db.Index("idx_blog_posts_status", "status"),
    )

    def __repr__(self):
        return f"<BlogPost {self.slug} ({self.status})>"

    @classmethod
    def get_by_id(cls, post_id):
        return db.session.get(cls, post_id)

    @classmethod
    def get_by_slug(cls, slug):
        return cls.query.filter_by(slug=slug).first()

    @classmethod
    def published(cls):
        return cls.query.filter(cls.status == "published")

    @classmethod
    def create(cls, **fields):
        if not fields.get("slug"):
            fields["slug"] = slugify(fields.get("title"))
        post = cls(**fields)
        post._stamp_publication()
        db.session.add(post)
        db.session.commit()
        return post

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key) and key not in ("id", "created_at"):
                setattr(self, key, value)
        self._stamp_publication()
        self.updated_at = _now()
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()

    def _stamp_publication(self):
        if self.status == "published" and self.published_at is None:
            self.published_at = _now()


class ContactMessage(db.Model):
    """A message sent through the public contact form."""

    __tablename__ = "contact_messages"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(300), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="unread")
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('unread', 'read', 'replied', 'archived')",
            name="check_contact_status",
        ),
    )

    def __repr__(self):
        return f"<ContactMessage from {self.email} ({self.status})>"

    @classmethod
    def get_by_id(cls, message_id):
        return db.session.get(cls, message_id)

    @classmethod
    def create(cls, **fields):
        message = cls(**fields)
        db.session.add(message)
        db.session.commit()
        return message

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = _now()
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()


class Signup(db.Model):
    """Newsletter signup. Delivery is handled elsewhere."""

    __tablename__ = "signups"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email = db.Column(db.String(255), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)

    def __repr__(self):
        return f"<Signup {self.email}>"

    @classmethod
    def create(cls, email):
        signup = cls(email=email)
        db.session.add(signup)
        db.session.commit()
        return signup


class ContentCache(db.Model):
    """Last time a content type was refreshed, and by whom."""

    __tablename__ = "content_cache"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    content_type = db.Column(db.String(50), nullable=False, unique=True)
    last_updated = db.Column(db.DateTime, default=_now, nullable=False)
    updated_by = db.Column(db.String(255), nullable=True)

    def __repr__(self):
        return f"<ContentCache {self.content_type} @ {self.last_updated}>"

    @classmethod
    def touch(cls, content_type, updated_by=None):
        """Upsert the stamp for ``content_type``. Does not commit."""
        entry = cls.query.filter_by(content_type=content_type).first()
        if entry is None:
            entry = cls(content_type=content_type)
            db.session.add(entry)
        entry.last_updated = _now()
        entry.updated_by = updated_by
        return entry
