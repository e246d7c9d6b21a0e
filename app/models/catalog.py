"""
catalog.py
----------

This module defines the SQLAlchemy models for the tools catalog: categories,
tools, user reviews (with votes and moderation reports), favorites and
sponsored placements, plus tool submissions awaiting review.

Review aggregates on a tool (rating, review count, rating distribution) are
kept in sync by :meth:`Tool.refresh_review_stats`, which every review
mutation goes through.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import func

from app.models.db import db

TOOL_STATUSES = ("draft", "published", "archived")
REVIEW_STATUSES = ("active", "hidden", "flagged")
REPORT_STATUSES = ("pending", "reviewed", "resolved", "dismissed")
VOTE_TYPES = ("helpful", "unhelpful")
EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced", "expert")
SPONSORED_POSITIONS = ("top", "sidebar", "category", "search")
SUBMISSION_STATUSES = ("pending", "approved", "rejected")


def _now():
    return datetime.now(timezone.utc)


class Category(db.Model):
    """A catalog category such as ``Language`` or ``Design``."""

    __tablename__ = "categories"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(100), nullable=False, unique=True)
    icon = db.Column(db.String(50), nullable=True)
    description = db.Column(db.Text, nullable=True)
    color = db.Column(db.String(50), nullable=True)
    popular_tools = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    def __repr__(self):
        return f"<Category {self.name} (ID: {self.id})>"

    @classmethod
    def get_by_id(cls, category_id):
        return db.session.get(cls, category_id)

    @classmethod
    def get_by_name(cls, name):
        """Case-insensitive lookup by category name."""
        return cls.query.filter(
            func.lower(cls.name) == (name or "").strip().lower()
        ).first()

    @classmethod
    def create(cls, **fields):
        category = cls(**fields)
        db.session.add(category)
        db.session.commit()
        return category

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = _now()
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()


class Tool(db.Model):
    """
    Data model for a catalog entry.

    Attributes:
        id (str): UUID identifier.
        name (str): Unique display name.
        category (str): Category name.
        rating (float): Mean rating of active reviews (0 when none).
        review_count (int): Number of active reviews.
        rating_distribution (dict): Count of active reviews per star.
        weekly_users (int): Self-reported weekly active users.
        growth (str): Growth string such as ``"+25%"``.
        website (str): Official URL.
        affiliate_url (str): Partner link, when one exists.
        affiliate_clicks (int): Outbound affiliate clicks recorded.
        status (str): ``draft``, ``published`` or ``archived``.
        source (str): Where the entry came from (``manual``, ``import``...).
    """

    __tablename__ = "tools"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(200), nullable=False, unique=True)
    logo = db.Column(db.String(500), nullable=True)
    description = db.Column(db.Text, nullable=True)
    long_description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    rating = db.Column(db.Float, nullable=False, default=0.0)
    review_count = db.Column(db.Integer, nullable=False, default=0)
    rating_distribution = db.Column(db.JSON, default=dict)
    weekly_users = db.Column(db.Integer, nullable=False, default=0)
    growth = db.Column(db.String(20), nullable=False, default="0%")
    website = db.Column(db.String(500), nullable=True)
    pricing = db.Column(db.String(50), nullable=True)
    features = db.Column(db.JSON, default=list)
    pros = db.Column(db.JSON, default=list)
    cons = db.Column(db.JSON, default=list)
    tags = db.Column(db.JSON, default=list)
    integrations = db.Column(db.JSON, default=list)
    languages = db.Column(db.JSON, default=list)
    ai_models = db.Column(db.JSON, default=list)
    alternatives = db.Column(db.JSON, default=list)
    affiliate_url = db.Column(db.String(500), nullable=True)
    affiliate_clicks = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default="published")
    source = db.Column(db.String(50), nullable=False, default="manual")
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    reviews = db.relationship(
        "Review",
        back_populates="tool",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('draft', 'published', 'archived')",
            name="check_tool_status",
        ),
        db.Index("idx_tools_status", "status"),
        db.Index("idx_tools_weekly_users", "weekly_users"),
    )

    def __repr__(self):
        return f"<Tool {self.name} (ID: {self.id}, status: {self.status})>"

    @classmethod
    def get_by_id(cls, tool_id):
        return db.session.get(cls, tool_id)

    @classmethod
    def published(cls):
        """Base query over tools visible to the public."""
        return cls.query.filter(cls.status == "published")

    @classmethod
    def create(cls, **fields):
        tool = cls(**fields)
        db.session.add(tool)
        db.session.commit()
        return tool

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key) and key not in ("id", "created_at"):
                setattr(self, key, value)
        self.updated_at = _now()
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()

    def refresh_review_stats(self):
        """
        Recompute rating, review count and rating distribution from the
        tool's active reviews. Does not commit.
        """
        rows = (
            db.session.query(Review.rating, func.count(Review.id))
            .filter(Review.tool_id == self.id, Review.status == "active")
            .group_by(Review.rating)
            .all()
        )
        distribution = {str(star): 0 for star in range(1, 6)}
        total = 0
        weighted = 0
        for rating, count in rows:
            distribution[str(rating)] = count
            total += count
            weighted += rating * count

        self.review_count = total
        self.rating = round(weighted / total, 2) if total else 0.0
        self.rating_distribution = distribution


class Review(db.Model):
    """A user review of a tool. One review per reviewer name and tool."""

    __tablename__ = "reviews"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tool_id = db.Column(
        db.String(36),
        db.ForeignKey("tools.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(db.String(36), nullable=True)
    user_name = db.Column(db.String(50), nullable=False)
    user_email = db.Column(db.String(255), nullable=True)
    rating = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    pros = db.Column(db.JSON, default=list)
    cons = db.Column(db.JSON, default=list)
    use_case = db.Column(db.String(200), nullable=True)
    experience_level = db.Column(
        db.String(20), nullable=False, default="intermediate"
    )
    verified_user = db.Column(db.Boolean, nullable=False, default=False)
    helpful_count = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default="active")
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    tool = db.relationship("Tool", back_populates="reviews")
    votes = db.relationship(
        "ReviewVote",
        back_populates="review",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )
    reports = db.relationship(
        "ReviewReport",
        back_populates="review",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint(
            "rating >= 1 AND rating <= 5", name="check_review_rating"
        ),
        db.CheckConstraint(
            "status IN ('active', 'hidden', 'flagged')",
            name="check_review_status",
        ),
        db.UniqueConstraint("tool_id", "user_name", name="unique_review_author"),
        db.Index("idx_reviews_tool_id", "tool_id"),
        db.Index("idx_reviews_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Review {self.rating}* on {self.tool_id} by {self.user_name}>"

    @classmethod
    def get_by_id(cls, review_id):
        return db.session.get(cls, review_id)

    @classmethod
    def exists_for(cls, tool_id, user_name):
        return (
            cls.query.filter_by(tool_id=tool_id, user_name=user_name).first()
            is not None
        )

    @classmethod
    def create(cls, **fields):
        """Insert a review and refresh the parent tool's aggregates."""
        review = cls(**fields)
        db.session.add(review)
        db.session.flush()
        tool = Tool.get_by_id(review.tool_id)
        if tool is not None:
            tool.refresh_review_stats()
        db.session.commit()
        return review

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = _now()
        db.session.flush()
        if self.tool is not None:
            self.tool.refresh_review_stats()
        db.session.commit()

    def delete(self):
        tool = self.tool
        db.session.delete(self)
        db.session.flush()
        if tool is not None:
            tool.refresh_review_stats()
        db.session.commit()

    def refresh_helpful_count(self):
        self.helpful_count = self.votes.filter_by(vote_type="helpful").count()


class ReviewVote(db.Model):
    """A helpful/unhelpful vote on a review, unique per voter."""

    __tablename__ = "review_votes"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    review_id = db.Column(
        db.String(36),
        db.ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
    )
    voter = db.Column(db.String(100), nullable=False)
    vote_type = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)

    review = db.relationship("Review", back_populates="votes")

    __table_args__ = (
        db.CheckConstraint(
            "vote_type IN ('helpful', 'unhelpful')", name="check_vote_type"
        ),
        db.UniqueConstraint("review_id", "voter", name="unique_review_vote"),
    )

    def __repr__(self):
        return f"<ReviewVote {self.vote_type} on {self.review_id}>"

    @classmethod
    def cast(cls, review, voter, vote_type):
        """Record a vote and refresh the review's helpful counter."""
        vote = cls(review_id=review.id, voter=voter, vote_type=vote_type)
        db.session.add(vote)
        db.session.flush()
        review.refresh_helpful_count()
        db.session.commit()
        return vote


class ReviewReport(db.Model):
    """Moderation report raised against a review."""

    __tablename__ = "review_reports"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    review_id = db.Column(
        db.String(36),
        db.ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
    )
    reporter_name = db.Column(db.String(100), nullable=False)
    reason = db.Column(db.String(500), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    admin_notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    resolved_at = db.Column(db.DateTime, nullable=True)

    review = db.relationship("Review", back_populates="reports")

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'reviewed', 'resolved', 'dismissed')",
            name="check_report_status",
        ),
        db.Index("idx_review_reports_status", "status"),
    )

    def __repr__(self):
        return f"<ReviewReport {self.status} on {self.review_id}>"

    @classmethod
    def get_by_id(cls, report_id):
        return db.session.get(cls, report_id)

    @classmethod
    def create(cls, **fields):
        report = cls(**fields)
        db.session.add(report)
        db.session.commit()
        return report

    def resolve(self, status, admin_notes=None):
        self.status = status
        if admin_notes is not None:
            self.admin_notes = admin_notes
        if status in ("resolved", "dismissed"):
            self.resolved_at = _now()
        db.session.commit()


class Favorite(db.Model):
    """A tool saved by a user."""

    __tablename__ = "favorites"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    tool_id = db.Column(
        db.String(36),
        db.ForeignKey("tools.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=_now, nullable=False)

    tool = db.relationship("Tool")

    __table_args__ = (
        db.UniqueConstraint("user_id", "tool_id", name="unique_user_favorite"),
        db.Index("idx_favorites_user_id", "user_id"),
    )

    def __repr__(self):
        return f"<Favorite {self.tool_id} for {self.user_id}>"

    @classmethod
    def tool_ids_for(cls, user_id):
        rows = (
            cls.query.filter_by(user_id=user_id)
            .order_by(cls.created_at.desc())
            .all()
        )
        return [row.tool_id for row in rows]

    @classmethod
    def add(cls, user_id, tool_id):
        favorite = cls(user_id=user_id, tool_id=tool_id)
        db.session.add(favorite)
        db.session.commit()
        return favorite

    @classmethod
    def remove(cls, user_id, tool_id):
        """Delete the favorite if present. Returns the number of rows removed."""
        removed = cls.query.filter_by(user_id=user_id, tool_id=tool_id).delete()
        db.session.commit()
        return removed


class SponsoredSlot(db.Model):
    """A paid placement for a tool during a date window."""

    __tablename__ = "sponsored_slots"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tool_id = db.Column(
        db.String(36),
        db.ForeignKey("tools.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = db.Column(db.String(20), nullable=False, default="top")
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    priority = db.Column(db.Integer, nullable=False, default=0)
    budget = db.Column(db.Float, nullable=False, default=0.0)
    impressions = db.Column(db.Integer, nullable=False, default=0)
    clicks = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)

    tool = db.relationship("Tool")

    __table_args__ = (
        db.CheckConstraint(
            "position IN ('top', 'sidebar', 'category', 'search')",
            name="check_sponsored_position",
        ),
        db.Index("idx_sponsored_window", "start_date", "end_date"),
    )

    def __repr__(self):
        return f"<SponsoredSlot {self.position} for {self.tool_id}>"

    @classmethod
    def get_by_id(cls, slot_id):
        return db.session.get(cls, slot_id)

    @classmethod
    def create(cls, **fields):
        slot = cls(**fields)
        db.session.add(slot)
        db.session.commit()
        return slot

    def delete(self):
        db.session.delete(self)
        db.session.commit()


class ToolSubmission(db.Model):
    """
    A tool suggested through the public submission form.

    Submissions start ``pending``. Approving one creates a draft ``Tool``
    (``source="submission"``) and links it through ``tool_id``.
    """

    __tablename__ = "tool_submissions"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    website = db.Column(db.String(500), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    submitter_email = db.Column(db.String(255), nullable=False)
    additional_info = db.Column(db.Text, nullable=True)
    submitted_by = db.Column(db.String(36), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="pending")
    admin_notes = db.Column(db.Text, nullable=True)
    tool_id = db.Column(
        db.String(36), db.ForeignKey("tools.id", ondelete="SET NULL"), nullable=True
    )
    submitted_at = db.Column(db.DateTime, default=_now, nullable=False)
    reviewed_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="check_submission_status",
        ),
        db.Index("idx_tool_submissions_status", "status"),
    )

    def __repr__(self):
        return f"<ToolSubmission {self.name} ({self.status})>"

    @classmethod
    def get_by_id(cls, submission_id):
        return db.session.get(cls, submission_id)

    @classmethod
    def create(cls, **fields):
        submission = cls(**fields)
        db.session.add(submission)
        db.session.commit()
        return submission

    def to_tool_fields(self):
        return {
            "name": self.name,
            "description": self.description,
            "website": self.website,
            "category": self.category,
            "status": "draft",
            "source": "submission",
        }

    def mark_reviewed(self, status, admin_notes=None, tool_id=None):
        """Record the decision. Does not commit."""
        self.status = status
        if admin_notes is not None:
            self.admin_notes = admin_notes
        if tool_id is not None:
            self.tool_id = tool_id
        self.reviewed_at = _now()
