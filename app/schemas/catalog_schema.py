"""
catalog_schema.py
-----------------

Marshmallow schemas for tools, categories, reviews, favorites and
sponsored slots: model schemas used for responses and request schemas used
to validate payloads.
"""

from marshmallow import EXCLUDE, Schema, fields, validate, validates_schema
from marshmallow import ValidationError
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from app.models.catalog import (
    EXPERIENCE_LEVELS,
    REPORT_STATUSES,
    REVIEW_STATUSES,
    SPONSORED_POSITIONS,
    SUBMISSION_STATUSES,
    TOOL_STATUSES,
    VOTE_TYPES,
    Category,
    Review,
    ReviewReport,
    SponsoredSlot,
    Tool,
    ToolSubmission,
)

MIN_REVIEW_CONTENT = 50
MAX_REVIEW_CONTENT = 2000


# Model Schemas


class ToolSchema(SQLAlchemyAutoSchema):
    """Schema for Tool model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = Tool
        dump_only = ("id", "created_at", "updated_at")


class CategorySchema(SQLAlchemyAutoSchema):
    """Schema for Category model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = Category


class ReviewSchema(SQLAlchemyAutoSchema):
    """Schema for Review model. The reviewer's e-mail is never exposed."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = Review
        include_fk = True
        exclude = ("user_email",)


class ReviewReportSchema(SQLAlchemyAutoSchema):
    """Schema for ReviewReport model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = ReviewReport
        include_fk = True


class SponsoredSlotSchema(SQLAlchemyAutoSchema):
    """Schema for SponsoredSlot model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = SponsoredSlot
        include_fk = True


class ToolSubmissionSchema(SQLAlchemyAutoSchema):
    class Meta:  # pylint: disable=missing-class-docstring
        model = ToolSubmission
        include_fk = True


# Request Schemas


class ToolWriteSchema(Schema):
    """Fields accepted when creating or updating a tool."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    logo = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    long_description = fields.String(allow_none=True)
    category = fields.String(allow_none=True)
    rating = fields.Float(validate=validate.Range(min=0, max=5))
    weekly_users = fields.Integer(validate=validate.Range(min=0))
    growth = fields.String()
    website = fields.String(allow_none=True)
    pricing = fields.String(allow_none=True)
    features = fields.List(fields.String())
    pros = fields.List(fields.String())
    cons = fields.List(fields.String())
    tags = fields.List(fields.String())
    integrations = fields.List(fields.String())
    languages = fields.List(fields.String())
    ai_models = fields.List(fields.String())
    alternatives = fields.List(fields.String())
    affiliate_url = fields.String(allow_none=True)
    status = fields.String(validate=validate.OneOf(TOOL_STATUSES))
    source = fields.String()


class CategoryWriteSchema(Schema):
    """Fields accepted when creating or updating a category."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    icon = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    color = fields.String(allow_none=True)
    popular_tools = fields.List(fields.String())


class ReviewCreateSchema(Schema):
    """Payload of ``POST /api/reviews``."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    tool_id = fields.String(required=True)
    user_name = fields.String(required=True, validate=validate.Length(min=2, max=50))
    user_email = fields.Email(allow_none=True)
    rating = fields.Integer(required=True, validate=validate.Range(min=1, max=5))
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    content = fields.String(
        required=True,
        validate=validate.Length(min=MIN_REVIEW_CONTENT, max=MAX_REVIEW_CONTENT),
    )
    pros = fields.List(fields.String(), load_default=list)
    cons = fields.List(fields.String(), load_default=list)
    use_case = fields.String(allow_none=True)
    experience_level = fields.String(
        load_default="intermediate", validate=validate.OneOf(EXPERIENCE_LEVELS)
    )


class ReviewVoteSchema(Schema):
    """Payload of ``POST /api/reviews/<id>/vote``."""

    voter = fields.String(required=True, validate=validate.Length(min=1, max=100))
    vote_type = fields.String(required=True, validate=validate.OneOf(VOTE_TYPES))


class ReviewReportCreateSchema(Schema):
    """Payload of ``POST /api/reviews/<id>/report``."""

    reporter_name = fields.String(
        required=True, validate=validate.Length(min=1, max=100)
    )
    reason = fields.String(required=True, validate=validate.Length(min=1, max=500))


class ReviewModerationSchema(Schema):
    id = fields.String(required=True)
    status = fields.String(required=True, validate=validate.OneOf(REVIEW_STATUSES))


class ReportResolutionSchema(Schema):
    id = fields.String(required=True)
    status = fields.String(required=True, validate=validate.OneOf(REPORT_STATUSES))
    admin_notes = fields.String(allow_none=True)


class FavoriteActionSchema(Schema):
    """Payload of ``POST /api/favorites``."""

    tool_id = fields.String(required=True, data_key="toolId")
    action = fields.String(
        required=True,
        validate=validate.OneOf(("add", "remove"), error="Invalid action"),
    )


class SponsoredSlotCreateSchema(Schema):
    """Payload of ``POST /api/admin/sponsored``."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    tool_id = fields.String(required=True)
    position = fields.String(
        required=True, validate=validate.OneOf(SPONSORED_POSITIONS)
    )
    start_date = fields.DateTime(required=True)
    end_date = fields.DateTime(required=True)
    priority = fields.Integer(load_default=0)
    budget = fields.Float(load_default=0.0, validate=validate.Range(min=0))

    @validates_schema
    def validate_window(self, data, **kwargs):
        if data["end_date"] < data["start_date"]:
            raise ValidationError("end_date must not precede start_date")


class ToolSubmissionCreateSchema(Schema):
    """
    Payload of ``POST /api/tools/submit``.

    The form posts ``email`` and ``additionalInfo``; they are stored as
    ``submitter_email`` and ``additional_info``.
    """

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(
        required=True, validate=validate.Length(min=1, max=2000)
    )
    website = fields.Url(required=True, schemes={"http", "https"})
    category = fields.String(required=True, validate=validate.Length(min=1, max=100))
    submitter_email = fields.Email(required=True, data_key="email")
    additional_info = fields.String(
        allow_none=True, data_key="additionalInfo", validate=validate.Length(max=2000)
    )


class SubmissionReviewSchema(Schema):
    """Payload of ``PUT /api/admin/tools/submissions``."""

    id = fields.String(required=True)
    status = fields.String(
        required=True,
        validate=validate.OneOf(SUBMISSION_STATUSES[1:]),
    )
    admin_notes = fields.String(allow_none=True, data_key="adminNotes")
