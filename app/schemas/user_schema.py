"""
user_schema.py
--------------

Schemas for accounts and profiles.
"""

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from app.models.user import MIN_PASSWORD_LENGTH, VALID_ROLES, Profile, User

PASSWORD_ERROR = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"


class UserSchema(SQLAlchemyAutoSchema):
    """Public view of a user. The password hash is never dumped."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = User
        exclude = ("password_hash",)


class ProfileSchema(SQLAlchemyAutoSchema):
    """Schema for Profile model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = Profile
        include_fk = True


class CredentialsSchema(Schema):
    """E-mail and password, as used by login and registration."""

    email = fields.Email(required=True)
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=MIN_PASSWORD_LENGTH, error=PASSWORD_ERROR),
    )


class AdminUserCreateSchema(CredentialsSchema):
    role = fields.String(load_default="user", validate=validate.OneOf(VALID_ROLES))


class RoleUpdateSchema(Schema):
    role = fields.String(
        required=True,
        validate=validate.OneOf(VALID_ROLES, error="Invalid role"),
    )


class StatusUpdateSchema(Schema):
    disabled = fields.Boolean(required=True, truthy={True}, falsy={False})


class PasswordUpdateSchema(Schema):
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=MIN_PASSWORD_LENGTH, error=PASSWORD_ERROR),
    )


class ProfileUpdateSchema(Schema):
    """Profile fields a user may edit. ``newsletterOptIn`` is camelCase."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    display_name = fields.String(
        allow_none=True, validate=validate.Length(max=100)
    )
    organization = fields.String(
        allow_none=True, validate=validate.Length(max=200)
    )
    bio = fields.String(allow_none=True, validate=validate.Length(max=2000))
    newsletter_opt_in = fields.Boolean(data_key="newsletterOptIn")
