"""
user.py
-------

SQLAlchemy models for accounts: users and their public profiles.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from app.models.db import db
from app.logger import logger

VALID_ROLES = ("admin", "user")
MIN_PASSWORD_LENGTH = 6


class User(db.Model):
    """
    Account that can sign in to the catalog.

    Attributes:
        id (str): UUID identifier.
        email (str): Unique, lower-cased e-mail address.
        password_hash (str): Werkzeug password hash.
        role (str): ``admin`` or ``user``.
        disabled (bool): Disabled accounts cannot sign in.
        email_confirmed_at (datetime): Confirmation timestamp, if any.
        last_sign_in_at (datetime): Last successful login.
    """

    __tablename__ = "users"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email = db.Column(db.String(255), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    email_confirmed_at = db.Column(db.DateTime, nullable=True)
    last_sign_in_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    profile = db.relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint("role IN ('admin', 'user')", name="check_user_role"),
        db.Index("idx_users_role", "role"),
    )

    def __repr__(self):
        return f"<User {self.email} (ID: {self.id}, role: {self.role})>"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @classmethod
    def get_by_id(cls, user_id):
        return db.session.get(cls, user_id)

    @classmethod
    def get_by_email(cls, email):
        if not email:
            return None
        return cls.query.filter_by(email=email.strip().lower()).first()

    @classmethod
    def create(cls, email, password, role="user", confirmed=False):
        """
        Create a new user with a hashed password.

        Args:
            email (str): E-mail address (normalized to lower case).
            password (str): Clear-text password.
            role (str): Role to grant.
            confirmed (bool): Mark the e-mail as confirmed immediately.

        Returns:
            User: The created user.

        Raises:
            ValueError: If the e-mail is already registered.
            SQLAlchemyError: On any other database failure.
        """
        user = cls(email=email.strip().lower(), role=role)
        user.set_password(password)
        if confirmed:
            user.email_confirmed_at = datetime.now(timezone.utc)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning("User already exists.", email=user.email)
            raise ValueError("User already exists") from e
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return user

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = datetime.now(timezone.utc)
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()

    def record_sign_in(self):
        self.last_sign_in_at = datetime.now(timezone.utc)
        db.session.commit()


class Profile(db.Model):
    """Public profile attached one-to-one to a user."""

    __tablename__ = "profiles"

    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    display_name = db.Column(db.String(100), nullable=True)
    organization = db.Column(db.String(200), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    newsletter_opt_in = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user = db.relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.display_name} (user: {self.user_id})>"

    @classmethod
    def upsert(cls, user_id, **fields):
        """Create or update the profile of ``user_id`` with ``fields``."""
        profile = db.session.get(cls, user_id)
        if profile is None:
            profile = cls(user_id=user_id)
            db.session.add(profile)
        for key, value in fields.items():
            if hasattr(profile, key):
                setattr(profile, key, value)
        profile.updated_at = datetime.now(timezone.utc)
        db.session.commit()
        return profile
