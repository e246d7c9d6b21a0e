"""
conftest.py
-----------

Shared pytest fixtures: an application bound to an in-memory SQLite
database, a test client, and helpers to create accounts, catalog rows and
session tokens.
"""

import os

# Configuration classes read the environment at import time
os.environ["FLASK_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test_secret")

from datetime import datetime, timedelta, timezone

import jwt
from pytest import fixture

from app import create_app
from app.models.catalog import Category, Review, SponsoredSlot, Tool
from app.models.db import db
from app.models.user import User
from app.utils import issue_token


@fixture
def app():
    """
    Fixture to create and configure a Flask application for testing.
    The schema is created before each test and dropped afterwards.
    Rate limiting is off unless a test turns it back on.
    """
    app = create_app("app.config.TestingConfig")
    app.config.update(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "JWT_SECRET": "test_secret",
            "RATE_LIMIT_ENABLED": False,
            "ENABLE_AUDIT_LOGGING": False,
            "NEWS_API_KEY": None,
        }
    )

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@fixture
def client(app):
    """
    Fixture to create a test client for the Flask application.
    """
    return app.test_client()


@fixture
def session(app):
    """
    Fixture to provide a database session for tests.
    """
    with app.app_context():
        yield db.session


def create_user(email="user@example.com", password="secret123", role="user"):
    return User.create(email, password, role=role, confirmed=True)


def create_jwt_token(user_id, secret="test_secret", expires_in=3600, **claims):
    """Sign a token by hand, for tests that need unusual claims."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "user_id": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def login(client, user):
    """Attach a session cookie for ``user`` to ``client``."""
    client.set_cookie("access_token", issue_token(user), domain="localhost")
    return client


def bearer(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}


def make_tool(**fields):
    values = {
        "name": "Writer Pro",
        "description": "An assistant for long-form writing",
        "category": "Language",
        "website": "https://writer.example.com",
        "pricing": "Freemium",
        "rating": 4.6,
        "review_count": 120,
        "weekly_users": 25000,
        "growth": "+30%",
        "tags": ["writing", "assistant"],
        "features": ["Drafting", "Summaries"],
        "status": "published",
    }
    values.update(fields)
    return Tool.create(**values)


def make_category(name="Language", **fields):
    return Category.create(name=name, **fields)


def make_review(tool, user_name="Alice", rating=5, **fields):
    values = {
        "tool_id": tool.id,
        "user_name": user_name,
        "rating": rating,
        "title": "Great tool",
        "content": "A" * 60,
    }
    values.update(fields)
    return Review.create(**values)


def make_sponsored_slot(tool, position="top", priority=0, active=True):
    now = datetime.now(timezone.utc)
    if active:
        start, end = now - timedelta(days=1), now + timedelta(days=1)
    else:
        start, end = now - timedelta(days=10), now - timedelta(days=5)
    return SponsoredSlot.create(
        tool_id=tool.id,
        position=position,
        start_date=start,
        end_date=end,
        priority=priority,
    )


@fixture
def user(app):
    return create_user()


@fixture
def admin(app):
    return create_user("admin@example.com", role="admin")


@fixture
def user_client(app, user):
    """A client of its own, signed in as ``user``."""
    return login(app.test_client(), user)


@fixture
def admin_client(app, admin):
    """A client of its own, signed in as ``admin``."""
    return login(app.test_client(), admin)


@fixture
def tool(app):
    return make_tool()
