"""
test_scripts.py
---------------
Tests for the maintenance scripts: demo seeding, admin promotion and the
data quality report.
"""

from app.models.analytics import AuditLog
from app.models.catalog import Category, Tool
from app.models.content import BlogPost, ContentCache
from app.models.user import User
from app.models.workflow import Workflow
from scripts.data_quality_report import DataQualityReporter
from scripts.grant_admin import grant_admin
from scripts.seed_catalog import BLOG_POSTS, CATEGORIES, TOOLS, seed
from tests.conftest import make_tool


def test_seed_is_idempotent(app):
    first = seed()
    second = seed()

    assert first == {
        "categories": len(CATEGORIES),
        "tools": len(TOOLS),
        "blog_posts": len(BLOG_POSTS),
        "workflows": 1,
    }
    assert second == {"categories": 0, "tools": 0, "blog_posts": 0, "workflows": 0}
    assert Category.query.count() == len(CATEGORIES)
    assert Tool.query.filter_by(source="seed").count() == len(TOOLS)
    assert Workflow.query.one().is_active is True
    assert {e.content_type for e in ContentCache.query.all()} == {
        "tools",
        "categories",
        "blog",
    }


def test_seed_publishes_with_date(app):
    seed()
    published = BlogPost.query.filter_by(status="published").one()
    draft = BlogPost.query.filter_by(status="draft").one()
    assert published.published_at is not None
    assert draft.published_at is None


def test_grant_admin_promotes_existing_user(app, user):
    promoted = grant_admin("USER@example.com")
    assert promoted.id == user.id
    assert user.role == "admin"


def test_grant_admin_revoke(app, admin):
    grant_admin(admin.email, revoke=True)
    assert admin.role == "user"


def test_grant_admin_creates_account_with_password(app):
    app.config["ENABLE_AUDIT_LOGGING"] = True

    created = grant_admin("new-admin@example.com", password="secret123")

    assert created.role == "admin"
    assert User.get_by_email("new-admin@example.com").check_password("secret123")
    assert AuditLog.query.filter_by(action="ROLE_CHANGE").count() == 1


def test_grant_admin_unknown_without_password(app):
    assert grant_admin("ghost@example.com") is None
    assert grant_admin("ghost@example.com", password="x" * 8, revoke=True) is None


def test_data_quality_report_only(app):
    make_tool()
    make_tool(name="Broken", website="not-a-url")

    summary = DataQualityReporter().run()

    assert summary["tools_checked"] == 2
    assert summary["invalid_tools"] == 1
    assert [r["name"] for r in summary["reports"]] == ["Broken"]


def test_data_quality_fix_archives_mock_data(app):
    make_tool()
    mock_tool = make_tool(name="Placeholder", weekly_users=150000)
    make_tool(name="Hidden", status="draft", weekly_users=150000)

    reporter = DataQualityReporter(fix=True, published_only=True)
    summary = reporter.run()

    assert summary["tools_checked"] == 2
    assert reporter.archived == 1
    assert mock_tool.status == "archived"
    assert Tool.query.filter_by(name="Hidden").one().status == "draft"
    assert ContentCache.query.filter_by(content_type="tools").one().updated_by == (
        "data_quality_report"
    )
