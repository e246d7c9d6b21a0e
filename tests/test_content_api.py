"""
test_content_api.py
-------------------
Tests for the blog, contact form, newsletter signup and news feed
endpoints.
"""

from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from app.models.content import BlogPost, ContactMessage, Signup
from app.services.news import NewsServiceError


@pytest.fixture
def posts(app):
    now = datetime.now(timezone.utc)
    return [
        BlogPost.create(
            title="Older guide",
            excerpt="Basics",
            category="Guides",
            status="published",
            published_at=now - timedelta(days=3),
        ),
        BlogPost.create(
            title="Fresh news",
            excerpt="This week in AI",
            category="News",
            featured=True,
            status="published",
            published_at=now - timedelta(days=1),
        ),
        BlogPost.create(title="Unfinished", category="News"),
    ]


class TestBlog:
    def test_published_posts_newest_first(self, client, posts):
        data = client.get("/api/blog").get_json()
        assert [p["title"] for p in data["posts"]] == ["Fresh news", "Older guide"]
        assert data["pagination"]["total"] == 2

    def test_filters(self, client, posts):
        by_category = client.get("/api/blog?category=Guides").get_json()
        assert [p["slug"] for p in by_category["posts"]] == ["older-guide"]

        featured = client.get("/api/blog?featured=true").get_json()
        assert [p["slug"] for p in featured["posts"]] == ["fresh-news"]

        searched = client.get("/api/blog?q=week").get_json()
        assert [p["slug"] for p in searched["posts"]] == ["fresh-news"]

    def test_categories_count_published_only(self, client, posts):
        data = client.get("/api/blog/categories").get_json()
        assert data["categories"] == [
            {"name": "Guides", "count": 1},
            {"name": "News", "count": 1},
        ]

    def test_post_by_slug(self, client, posts):
        assert client.get("/api/blog/fresh-news").get_json()["post"]["title"] == (
            "Fresh news"
        )
        assert client.get("/api/blog/unfinished").status_code == 404


class TestContact:
    def test_message_is_stored(self, client):
        response = client.post(
            "/api/contact",
            json={
                "name": " Sam ",
                "email": "Sam@Example.com",
                "subject": "Hello",
                "message": "Great site",
            },
        )

        assert response.status_code == 201
        message = ContactMessage.query.one()
        assert message.name == "Sam"
        assert message.email == "sam@example.com"
        assert message.status == "unread"
        assert response.get_json()["id"] == message.id

    def test_missing_fields(self, client):
        response = client.post("/api/contact", json={"name": "Sam"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "All fields are required"

    def test_invalid_email(self, client):
        response = client.post(
            "/api/contact",
            json={"name": "Sam", "email": "nope", "subject": "s", "message": "m"},
        )
        assert response.get_json() == {"error": "Please provide a valid email address"}


class TestSignup:
    def test_signup_and_duplicate(self, client):
        first = client.post("/api/signup", json={"email": "Reader@Example.com"})
        again = client.post("/api/signup", json={"email": "reader@example.com"})

        assert first.status_code == 201
        assert again.status_code == 409
        assert Signup.query.count() == 1

    def test_invalid_email(self, client):
        response = client.post("/api/signup", json={"email": "nope"})
        assert response.get_json() == {"error": "Invalid email format"}


class TestNews:
    def test_fallback_without_key(self, client):
        data = client.get("/api/news").get_json()
        assert len(data["news"]) == 2

    def test_provider_failure(self, app, client):
        app.config["NEWS_API_KEY"] = "key"
        with mock.patch(
            "app.resources.content.fetch_news", side_effect=NewsServiceError("down")
        ):
            response = client.get("/api/news")
        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch news"}
