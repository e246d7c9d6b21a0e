"""
test_admin_catalog_api.py
-------------------------
Tests for the admin catalog back-office: tools, submitted tools, categories,
review moderation and sponsored slots.
"""

from datetime import datetime, timedelta, timezone
from unittest import mock

from app.models.analytics import AuditLog
from app.models.catalog import (
    Category,
    ReviewReport,
    SponsoredSlot,
    Tool,
    ToolSubmission,
)
from app.models.content import ContentCache
from app.services.enrichment import EnrichmentError
from tests.conftest import make_category, make_review, make_tool


class TestAccess:
    def test_anonymous_is_rejected(self, client):
        response = client.get("/api/admin/tools")
        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}

    def test_regular_user_is_forbidden(self, user_client):
        response = user_client.get("/api/admin/tools")
        assert response.status_code == 403
        assert response.get_json() == {"error": "Admin access required"}


class TestAdminTools:
    def test_list_includes_drafts(self, admin_client, tool):
        make_tool(name="Draft", status="draft")

        everything = admin_client.get("/api/admin/tools").get_json()
        drafts = admin_client.get("/api/admin/tools?status=draft").get_json()

        assert {t["name"] for t in everything["tools"]} == {"Writer Pro", "Draft"}
        assert [t["name"] for t in drafts["tools"]] == ["Draft"]

    def test_create_accepts_camel_case(self, app, admin_client, admin):
        app.config["ENABLE_AUDIT_LOGGING"] = True

        response = admin_client.post(
            "/api/admin/tools",
            json={
                "name": "Composer",
                "weeklyUsers": 1200,
                "affiliateUrl": "https://composer.example.com/?ref=1",
            },
        )

        assert response.status_code == 201
        tool = Tool.query.filter_by(name="Composer").one()
        assert tool.weekly_users == 1200
        assert tool.affiliate_url == "https://composer.example.com/?ref=1"
        assert ContentCache.query.filter_by(content_type="tools").one().updated_by == (
            admin.email
        )
        assert AuditLog.query.filter_by(action="CREATE", resource_type="TOOL").count() == 1

    def test_create_duplicate_name(self, admin_client, tool):
        response = admin_client.post("/api/admin/tools", json={"name": tool.name})
        assert response.status_code == 409

    def test_create_validation(self, admin_client):
        response = admin_client.post("/api/admin/tools", json={"rating": 9})
        assert response.status_code == 400
        details = response.get_json()["details"]
        assert "name" in details
        assert "rating" in details

    def test_update(self, admin_client, tool):
        response = admin_client.put(
            "/api/admin/tools", json={"id": tool.id, "reviewCount": 3, "growth": "+5%"}
        )

        assert response.status_code == 200
        assert tool.growth == "+5%"

    def test_update_missing_and_unknown(self, admin_client):
        assert admin_client.put("/api/admin/tools", json={}).status_code == 400
        missing = admin_client.put("/api/admin/tools", json={"id": "nope"})
        assert missing.status_code == 404

    def test_delete(self, admin_client, tool):
        tool_id = tool.id
        response = admin_client.delete(f"/api/admin/tools?id={tool_id}")
        assert response.status_code == 200
        assert Tool.get_by_id(tool_id) is None
        assert admin_client.delete("/api/admin/tools").status_code == 400

    def test_publish(self, admin_client, app):
        draft = make_tool(name="Draft", status="draft")

        response = admin_client.post("/api/admin/tools/publish", json={"id": draft.id})

        assert response.status_code == 200
        assert draft.status == "published"

    def test_publish_requires_complete_tool(self, admin_client, app):
        draft = make_tool(name="Bare", status="draft", website=None, description="")

        response = admin_client.post("/api/admin/tools/publish", json={"id": draft.id})

        assert response.status_code == 400
        assert response.get_json()["error"] == (
            "Missing required fields: website, description"
        )

    def test_enrich(self, admin_client):
        suggestion = {"name": "Example", "website": "https://example.com"}
        with mock.patch(
            "app.resources.admin_catalog.enrich_from_url", return_value=suggestion
        ) as enrich:
            response = admin_client.post(
                "/api/admin/tools/enrich", json={"url": "https://example.com"}
            )

        assert response.status_code == 200
        assert response.get_json() == {"suggestion": suggestion}
        assert enrich.call_args.args == ("https://example.com",)

    def test_enrich_errors(self, admin_client):
        assert admin_client.post("/api/admin/tools/enrich", json={}).status_code == 400
        bad = admin_client.post("/api/admin/tools/enrich", json={"url": "ftp://x"})
        assert bad.get_json() == {"error": "Invalid url"}

        with mock.patch(
            "app.resources.admin_catalog.enrich_from_url",
            side_effect=EnrichmentError("Failed to fetch URL"),
        ):
            failed = admin_client.post(
                "/api/admin/tools/enrich", json={"url": "https://example.com"}
            )
        assert failed.status_code == 500
        assert failed.get_json() == {"error": "Failed to fetch URL"}

    def test_validate_stored_tool(self, admin_client, tool):
        data = admin_client.post(
            "/api/admin/tools/validate", json={"id": tool.id}
        ).get_json()
        assert data["is_valid"] is True
        assert data["is_mock_data"] is False

    def test_validate_payload(self, admin_client):
        data = admin_client.post(
            "/api/admin/tools/validate",
            json={
                "name": "Mock",
                "rating": 4.2,
                "reviewCount": 189,
                "weeklyUsers": 150000,
                "growth": "+28%",
            },
        ).get_json()

        assert data["is_valid"] is False
        assert "Tool description is required" in data["errors"]
        assert data["is_mock_data"] is True

    def test_validate_requires_data(self, admin_client):
        assert admin_client.post("/api/admin/tools/validate", json={}).status_code == 400


def _submission(**fields):
    values = {
        "name": "Clipmaker",
        "description": "Turns long videos into short clips",
        "website": "https://clipmaker.example.com",
        "category": "Video",
        "submitter_email": "founder@example.com",
    }
    values.update(fields)
    return ToolSubmission.create(**values)


class TestAdminSubmissions:
    def test_list_filters_by_status(self, admin_client, app):
        _submission()
        _submission(name="Old", status="rejected")

        pending = admin_client.get("/api/admin/tools/submissions?status=pending")
        everything = admin_client.get("/api/admin/tools/submissions")

        assert [s["name"] for s in pending.get_json()["submissions"]] == ["Clipmaker"]
        assert len(everything.get_json()["submissions"]) == 2

    def test_requires_admin(self, user_client):
        assert user_client.get("/api/admin/tools/submissions").status_code == 403

    def test_approve_creates_draft_tool(self, app, admin_client):
        app.config["ENABLE_AUDIT_LOGGING"] = True
        submission = _submission()

        response = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": submission.id, "status": "approved", "adminNotes": "Looks good"},
        )

        assert response.status_code == 200
        data = response.get_json()
        tool = Tool.query.filter_by(name="Clipmaker").one()
        assert data["tool"]["id"] == tool.id
        assert tool.status == "draft"
        assert tool.source == "submission"
        assert submission.status == "approved"
        assert submission.tool_id == tool.id
        assert submission.admin_notes == "Looks good"
        assert submission.reviewed_at is not None
        assert AuditLog.query.filter_by(resource_type="TOOL_SUBMISSION").count() == 1
        assert ContentCache.query.filter_by(content_type="tools").count() == 1

    def test_reject_leaves_catalog_alone(self, admin_client, app):
        submission = _submission()

        response = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": submission.id, "status": "rejected"},
        )

        assert response.status_code == 200
        assert response.get_json()["tool"] is None
        assert submission.status == "rejected"
        assert Tool.query.count() == 0

    def test_reviewed_submission_cannot_change(self, admin_client, app):
        submission = _submission(status="rejected")

        response = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": submission.id, "status": "approved"},
        )

        assert response.status_code == 409
        assert Tool.query.count() == 0

    def test_approve_with_taken_name(self, admin_client, tool):
        submission = _submission(name=tool.name)
        submission_id = submission.id

        response = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": submission_id, "status": "approved"},
        )

        assert response.status_code == 409
        assert ToolSubmission.get_by_id(submission_id).status == "pending"
        assert Tool.query.count() == 1

    def test_review_validation(self, admin_client, app):
        submission = _submission()

        bad_status = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": submission.id, "status": "pending"},
        )
        unknown = admin_client.put(
            "/api/admin/tools/submissions",
            json={"id": "nope", "status": "approved"},
        )

        assert bad_status.status_code == 400
        assert unknown.status_code == 404


class TestAdminCategories:
    def test_create_update_delete(self, admin_client):
        created = admin_client.post(
            "/api/admin/categories", json={"name": "Audio", "popularTools": ["a"]}
        )
        assert created.status_code == 201
        category_id = created.get_json()["category"]["id"]

        updated = admin_client.put(
            "/api/admin/categories", json={"id": category_id, "icon": "🎧"}
        )
        assert updated.get_json()["category"]["icon"] == "🎧"

        deleted = admin_client.delete(f"/api/admin/categories?id={category_id}")
        assert deleted.status_code == 200
        assert Category.query.count() == 0

    def test_duplicate(self, admin_client, app):
        make_category("Audio")
        response = admin_client.post("/api/admin/categories", json={"name": "Audio"})
        assert response.status_code == 409
        assert response.get_json() == {"error": "Category already exists"}

    def test_unknown(self, admin_client):
        assert admin_client.put(
            "/api/admin/categories", json={"id": "nope", "icon": "x"}
        ).status_code == 404
        assert admin_client.delete("/api/admin/categories?id=nope").status_code == 404


class TestModeration:
    def test_hide_review(self, admin_client, tool):
        review = make_review(tool)

        response = admin_client.put(
            "/api/admin/reviews", json={"id": review.id, "status": "hidden"}
        )

        assert response.status_code == 200
        assert response.get_json()["review"]["status"] == "hidden"

    def test_invalid_status(self, admin_client, tool):
        review = make_review(tool)
        response = admin_client.put(
            "/api/admin/reviews", json={"id": review.id, "status": "deleted"}
        )
        assert response.status_code == 400

    def test_reports(self, admin_client, client, tool):
        review = make_review(tool)
        client.post(
            f"/api/reviews/{review.id}/report",
            json={"reporter_name": "Mod", "reason": "Spam"},
        )
        report = ReviewReport.query.one()

        pending = admin_client.get("/api/admin/reviews/reports?status=pending")
        assert [r["id"] for r in pending.get_json()["reports"]] == [report.id]

        resolved = admin_client.put(
            "/api/admin/reviews/reports",
            json={"id": report.id, "status": "resolved", "admin_notes": "Removed"},
        )
        assert resolved.status_code == 200
        assert resolved.get_json()["report"]["status"] == "resolved"
        assert report.admin_notes == "Removed"

    def test_unknown_report(self, admin_client):
        response = admin_client.put(
            "/api/admin/reviews/reports", json={"id": "nope", "status": "dismissed"}
        )
        assert response.status_code == 404


class TestAdminSponsored:
    def test_create_list_delete(self, admin_client, tool):
        now = datetime.now(timezone.utc)
        created = admin_client.post(
            "/api/admin/sponsored",
            json={
                "toolId": tool.id,
                "position": "sidebar",
                "startDate": now.isoformat(),
                "endDate": (now + timedelta(days=7)).isoformat(),
                "priority": 2,
            },
        )
        assert created.status_code == 201
        slot_id = created.get_json()["slot"]["id"]

        slots = admin_client.get("/api/admin/sponsored").get_json()["slots"]
        assert [s["id"] for s in slots] == [slot_id]

        assert admin_client.delete(f"/api/admin/sponsored?id={slot_id}").status_code == 200
        assert SponsoredSlot.query.count() == 0

    def test_window_must_be_ordered(self, admin_client, tool):
        now = datetime.now(timezone.utc)
        response = admin_client.post(
            "/api/admin/sponsored",
            json={
                "toolId": tool.id,
                "position": "top",
                "startDate": now.isoformat(),
                "endDate": (now - timedelta(days=1)).isoformat(),
            },
        )
        assert response.status_code == 400

    def test_unknown_tool(self, admin_client):
        now = datetime.now(timezone.utc).isoformat()
        response = admin_client.post(
            "/api/admin/sponsored",
            json={"toolId": "nope", "position": "top", "startDate": now, "endDate": now},
        )
        assert response.status_code == 404
