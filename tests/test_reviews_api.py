"""
test_reviews_api.py
-------------------
Tests for review submission, listing, votes, reports and favorites.
"""

from app.models.catalog import Review, ReviewReport
from tests.conftest import login, make_review, make_tool


def _review_payload(tool, **overrides):
    payload = {
        "tool_id": tool.id,
        "user_name": "  Alice  ",
        "rating": 4,
        "title": "Solid",
        "content": "This tool saved me hours every week on my writing tasks.",
        "pros": ["Fast", "  "],
        "cons": [],
        "use_case": "   ",
    }
    payload.update(overrides)
    return payload


class TestReviewSubmission:
    def test_submit_review(self, client, tool):
        response = client.post("/api/reviews", json=_review_payload(tool))

        assert response.status_code == 201
        review = response.get_json()["review"]
        assert review["user_name"] == "Alice"
        assert review["pros"] == ["Fast"]
        assert review["use_case"] is None
        assert review["verified_user"] is False
        assert "user_email" not in review
        assert tool.review_count == 1
        assert tool.rating == 4.0

    def test_signed_in_reviewer_is_linked(self, client, user, tool):
        login(client, user)
        client.post("/api/reviews", json=_review_payload(tool))
        assert Review.query.one().user_id == user.id

    def test_missing_fields(self, client, tool):
        response = client.post("/api/reviews", json={"tool_id": tool.id})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Missing required fields"

    def test_rating_out_of_range(self, client, tool):
        response = client.post("/api/reviews", json=_review_payload(tool, rating=6))
        assert response.get_json()["error"] == "Rating must be between 1 and 5"

    def test_content_too_short(self, client, tool):
        response = client.post(
            "/api/reviews", json=_review_payload(tool, content="Too short")
        )
        assert response.status_code == 400
        assert response.get_json()["error"].startswith("Review content must be")

    def test_unknown_tool(self, client, app):
        ghost = make_tool(name="Ghost")
        payload = _review_payload(ghost)
        ghost.delete()
        assert client.post("/api/reviews", json=payload).status_code == 404

    def test_duplicate_review(self, client, tool):
        make_review(tool, "Alice")
        response = client.post("/api/reviews", json=_review_payload(tool))
        assert response.status_code == 409
        assert response.get_json() == {"error": "You have already reviewed this tool"}


class TestReviewListing:
    def test_requires_tool_id(self, client):
        response = client.get("/api/reviews")
        assert response.status_code == 400
        assert response.get_json() == {"error": "Tool ID is required"}

    def test_lists_active_reviews(self, client, tool):
        make_review(tool, "Alice", 5)
        make_review(tool, "Bob", 2)
        make_review(tool, "Carol", 4, status="hidden")

        data = client.get(
            f"/api/reviews?tool_id={tool.id}&sort_by=rating&sort_order=asc"
        ).get_json()

        assert data["total"] == 2
        assert [r["user_name"] for r in data["reviews"]] == ["Bob", "Alice"]


class TestVotesAndReports:
    def test_vote(self, client, tool):
        review = make_review(tool)

        response = client.post(
            f"/api/reviews/{review.id}/vote",
            json={"voter": "v1", "vote_type": "helpful"},
        )

        assert response.status_code == 200
        assert response.get_json() == {"message": "Vote recorded", "helpful_count": 1}

    def test_second_vote_rejected(self, client, tool):
        review = make_review(tool)
        vote = {"voter": "v1", "vote_type": "helpful"}
        client.post(f"/api/reviews/{review.id}/vote", json=vote)

        response = client.post(f"/api/reviews/{review.id}/vote", json=vote)

        assert response.status_code == 409

    def test_invalid_vote_type(self, client, tool):
        review = make_review(tool)
        response = client.post(
            f"/api/reviews/{review.id}/vote", json={"voter": "v1", "vote_type": "meh"}
        )
        assert response.status_code == 400

    def test_vote_on_hidden_review(self, client, tool):
        review = make_review(tool, status="hidden")
        response = client.post(
            f"/api/reviews/{review.id}/vote",
            json={"voter": "v1", "vote_type": "helpful"},
        )
        assert response.status_code == 404

    def test_report(self, client, tool):
        review = make_review(tool)

        response = client.post(
            f"/api/reviews/{review.id}/report",
            json={"reporter_name": "Mod", "reason": "Spam link"},
        )

        assert response.status_code == 201
        assert response.get_json()["report"]["status"] == "pending"
        assert ReviewReport.query.count() == 1

    def test_report_unknown_review(self, client):
        response = client.post(
            "/api/reviews/nope/report", json={"reporter_name": "Mod", "reason": "x"}
        )
        assert response.status_code == 404


class TestFavorites:
    def test_requires_session(self, client):
        assert client.get("/api/favorites").status_code == 401

    def test_add_list_remove(self, user_client, tool):
        added = user_client.post(
            "/api/favorites", json={"toolId": tool.id, "action": "add"}
        )
        assert added.get_json() == {"success": True, "action": "added"}
        assert user_client.get("/api/favorites").get_json() == {
            "favorites": [tool.id]
        }

        removed = user_client.post(
            "/api/favorites", json={"toolId": tool.id, "action": "remove"}
        )
        assert removed.get_json() == {"success": True, "action": "removed"}
        assert user_client.get("/api/favorites").get_json() == {"favorites": []}

    def test_duplicate_favorite(self, user_client, tool):
        body = {"toolId": tool.id, "action": "add"}
        user_client.post("/api/favorites", json=body)
        response = user_client.post("/api/favorites", json=body)
        assert response.status_code == 400
        assert response.get_json() == {"error": "Tool already in favorites"}

    def test_validation(self, user_client, tool):
        missing = user_client.post("/api/favorites", json={"action": "add"})
        assert missing.get_json() == {"error": "Missing toolId or action"}

        invalid = user_client.post(
            "/api/favorites", json={"toolId": tool.id, "action": "star"}
        )
        assert invalid.status_code == 400
        assert invalid.get_json()["error"] == "Invalid action"

    def test_unknown_tool(self, user_client):
        response = user_client.post(
            "/api/favorites", json={"toolId": "missing", "action": "add"}
        )
        assert response.status_code == 404
