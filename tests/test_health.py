"""
test_health.py
--------------
Tests for the health check endpoint.
"""

import json
from datetime import datetime
from time import sleep
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import SQLAlchemyError


class TestHealthEndpoint:
    """Test cases for the health check endpoint."""

    def test_health_check_success(self, client):
        """Test successful health check with all systems healthy."""
        response = client.get("/health")

        assert response.status_code == 200

        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["service"] == "catalog_api"
        assert "timestamp" in data
        assert "environment" in data
        assert "checks" in data

        timestamp = data["timestamp"]
        assert timestamp.endswith("Z")
        datetime.fromisoformat(timestamp[:-1])

        db_check = data["checks"]["database"]
        assert db_check["healthy"] is True
        assert db_check["message"] == "Database connection successful"
        assert db_check["response_time_ms"] >= 0

    def test_health_check_also_served_under_api_prefix(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_health_check_database_failure(self, client):
        """Test health check when database connection fails."""
        with patch("app.resources.health.db.session.execute") as mock_execute:
            mock_execute.side_effect = SQLAlchemyError("Connection timeout")

            response = client.get("/health")

            assert response.status_code == 503

            data = response.get_json()
            assert data["status"] == "unhealthy"

            db_check = data["checks"]["database"]
            assert db_check["healthy"] is False
            assert "Connection timeout" in db_check["message"]

    def test_health_check_database_unexpected_result(self, client):
        """Test health check when database returns unexpected result."""
        with patch("app.resources.health.db.session.execute") as mock_execute:
            mock_result = MagicMock()
            mock_result.scalar.return_value = 0
            mock_execute.return_value = mock_result

            response = client.get("/health")

            assert response.status_code == 503
            db_check = response.get_json()["checks"]["database"]
            assert db_check["healthy"] is False
            assert "unexpected result" in db_check["message"]

    def test_health_check_reports_integrations(self, app, client):
        app.config["NEWS_API_KEY"] = "key"
        app.config["ENABLE_AUDIT_LOGGING"] = True

        checks = client.get("/health").get_json()["checks"]

        assert checks["news_feed"] == {"configured": True}
        assert checks["audit_logging"] == {"enabled": True}

    def test_health_check_response_format(self, client):
        """Test that health check response has correct format and required fields."""
        response = client.get("/health")

        assert response.content_type == "application/json"
        data = response.get_json()
        for field in ("status", "service", "timestamp", "version", "environment", "checks"):
            assert field in data, f"Missing required field: {field}"
        assert data["status"] in ["healthy", "unhealthy"]

    def test_health_check_environment_variable(self, client):
        """Test that health check includes environment information."""
        with patch.dict("os.environ", {"FLASK_ENV": "testing"}):
            data = client.get("/health").get_json()
        assert data["environment"] == "testing"

    def test_health_check_json_serializable(self, client):
        data = client.get("/health").get_json()
        assert json.loads(json.dumps(data)) == data

    def test_health_check_only_supports_get(self, client):
        """Test that health endpoint only supports GET method."""
        assert client.post("/health").status_code == 405
        assert client.put("/health").status_code == 405
        assert client.delete("/health").status_code == 405

    def test_health_check_database_slow_response(self, client):
        """Test health check with a slow database response."""

        def slow_execute(*_args, **_kwargs):
            sleep(0.1)
            mock_result = MagicMock()
            mock_result.scalar.return_value = 1
            return mock_result

        with patch(
            "app.resources.health.db.session.execute", side_effect=slow_execute
        ):
            response = client.get("/health")

        assert response.status_code == 200
        db_check = response.get_json()["checks"]["database"]
        assert db_check["healthy"] is True
        assert db_check["response_time_ms"] >= 100
