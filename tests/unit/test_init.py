"""
test_init.py
------------
Tests for the application factory, the request id hooks and the JSON error
handlers.
"""

from flask import Flask

import app


def test_create_app_returns_flask_app():
    application = app.create_app("app.config.TestingConfig")
    assert isinstance(application, Flask)
    assert "rate_limit_store" in application.extensions


def test_test_routes_only_registered_when_testing():
    class NotTesting:
        TESTING = False
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        JWT_SECRET = "test_secret"

    application = app.create_app(NotTesting)
    rules = {rule.rule for rule in application.url_map.iter_rules()}
    assert "/fail" not in rules
    assert "/api/tools" in rules


def test_handle_404(client):
    response = client.get("/v0/route/inexistante")
    assert response.status_code == 404
    assert response.is_json
    data = response.get_json()
    assert data["error"] == "Resource not found"
    assert data["path"] == "/v0/route/inexistante"


def test_error_handler_400(client):
    response = client.get("/bad")
    assert response.status_code == 400
    data = response.get_json()
    assert data["error"] == "Bad request"
    assert data["path"] == "/bad"
    assert data["method"] == "GET"
    assert data["request_id"]


def test_error_handler_401(client):
    response = client.get("/unauthorized")
    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"


def test_error_handler_403(client):
    response = client.get("/forbidden")
    assert response.status_code == 403
    assert response.get_json()["error"] == "Forbidden"


def test_error_handler_500(client):
    client.application.config["PROPAGATE_EXCEPTIONS"] = False

    response = client.get("/fail")

    assert response.status_code == 500
    data = response.get_json()
    assert data["error"] == "Internal server error"
    assert data["method"] == "GET"
    assert "exception" not in data


def test_error_handler_500_includes_exception_in_debug(client):
    client.application.config["PROPAGATE_EXCEPTIONS"] = False
    client.application.config["DEBUG"] = True

    data = client.get("/fail").get_json()

    assert "Test internal error" in data["exception"]


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    response = client.get("/bad")
    generated = response.headers["X-Request-ID"]
    assert generated
    assert response.get_json()["request_id"] == generated
