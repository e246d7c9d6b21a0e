"""
Tests for utility functions in app.utils module.
"""

import jwt
import pytest
from flask import g

from app.utils import (
    camel_to_snake,
    can_access_admin,
    extract_jwt_data,
    is_valid_email,
    is_valid_uuid,
    issue_token,
    keys_to_camel,
    keys_to_snake,
    load_current_user,
    resolve_role,
    snake_to_camel,
)
from tests.conftest import create_jwt_token, create_user


class TestKeyConversion:
    """Test cases for camelCase/snake_case helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("toolId", "tool_id"),
            ("affiliateURL", "affiliate_url"),
            ("WeeklyUsers", "weekly_users"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_camel_to_snake(self, value, expected):
        assert camel_to_snake(value) == expected

    def test_snake_to_camel(self):
        assert snake_to_camel("review_count") == "reviewCount"
        assert snake_to_camel("name") == "name"

    def test_dict_conversion(self):
        assert keys_to_snake({"toolId": 1, "userName": "a"}) == {
            "tool_id": 1,
            "user_name": "a",
        }
        assert keys_to_camel({"created_at": "x"}) == {"createdAt": "x"}
        assert keys_to_snake(None) == {}


class TestValidators:
    def test_is_valid_email(self):
        assert is_valid_email("someone@example.com")
        assert not is_valid_email("someone@example")
        assert not is_valid_email("no spaces@example.com")
        assert not is_valid_email(None)

    def test_is_valid_uuid(self):
        assert is_valid_uuid("3f2b8a4e-2c9d-4f4e-9b1a-7d1f0f6a9c11")
        assert not is_valid_uuid("42")
        assert not is_valid_uuid(None)


class TestTokens:
    """Test cases for JWT issuing and extraction."""

    def test_issue_token_claims(self, app, user):
        token = issue_token(user)
        payload = jwt.decode(token, "test_secret", algorithms=["HS256"])

        assert payload["sub"] == user.id
        assert payload["user_id"] == user.id
        assert payload["email"] == user.email
        assert payload["role"] == "user"
        assert payload["exp"] > payload["iat"]

    def test_extract_from_bearer_header(self, app, user):
        with app.test_request_context(
            headers={"Authorization": f"Bearer {issue_token(user)}"}
        ):
            assert extract_jwt_data()["sub"] == user.id

    def test_extract_from_cookie(self, app, user):
        with app.test_request_context(
            headers={"Cookie": f"access_token={issue_token(user)}"}
        ):
            assert extract_jwt_data()["email"] == user.email

    def test_extract_missing_token(self, app):
        with app.test_request_context():
            assert extract_jwt_data() is None

    def test_extract_expired_token(self, app, user):
        token = create_jwt_token(user.id, expires_in=-10)
        with app.test_request_context(
            headers={"Authorization": f"Bearer {token}"}
        ):
            assert extract_jwt_data() is None

    def test_extract_wrong_signature(self, app, user):
        token = create_jwt_token(user.id, secret="another_secret")
        with app.test_request_context(
            headers={"Authorization": f"Bearer {token}"}
        ):
            assert extract_jwt_data() is None


class TestRoles:
    def test_resolve_role(self, app, user, admin):
        assert resolve_role(user) == "user"
        assert resolve_role(admin) == "admin"
        assert resolve_role(None) is None

    def test_admin_emails_upgrade_role(self, app, user):
        app.config["ADMIN_EMAILS"] = [user.email]
        assert resolve_role(user) == "admin"
        assert can_access_admin(user)


class TestLoadCurrentUser:
    def test_loads_user_from_token(self, app, user):
        with app.test_request_context(
            headers={"Authorization": f"Bearer {issue_token(user)}"}
        ):
            assert load_current_user().id == user.id
            assert g.user_id == user.id

    def test_unknown_user(self, app):
        token = create_jwt_token("ghost")
        with app.test_request_context(
            headers={"Authorization": f"Bearer {token}"}
        ):
            assert load_current_user() is None

    def test_disabled_user(self, app):
        disabled = create_user("gone@example.com")
        disabled.update(disabled=True)
        with app.test_request_context(
            headers={"Authorization": f"Bearer {issue_token(disabled)}"}
        ):
            assert load_current_user() is None
