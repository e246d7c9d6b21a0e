"""
auth.py
-------

Session endpoints: registration, login, logout and session lookup.

Sessions are stateless JWTs. Login returns the token in the body and also
sets it as the ``access_token`` cookie; logout clears the cookie.
"""

from flask import current_app, g, make_response
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.user import User
from app.resources.base import BaseCatalogResource
from app.schemas.user_schema import CredentialsSchema, UserSchema
from app.services.audit import audit_logger
from app.services.rate_limit import login_limiter, rate_limited
from app.utils import issue_token, load_current_user, require_jwt_auth, resolve_role

credentials_schema = CredentialsSchema()
user_schema = UserSchema()


def _with_session_cookie(body, status, token):
    response = make_response(body, status)
    response.set_cookie(
        "access_token",
        token,
        max_age=current_app.config.get("JWT_EXPIRATION_SECONDS", 86400),
        httponly=True,
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")),
        samesite="Lax",
    )
    return response


class RegisterResource(Resource, BaseCatalogResource):
    """POST /api/auth/register"""

    def post(self):
        """
        Create an account and open a session for it.

        Returns:
            201: ``{"user": {...}, "token": "..."}``
            400: Invalid e-mail or password shorter than 6 characters
            409: E-mail already registered
        """
        logger.info("Registering new user.")
        try:
            data = credentials_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        try:
            user = User.create(data["email"], data["password"])
        except ValueError:
            return {"error": "User already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to register user")

        audit_logger.log_action(
            "CREATE", "USER", resource_id=user.id, user_id=user.id,
            user_email=user.email, details={"source": "self-registration"},
        )
        token = issue_token(user)
        return _with_session_cookie(
            {"user": user_schema.dump(user), "token": token}, 201, token
        )


class LoginResource(Resource, BaseCatalogResource):
    """POST /api/auth/login"""

    @rate_limited(login_limiter)
    def post(self):
        """
        Authenticate with e-mail and password.

        Returns:
            200: ``{"user": {...}, "token": "...", "role": "..."}``
            401: Bad credentials
            403: Account disabled
            429: Too many attempts
        """
        try:
            data = credentials_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        user = User.get_by_email(data["email"])
        if user is None or not user.check_password(data["password"]):
            logger.warning("Failed login attempt.", email=data["email"])
            return {"error": "Invalid credentials"}, 401
        if user.disabled:
            logger.warning("Login attempt on disabled account.", user_id=user.id)
            return {"error": "Account disabled"}, 403

        try:
            user.record_sign_in()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to sign in")

        g.user = user
        audit_logger.log_login(user)
        token = issue_token(user)
        logger.info("User signed in.", user_id=user.id)
        return _with_session_cookie(
            {
                "user": user_schema.dump(user),
                "token": token,
                "role": resolve_role(user),
            },
            200,
            token,
        )


class LogoutResource(Resource):
    """POST /api/auth/logout"""

    @require_jwt_auth()
    def post(self):
        audit_logger.log_logout(g.user)
        response = make_response({"message": "Logged out"}, 200)
        response.delete_cookie("access_token")
        return response


class SessionResource(Resource):
    """GET /api/auth/session"""

    def get(self):
        """Current user and effective role; both null when signed out."""
        user = load_current_user()
        if user is None:
            return {"user": None, "role": None}, 200
        return {"user": user_schema.dump(user), "role": resolve_role(user)}, 200
