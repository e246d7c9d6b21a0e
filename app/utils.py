"""Utility functions for the catalog API: JWT sessions, role checks and
payload helpers shared by the resources."""

import re
import uuid
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from app.logger import logger
from app.models.user import User

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def camel_to_snake(name):
    """
    Convert a CamelCase or PascalCase string to snake_case.

    Args:
        name (str): The string to convert.

    Returns:
        str: The converted snake_case string.
    """
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    snake = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()
    return re.sub(r"_+", "_", snake)


def snake_to_camel(name):
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def keys_to_snake(data):
    return {camel_to_snake(key): value for key, value in (data or {}).items()}


def keys_to_camel(data):
    return {snake_to_camel(key): value for key, value in (data or {}).items()}


def is_valid_email(value):
    return isinstance(value, str) and bool(EMAIL_RE.match(value.strip()))


def is_valid_uuid(value):
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, TypeError):
        return False


def parse_int_arg(name, default, minimum=None, maximum=None):
    """Read an integer query argument, falling back to ``default``."""
    try:
        value = int(request.args.get(name, default))
    except (TypeError, ValueError):
        value = default
    if minimum is not None:
        value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value


def issue_token(user):
    """
    Sign a session JWT for ``user``.

    The token carries ``sub``/``user_id``, ``email`` and ``role`` claims
    and expires after ``JWT_EXPIRATION_SECONDS``.
    """
    now = datetime.now(timezone.utc)
    expires_in = current_app.config.get("JWT_EXPIRATION_SECONDS", 86400)
    payload = {
        "sub": user.id,
        "user_id": user.id,
        "email": user.email,
        "role": resolve_role(user),
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(
        payload, current_app.config["JWT_SECRET"], algorithm="HS256"
    )


def _token_from_request():
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return request.cookies.get("access_token")


def extract_jwt_data():
    """
    Extract and decode the session JWT from the ``Authorization: Bearer``
    header or the ``access_token`` cookie.

    Returns:
        dict: Decoded payload, or None if missing or invalid.
    """
    token = _token_from_request()
    if not token:
        logger.debug("JWT token not found in request")
        return None

    jwt_secret = current_app.config.get("JWT_SECRET")
    if not jwt_secret:
        logger.warning("JWT_SECRET is not configured")
        return None

    try:
        return jwt.decode(token, jwt_secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid JWT token", error=str(e))
        return None


def resolve_role(user):
    """
    Effective role of ``user``: the stored role, upgraded to ``admin`` when
    the e-mail is listed in ``ADMIN_EMAILS``.
    """
    if user is None:
        return None
    if user.role == "admin":
        return "admin"
    admin_emails = current_app.config.get("ADMIN_EMAILS") or []
    if user.email and user.email.lower() in admin_emails:
        return "admin"
    return user.role or "user"


def can_access_admin(user):
    return resolve_role(user) == "admin"


def load_current_user():
    """
    Resolve the authenticated user of the current request.

    Stores ``g.user``, ``g.user_id`` and ``g.jwt_data``. Unknown or
    disabled accounts resolve to None.
    """
    if "user" in g:
        return g.user

    g.user = None
    g.user_id = None
    g.jwt_data = extract_jwt_data()
    if not g.jwt_data:
        return None

    user_id = g.jwt_data.get("sub") or g.jwt_data.get("user_id")
    user = User.get_by_id(user_id) if user_id else None
    if user is None:
        logger.warning("JWT refers to an unknown user", user_id=user_id)
        return None
    if user.disabled:
        logger.warning("Disabled user attempted access", user_id=user.id)
        return None

    g.user = user
    g.user_id = user.id
    return user


def require_jwt_auth():
    """
    Decorator requiring an authenticated, enabled user.

    Returns ``({"error": "Unauthorized"}, 401)`` otherwise. The user is
    available as ``g.user`` inside the view.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            if load_current_user() is None:
                return {"error": "Unauthorized"}, 401
            return view_func(*args, **kwargs)

        return wrapped

    return decorator


def require_admin():
    """
    Decorator requiring an authenticated admin.

    401 when the request is not authenticated, 403 when the user is not an
    admin.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            user = load_current_user()
            if user is None:
                return {"error": "Unauthorized"}, 401
            if not can_access_admin(user):
                logger.warning(
                    "Non-admin user denied admin access",
                    user_id=user.id,
                    path=request.path,
                )
                return {"error": "Admin access required"}, 403
            return view_func(*args, **kwargs)

        return wrapped

    return decorator
