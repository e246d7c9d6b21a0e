"""
admin_users.py
--------------

User administration. An admin can list, create and delete accounts, change
roles, enable/disable accounts and reset passwords, but never change their
own role or status, nor delete themselves.
"""

from flask import g
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.user import User
from app.resources.base import BaseCatalogResource
from app.schemas.user_schema import (
    AdminUserCreateSchema,
    PasswordUpdateSchema,
    ProfileSchema,
    RoleUpdateSchema,
    StatusUpdateSchema,
    UserSchema,
)
from app.services.audit import audit_logger
from app.services.rate_limit import admin_limiter, rate_limited
from app.utils import require_admin, resolve_role

user_schema = UserSchema()
profile_schema = ProfileSchema()
admin_user_create_schema = AdminUserCreateSchema()
role_update_schema = RoleUpdateSchema()
status_update_schema = StatusUpdateSchema()
password_update_schema = PasswordUpdateSchema()


def _dump_user(user):
    data = user_schema.dump(user)
    data["role"] = resolve_role(user)
    return data


class AdminUsersResource(Resource, BaseCatalogResource):
    """GET/POST /api/admin/users"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        users = User.query.order_by(User.created_at.desc()).all()
        return {"users": [_dump_user(user) for user in users]}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def post(self):
        """Create a confirmed account with the given role."""
        try:
            data = admin_user_create_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        try:
            user = User.create(
                data["email"], data["password"], role=data["role"], confirmed=True
            )
        except ValueError:
            return {"error": "User already exists"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create user")

        audit_logger.log_crud(
            "CREATE", "USER", user.id, {"email": user.email, "role": user.role}
        )
        return {"success": True, "user": _dump_user(user)}, 201


class AdminUserResource(Resource, BaseCatalogResource):
    """GET/DELETE /api/admin/users/<user_id>"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self, user_id):
        user = User.get_by_id(user_id)
        if user is None:
            return {"error": "User not found"}, 404
        data = _dump_user(user)
        data["profile"] = profile_schema.dump(user.profile) if user.profile else None
        return {"user": data}, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def delete(self, user_id):
        if user_id == g.user_id:
            return {"error": "Cannot delete your own account"}, 400
        user = User.get_by_id(user_id)
        if user is None:
            return {"error": "User not found"}, 404

        email = user.email
        try:
            user.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete user")

        audit_logger.log_crud("DELETE", "USER", user_id, {"email": email})
        logger.info("User deleted by admin.", user_id=user_id, admin_id=g.user_id)
        return {"success": True}, 200


class AdminUserRoleResource(Resource, BaseCatalogResource):
    """PUT /api/admin/users/<user_id>/role"""

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self, user_id):
        try:
            data = role_update_schema.load(self._payload())
        except ValidationError as err:
            return {
                "error": "Valid role (admin or user) is required",
                "details": err.messages,
            }, 400
        if user_id == g.user_id:
            return {"error": "Cannot change your own role"}, 400
        user = User.get_by_id(user_id)
        if user is None:
            return {"error": "User not found"}, 404

        previous = user.role
        try:
            user.update(role=data["role"])
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update role")

        audit_logger.log_sensitive_operation(
            "ROLE_CHANGE",
            {"user_id": user.id, "from": previous, "to": data["role"]},
        )
        return {"success": True, "user": _dump_user(user)}, 200


class AdminUserStatusResource(Resource, BaseCatalogResource):
    """PUT /api/admin/users/<user_id>/status"""

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self, user_id):
        try:
            data = status_update_schema.load(self._payload())
        except ValidationError:
            return {"error": "disabled must be true or false"}, 400
        if user_id == g.user_id:
            return {"error": "Cannot change your own disabled status"}, 400
        user = User.get_by_id(user_id)
        if user is None:
            return {"error": "User not found"}, 404

        try:
            user.update(disabled=data["disabled"])
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update user status")

        audit_logger.log_sensitive_operation(
            "STATUS_CHANGE", {"user_id": user.id, "disabled": data["disabled"]}
        )
        return {"success": True, "user": _dump_user(user)}, 200


class AdminUserPasswordResource(Resource, BaseCatalogResource):
    """PUT /api/admin/users/<user_id>/password"""

    @rate_limited(admin_limiter)
    @require_admin()
    def put(self, user_id):
        try:
            data = password_update_schema.load(self._payload())
        except ValidationError:
            return {"error": "Password must be at least 6 characters long"}, 400
        user = User.get_by_id(user_id)
        if user is None:
            return {"error": "User not found"}, 404

        user.set_password(data["password"])
        try:
            user.update()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update password")

        audit_logger.log_sensitive_operation("PASSWORD_RESET", {"user_id": user.id})
        return {"success": True, "message": "Password updated successfully"}, 200
