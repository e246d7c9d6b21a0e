"""
account.py
----------

Endpoints scoped to the signed-in user: profile, account deletion, data
export and the personal dashboard.

Every query here is keyed on ``g.user_id``; a user never reads or writes
another user's rows.
"""

from datetime import datetime, timezone

from flask import g, make_response
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.analytics import AnalyticsEvent
from app.models.catalog import Favorite, Review, Tool
from app.models.db import db
from app.models.user import Profile
from app.resources.base import BaseCatalogResource
from app.schemas.catalog_schema import ReviewSchema, ToolSchema
from app.schemas.user_schema import ProfileSchema, ProfileUpdateSchema, UserSchema
from app.services.audit import audit_logger
from app.services.trending import get_trending_tools
from app.utils import require_jwt_auth

profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()
user_schema = UserSchema()
tool_schema = ToolSchema()
tools_schema = ToolSchema(many=True)
reviews_schema = ReviewSchema(many=True)

DASHBOARD_ACTIONS = (
    "track_activity",
    "add_favorite",
    "remove_favorite",
    "update_profile",
)
RECOMMENDATION_COUNT = 3


class ProfileResource(Resource, BaseCatalogResource):
    """PUT /api/user/profile"""

    @require_jwt_auth()
    def put(self):
        try:
            fields = profile_update_schema.load(self._payload())
        except ValidationError as err:
            return self._validation_error(err)

        try:
            profile = Profile.upsert(g.user_id, **fields)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update profile")

        logger.info("Profile updated.", user_id=g.user_id)
        return {
            "message": "Profile updated successfully",
            "profile": profile_schema.dump(profile),
        }, 200


class AccountResource(Resource, BaseCatalogResource):
    """DELETE /api/user/account"""

    @require_jwt_auth()
    def delete(self):
        """
        Anonymize the profile, disable the account and end the session.

        Reviews stay published under their reviewer name; favorites are
        removed.
        """
        user = g.user
        try:
            Favorite.query.filter_by(user_id=user.id).delete()
            Profile.upsert(
                user.id,
                display_name="Deleted User",
                organization=None,
                bio=None,
                newsletter_opt_in=False,
            )
            user.update(disabled=True)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete account")

        audit_logger.log_action(
            "DELETE", "USER", resource_id=user.id,
            details={"source": "self-service"},
        )
        logger.info("Account deleted.", user_id=user.id)
        response = make_response({"message": "Account deleted successfully"}, 200)
        response.delete_cookie("access_token")
        return response


class ExportResource(Resource):
    """GET /api/user/export"""

    @require_jwt_auth()
    def get(self):
        user = g.user
        favorites = (
            Favorite.query.filter_by(user_id=user.id)
            .order_by(Favorite.created_at.desc())
            .all()
        )
        reviews = (
            Review.query.filter_by(user_id=user.id)
            .order_by(Review.created_at.desc())
            .all()
        )
        return {
            "user": user_schema.dump(user),
            "profile": profile_schema.dump(user.profile) if user.profile else None,
            "favorites": [
                {
                    "tool_id": fav.tool_id,
                    "tool_name": fav.tool.name if fav.tool else None,
                    "created_at": fav.created_at.isoformat(),
                }
                for fav in favorites
            ],
            "reviews": reviews_schema.dump(reviews),
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }, 200


class DashboardResource(Resource, BaseCatalogResource):
    """GET/POST /api/dashboard"""

    @require_jwt_auth()
    def get(self):
        """
        Personal dashboard: account summary, counters, recent favorites
        and recommendations drawn from the trending ranking.
        """
        user = g.user
        favorite_ids = Favorite.tool_ids_for(user.id)
        favorite_tools = (
            Tool.query.filter(Tool.id.in_(favorite_ids)).all()
            if favorite_ids
            else []
        )
        order = {tool_id: index for index, tool_id in enumerate(favorite_ids)}
        favorite_tools.sort(key=lambda tool: order[tool.id])

        reviews_written = Review.query.filter_by(user_id=user.id).count()
        tools_explored = (
            db.session.query(AnalyticsEvent.id)
            .filter(
                AnalyticsEvent.user_id == user.id,
                AnalyticsEvent.event_type == "tool_interaction",
            )
            .count()
        )

        favorite_categories = {tool.category for tool in favorite_tools}
        candidates = Tool.published()
        if favorite_ids:
            candidates = candidates.filter(~Tool.id.in_(favorite_ids))
        if favorite_categories:
            candidates = candidates.filter(Tool.category.in_(favorite_categories))
        recommendations = get_trending_tools(
            candidates.all(), limit=RECOMMENDATION_COUNT
        )

        display_name = (
            user.profile.display_name
            if user.profile and user.profile.display_name
            else user.email.split("@")[0]
        )
        return {
            "success": True,
            "data": {
                "user": {
                    "name": display_name,
                    "email": user.email,
                    "member_since": user.created_at.isoformat(),
                    "tools_explored": tools_explored,
                    "reviews_written": reviews_written,
                    "favorites_count": len(favorite_ids),
                },
                "favorite_tools": tools_schema.dump(favorite_tools[:10]),
                "recommendations": tools_schema.dump(recommendations),
                "stats": [
                    {"label": "Tools Explored", "value": tools_explored},
                    {"label": "Reviews Written", "value": reviews_written},
                    {"label": "Favorites", "value": len(favorite_ids)},
                ],
            },
        }, 200

    @require_jwt_auth()
    def post(self):
        payload = self._payload()
        action = payload.get("action")
        data = payload.get("data") or {}
        if action not in DASHBOARD_ACTIONS:
            return {"error": "Invalid action"}, 400
        if not isinstance(data, dict):
            return {"error": "Invalid data"}, 400

        try:
            if action == "track_activity":
                AnalyticsEvent.record(
                    event_type=data.get("type") or "activity",
                    event_data=data,
                    user_id=g.user_id,
                )
                db.session.commit()
            elif action in ("add_favorite", "remove_favorite"):
                tool_id = data.get("toolId") or data.get("tool_id")
                if not tool_id:
                    return {"error": "Missing toolId"}, 400
                if action == "add_favorite":
                    if Tool.get_by_id(tool_id) is None:
                        return {"error": "Tool not found"}, 404
                    Favorite.add(g.user_id, tool_id)
                else:
                    Favorite.remove(g.user_id, tool_id)
            else:
                try:
                    fields = profile_update_schema.load(data)
                except ValidationError as err:
                    return self._validation_error(err)
                Profile.upsert(g.user_id, **fields)
        except IntegrityError:
            db.session.rollback()
            return {"error": "Tool already in favorites"}, 409
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to complete action")

        logger.info("Dashboard action completed.", action=action, user_id=g.user_id)
        return {"success": True, "message": "Action completed successfully"}, 200
