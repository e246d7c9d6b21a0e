"""
favorites.py
------------

GET/POST /api/favorites: the signed-in user's saved tools.
"""

from flask import g
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.logger import logger
from app.models.catalog import Favorite, Tool
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.catalog_schema import FavoriteActionSchema
from app.utils import require_jwt_auth

favorite_action_schema = FavoriteActionSchema()


class FavoritesResource(Resource, BaseCatalogResource):
    """Add, remove and list favorites of the current user."""

    @require_jwt_auth()
    def get(self):
        return {"favorites": Favorite.tool_ids_for(g.user_id)}, 200

    @require_jwt_auth()
    def post(self):
        """
        Body: ``{"toolId": str, "action": "add" | "remove"}``.

        Returns:
            200: ``{"success": true, "action": "added" | "removed"}``
            400: Missing field, invalid action, or tool already a favorite
            404: Unknown tool (add only)
        """
        try:
            data = favorite_action_schema.load(self._payload())
        except ValidationError as err:
            missing = any(
                "Missing data for required field." in messages
                for messages in err.messages.values()
            )
            if missing:
                return {"error": "Missing toolId or action"}, 400
            return {"error": "Invalid action", "details": err.messages}, 400

        tool_id = data["tool_id"]
        if data["action"] == "remove":
            try:
                Favorite.remove(g.user_id, tool_id)
            except SQLAlchemyError as e:
                return self._database_error(e, "Failed to remove favorite")
            logger.info("Favorite removed.", user_id=g.user_id, tool_id=tool_id)
            return {"success": True, "action": "removed"}, 200

        if Tool.get_by_id(tool_id) is None:
            return {"error": "Tool not found"}, 404
        try:
            Favorite.add(g.user_id, tool_id)
        except IntegrityError:
            db.session.rollback()
            return {"error": "Tool already in favorites"}, 400
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to add favorite")

        logger.info("Favorite added.", user_id=g.user_id, tool_id=tool_id)
        return {"success": True, "action": "added"}, 200
