"""
base.py
-------

Mixin with the request and error plumbing shared by the catalog resources.
"""

import math

from flask import request

from app.logger import logger
from app.models.db import db


class BaseCatalogResource:
    """Common helpers for catalog resources."""

    @staticmethod
    def _payload():
        """JSON body of the request, or an empty dict when absent/invalid."""
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _validation_error(err):
        logger.warning("Validation error.", path=request.path, errors=err.messages)
        return {"error": "Validation error", "details": err.messages}, 400

    @staticmethod
    def _database_error(err, message):
        """Roll back the session and map a database failure to a 500."""
        db.session.rollback()
        logger.error(message, error=str(err), path=request.path)
        return {"error": message}, 500

    @staticmethod
    def _paginate(query, page, limit):
        """
        Apply page/limit to ``query``.

        Returns:
            tuple: (items, pagination dict with page, limit, total, pages)
        """
        total = query.order_by(None).count()
        items = query.offset((page - 1) * limit).limit(limit).all()
        return items, {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        }
