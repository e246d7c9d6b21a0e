"""
search.py
---------

Catalog search endpoints.

Resources:
    - SearchResource: GET /api/search (filters + integer relevance)
    - AdvancedSearchResource: POST/GET /api/search/advanced
"""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.catalog import Tool
from app.resources.base import BaseCatalogResource
from app.schemas.analytics_schema import AdvancedSearchSchema
from app.schemas.catalog_schema import ToolSchema
from app.services.search import (
    advanced_relevance,
    apply_advanced_filters,
    apply_basic_filters,
    apply_text_match,
    basic_relevance,
)
from app.utils import parse_int_arg

tools_schema = ToolSchema(many=True)
advanced_search_schema = AdvancedSearchSchema()

# query string name -> filter keyword
BASIC_FILTERS = {
    "category": "category",
    "pricing": "pricing",
    "rating": "rating",
    "weeklyUsers": "weekly_users",
    "growth": "growth",
    "integration": "integration",
    "language": "language",
    "aiModel": "ai_model",
}


class SearchResource(Resource, BaseCatalogResource):
    """GET /api/search"""

    def get(self):
        """
        Filtered search over published tools, ordered by relevance.

        Results are fetched by popularity, paged with ``limit``/``offset``,
        then re-sorted within the page by ``relevance_score``.
        """
        q = (request.args.get("q") or "").strip()
        limit = parse_int_arg("limit", 20, minimum=1, maximum=100)
        offset = parse_int_arg("offset", 0, minimum=0)
        filters = {
            keyword: request.args.get(param, "")
            for param, keyword in BASIC_FILTERS.items()
        }

        try:
            query = apply_basic_filters(Tool.published(), q, **filters)
            total = query.count()
            tools = (
                query.order_by(Tool.weekly_users.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to search tools")

        results = []
        for tool, data in zip(tools, tools_schema.dump(tools)):
            data["relevance_score"] = basic_relevance(tool, q)
            results.append(data)
        results.sort(key=lambda item: item["relevance_score"], reverse=True)

        return {
            "tools": results,
            "total": total,
            "limit": limit,
            "offset": offset,
            "query": q,
            "filters": {param: request.args.get(param, "") for param in BASIC_FILTERS},
        }, 200


class AdvancedSearchResource(Resource, BaseCatalogResource):
    """POST/GET /api/search/advanced"""

    def post(self):
        """
        Full-text search with structured filters.

        Body: ``{"query": str, "filters": {...}, "page": int, "limit": int}``.
        Each result carries ``relevance_score`` in [0, 1]; results are
        ordered by score within the page.
        """
        payload = self._payload()
        try:
            data = advanced_search_schema.load(payload)
        except ValidationError as err:
            if "query" in err.messages:
                return {"error": "Search query is required"}, 400
            return self._validation_error(err)

        text = data["query"].strip()
        page = data["page"]
        limit = data["limit"]
        try:
            query = apply_text_match(Tool.published(), text)
            query = apply_advanced_filters(query, data["filters"])
            tools, pagination = self._paginate(
                query.order_by(Tool.weekly_users.desc()), page, limit
            )
        except SQLAlchemyError as e:
            return self._database_error(e, "Search failed")

        results = []
        for tool, dumped in zip(tools, tools_schema.dump(tools)):
            dumped["relevance_score"] = round(advanced_relevance(tool, text), 4)
            results.append(dumped)
        results.sort(key=lambda item: item["relevance_score"], reverse=True)

        logger.info("Advanced search.", query=text, results=pagination["total"])
        return {
            "results": results,
            "pagination": pagination,
            "filters": payload.get("filters") or {},
            "query": text,
        }, 200

    def get(self):
        """Simple name/description search: ``q`` (required), ``category``,
        ``rating`` and ``limit``."""
        q = (request.args.get("q") or "").strip()
        if not q:
            return {"error": "Query parameter is required"}, 400
        limit = parse_int_arg("limit", 10, minimum=1, maximum=100)

        query = apply_basic_filters(
            apply_text_match(Tool.published(), q),
            category=request.args.get("category"),
            rating=request.args.get("rating"),
        )
        tools = query.order_by(Tool.weekly_users.desc()).limit(limit).all()
        return {
            "results": [
                {
                    "id": tool.id,
                    "name": tool.name,
                    "description": tool.description,
                    "category": tool.category,
                    "rating": tool.rating,
                    "weekly_users": tool.weekly_users,
                }
                for tool in tools
            ],
            "query": q,
            "total": len(tools),
        }, 200
