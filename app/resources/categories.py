"""
categories.py
-------------

Public category endpoints. Statistics are computed over published tools.
"""

from flask_restful import Resource
from sqlalchemy import func

from app.models.catalog import Category, Tool
from app.models.db import db
from app.resources.base import BaseCatalogResource
from app.schemas.catalog_schema import CategorySchema, ToolSchema
from app.services.trending import calculate_trending_score, get_trending_tools
from app.utils import parse_int_arg

category_schema = CategorySchema()
tool_schema = ToolSchema()
tools_schema = ToolSchema(many=True)


def _stats_by_category():
    rows = (
        db.session.query(
            Tool.category,
            func.count(Tool.id),
            func.avg(Tool.rating),
            func.sum(Tool.review_count),
        )
        .filter(Tool.status == "published")
        .group_by(Tool.category)
        .all()
    )
    return {
        name: {
            "tool_count": count,
            "avg_rating": round(float(avg or 0), 2),
            "total_reviews": int(total or 0),
        }
        for name, count, avg, total in rows
    }


def _empty_stats():
    return {"tool_count": 0, "avg_rating": 0.0, "total_reviews": 0}


class CategoryListResource(Resource):
    """GET /api/categories"""

    def get(self):
        stats = _stats_by_category()
        categories = []
        for category in Category.query.order_by(Category.name).all():
            entry = category_schema.dump(category)
            entry.update(stats.get(category.name, _empty_stats()))
            categories.append(entry)
        return {"categories": categories}, 200


class CategoryDetailResource(Resource, BaseCatalogResource):
    """GET /api/categories/<name>"""

    def get(self, name):
        category = Category.get_by_name(name)
        if category is None:
            return {"error": "Category not found"}, 404

        page = parse_int_arg("page", 1, minimum=1)
        limit = parse_int_arg("limit", 20, minimum=1, maximum=100)
        query = Tool.published().filter(Tool.category == category.name)
        tools, pagination = self._paginate(
            query.order_by(Tool.weekly_users.desc()), page, limit
        )
        return {
            "category": category_schema.dump(category),
            "stats": _stats_by_category().get(category.name, _empty_stats()),
            "tools": tools_schema.dump(tools),
            "pagination": pagination,
        }, 200


class CategoryTrendingResource(Resource):
    """GET /api/categories/<name>/trending"""

    def get(self, name):
        category = Category.get_by_name(name)
        if category is None:
            return {"error": "Category not found"}, 404

        limit = parse_int_arg("limit", 6, minimum=1, maximum=50)
        tools = Tool.published().filter(Tool.category == category.name).all()
        trending = get_trending_tools(tools, limit=limit)
        return {
            "category": category.name,
            "tools": [
                dict(
                    tool_schema.dump(tool),
                    trending_score=round(calculate_trending_score(tool)["score"], 4),
                )
                for tool in trending
            ],
        }, 200
