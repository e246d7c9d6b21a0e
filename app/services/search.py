"""
search.py
---------

Catalog search: query filters over :class:`Tool` and the two relevance
scores used by the basic and advanced search endpoints.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import Text, cast, or_

from app.models.catalog import Tool

DATE_RANGES = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _json_contains_text(column, text):
    return cast(column, Text).ilike(f"%{text}%")


def apply_basic_filters(query, q="", **filters):
    """
    Narrow a :class:`Tool` query with the basic search parameters.

    Supported filters: ``category``, ``pricing``, ``rating`` (minimum),
    ``weekly_users`` (minimum), ``growth`` (substring of the growth
    string), ``integration``, ``language`` and ``ai_model``. Blank or
    unparseable values are ignored.
    """
    if q and q.strip():
        query = query.filter(Tool.name.ilike(f"%{q.strip()}%"))
    if filters.get("category"):
        query = query.filter(Tool.category == filters["category"])
    if filters.get("pricing"):
        query = query.filter(Tool.pricing == filters["pricing"])

    min_rating = _to_float(filters.get("rating"))
    if min_rating is not None:
        query = query.filter(Tool.rating >= min_rating)
    min_users = _to_int(filters.get("weekly_users"))
    if min_users is not None:
        query = query.filter(Tool.weekly_users >= min_users)
    min_growth = _to_int(filters.get("growth"))
    if min_growth is not None:
        query = query.filter(Tool.growth.ilike(f"%{min_growth}%"))

    if filters.get("integration"):
        query = query.filter(
            _json_contains_text(Tool.integrations, filters["integration"])
        )
    if filters.get("language"):
        language = filters["language"]
        query = query.filter(
            or_(
                _json_contains_text(Tool.languages, language),
                _json_contains_text(Tool.features, language),
            )
        )
    if filters.get("ai_model"):
        model = filters["ai_model"]
        query = query.filter(
            or_(
                _json_contains_text(Tool.ai_models, model),
                _json_contains_text(Tool.features, model),
                _json_contains_text(Tool.tags, model),
            )
        )
    return query


def basic_relevance(tool, q=""):
    """
    Integer relevance for the basic search: +10 for a name match, +5/+3
    for ratings of at least 4.5/4.0, +4/+3/+2 for at least 1M/100k/10k
    weekly users.
    """
    score = 0
    if q and q.lower() in (tool.name or "").lower():
        score += 10

    rating = tool.rating or 0
    if rating >= 4.5:
        score += 5
    elif rating >= 4.0:
        score += 3

    users = tool.weekly_users or 0
    if users >= 1000000:
        score += 4
    elif users >= 100000:
        score += 3
    elif users >= 10000:
        score += 2
    return score


def apply_text_match(query, text):
    """Match ``text`` against name, description, category or tags."""
    pattern = f"%{text}%"
    return query.filter(
        or_(
            Tool.name.ilike(pattern),
            Tool.description.ilike(pattern),
            Tool.category.ilike(pattern),
            _json_contains_text(Tool.tags, text),
        )
    )


def apply_advanced_filters(query, filters, now=None):
    """
    Narrow a :class:`Tool` query with the advanced search filter object:
    ``category`` (list), ``rating`` and ``popularity`` minimums, ``price``
    (``all`` disables), ``date_range`` (``week``/``month``/``year``) on the
    last update, and ``features`` (any overlap).
    """
    filters = filters or {}
    categories = filters.get("category") or []
    if categories:
        query = query.filter(Tool.category.in_(categories))

    min_rating = _to_float(filters.get("rating"))
    if min_rating:
        query = query.filter(Tool.rating >= min_rating)
    min_users = _to_int(filters.get("popularity"))
    if min_users:
        query = query.filter(Tool.weekly_users >= min_users)

    price = filters.get("price")
    if price and price != "all":
        query = query.filter(Tool.pricing == price)

    window = DATE_RANGES.get(filters.get("date_range"))
    if window is not None:
        now = now or datetime.now(timezone.utc)
        query = query.filter(Tool.updated_at >= now - window)

    features = filters.get("features") or []
    if features:
        query = query.filter(
            or_(*[_json_contains_text(Tool.features, f) for f in features])
        )
    return query


def advanced_relevance(tool, text):
    """
    Relevance in [0, 1]: name 0.4, description 0.3, category 0.2, any tag
    0.1, plus a popularity boost of min(users / 10000, 0.2) and a rating
    boost of min(rating / 5, 0.1).
    """
    needle = (text or "").lower()
    score = 0.0
    if needle in (tool.name or "").lower():
        score += 0.4
    if needle in (tool.description or "").lower():
        score += 0.3
    if needle in (tool.category or "").lower():
        score += 0.2
    if any(needle in str(tag).lower() for tag in (tool.tags or [])):
        score += 0.1
    score += min((tool.weekly_users or 0) / 10000, 0.2)
    score += min((tool.rating or 0) / 5, 0.1)
    return min(score, 1.0)
