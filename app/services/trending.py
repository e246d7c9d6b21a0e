"""
trending.py
-----------

Trending score computation for catalog tools.

A tool's score is a weighted sum of five normalized factors:

========  ======================================  ======
factor    normalization                           weight
========  ======================================  ======
rating    rating / 5                              0.25
reviews   min(review_count / 100, 1)              0.20
users     min(weekly_users / 10000, 1)            0.25
growth    max(growth% / 100, 0)                   0.20
recency   constant                                0.10
========  ======================================  ======

Functions accept any objects exposing ``rating``, ``review_count``,
``weekly_users``, ``growth``, ``category`` and ``name`` attributes
(typically :class:`app.models.Tool` rows).
"""

import re
from collections import OrderedDict

RATING_WEIGHT = 0.25
REVIEW_WEIGHT = 0.20
USER_WEIGHT = 0.25
GROWTH_WEIGHT = 0.20
RECENCY_WEIGHT = 0.10

CATEGORY_COLORS = [
    "from-blue-500 to-blue-600",
    "from-purple-500 to-purple-600",
    "from-green-500 to-green-600",
    "from-red-500 to-red-600",
    "from-yellow-500 to-yellow-600",
    "from-pink-500 to-pink-600",
    "from-indigo-500 to-indigo-600",
    "from-teal-500 to-teal-600",
]
CATEGORY_ICONS = ["🚀", "🎨", "📊", "✍️", "🎬", "💬", "🔧", "🎯"]

TIME_PERIODS = ("day", "week", "month")

_GROWTH_RE = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)")


def parse_growth(growth):
    """
    Parse a growth value such as ``"+25%"``, ``"-3.5%"`` or ``12`` into a
    float percentage. Unparseable values count as 0.
    """
    if growth is None:
        return 0.0
    if isinstance(growth, (int, float)):
        return float(growth)
    match = _GROWTH_RE.match(str(growth).replace("%", ""))
    return float(match.group(1)) if match else 0.0


def _num(tool, attr):
    return getattr(tool, attr, 0) or 0


def calculate_trending_score(tool):
    """
    Compute the trending score of ``tool``.

    Returns:
        dict: ``{"tool": tool, "score": float, "factors": {...}}`` where
        ``factors`` holds the weighted contribution of each factor.
    """
    factors = {
        "rating": (_num(tool, "rating") / 5) * RATING_WEIGHT,
        "reviews": min(_num(tool, "review_count") / 100, 1) * REVIEW_WEIGHT,
        "users": min(_num(tool, "weekly_users") / 10000, 1) * USER_WEIGHT,
        "growth": max(parse_growth(getattr(tool, "growth", None)) / 100, 0)
        * GROWTH_WEIGHT,
        "recency": RECENCY_WEIGHT,
    }
    return {"tool": tool, "score": sum(factors.values()), "factors": factors}


def _ranked(tools):
    scored = [calculate_trending_score(tool) for tool in tools]
    return sorted(scored, key=lambda item: item["score"], reverse=True)


def get_trending_tools(tools, limit=12):
    """Return the ``limit`` highest-scoring tools, best first."""
    return [item["tool"] for item in _ranked(tools)[:limit]]


def get_trending_categories(tools, limit=8):
    """
    Aggregate tools per category and rank categories by summed score.

    Each entry carries ``name``, ``growth`` (average growth as ``"+N%"``),
    ``tool_count``, ``color``, ``icon`` and ``total_score``. Colors and
    icons are assigned in first-seen category order.
    """
    stats = OrderedDict()
    for tool in tools:
        name = getattr(tool, "category", None) or "Uncategorized"
        entry = stats.setdefault(
            name, {"count": 0, "total_growth": 0.0, "total_score": 0.0}
        )
        entry["count"] += 1
        entry["total_growth"] += parse_growth(getattr(tool, "growth", None))
        entry["total_score"] += calculate_trending_score(tool)["score"]

    categories = []
    for index, (name, entry) in enumerate(stats.items()):
        average = round(entry["total_growth"] / entry["count"])
        categories.append(
            {
                "name": name,
                "growth": f"+{average}%",
                "tool_count": entry["count"],
                "color": CATEGORY_COLORS[index % len(CATEGORY_COLORS)],
                "icon": CATEGORY_ICONS[index % len(CATEGORY_ICONS)],
                "total_score": entry["total_score"],
            }
        )
    categories.sort(key=lambda item: item["total_score"], reverse=True)
    return categories[:limit]


def get_trending_insights(tools):
    """Most popular, fastest growing, highest rated and most reviewed tool."""
    tools = list(tools)
    if not tools:
        return {
            "most_popular": None,
            "fastest_growing": None,
            "highest_rated": None,
            "most_reviewed": None,
        }
    return {
        "most_popular": max(tools, key=lambda t: _num(t, "weekly_users")),
        "fastest_growing": max(
            tools, key=lambda t: parse_growth(getattr(t, "growth", None))
        ),
        "highest_rated": max(tools, key=lambda t: _num(t, "rating")),
        "most_reviewed": max(tools, key=lambda t: _num(t, "review_count")),
    }


def get_trending_badge(index):
    """Badge text and color for the tool ranked at ``index`` (0-based)."""
    if index == 0:
        return {"text": "🔥 Hot", "color": "bg-red-500 text-white"}
    if index == 1:
        return {"text": "⚡ Rising", "color": "bg-orange-500 text-white"}
    if index == 2:
        return {"text": "📈 Trending", "color": "bg-green-500 text-white"}
    if index < 6:
        return {"text": "⭐ Popular", "color": "bg-blue-500 text-white"}
    return {"text": "💫 Trending", "color": "bg-purple-500 text-white"}


def get_time_based_trending(tools, period="week"):
    """
    Order tools for a time window.

    ``day`` favors growth, ``month`` favors review volume, anything else
    (``week``) uses the trending score.
    """
    tools = list(tools)
    if period == "day":
        return sorted(
            tools,
            key=lambda t: parse_growth(getattr(t, "growth", None)),
            reverse=True,
        )
    if period == "month":
        return sorted(tools, key=lambda t: _num(t, "review_count"), reverse=True)
    return [item["tool"] for item in _ranked(tools)]
