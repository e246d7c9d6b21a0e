"""
Tests for the trending score computation.
"""

from types import SimpleNamespace

import pytest

from app.services.trending import (
    CATEGORY_COLORS,
    calculate_trending_score,
    get_time_based_trending,
    get_trending_badge,
    get_trending_categories,
    get_trending_insights,
    get_trending_tools,
    parse_growth,
)


def _tool(name, category="Language", rating=4.0, reviews=50, users=5000, growth="+10%"):
    return SimpleNamespace(
        name=name,
        category=category,
        rating=rating,
        review_count=reviews,
        weekly_users=users,
        growth=growth,
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        ("+25%", 25.0),
        ("-3.5%", -3.5),
        ("40", 40.0),
        (12, 12.0),
        (None, 0.0),
        ("steady", 0.0),
    ],
)
def test_parse_growth(value, expected):
    assert parse_growth(value) == expected


def test_score_factors_are_weighted_and_capped():
    tool = _tool("Maxed", rating=5, reviews=1000, users=50000, growth="+250%")

    result = calculate_trending_score(tool)

    assert result["tool"] is tool
    assert result["factors"] == pytest.approx(
        {
            "rating": 0.25,
            "reviews": 0.20,
            "users": 0.25,
            "growth": 0.5,
            "recency": 0.10,
        }
    )
    assert result["score"] == pytest.approx(1.3)


def test_negative_growth_contributes_nothing():
    tool = _tool("Shrinking", rating=0, reviews=0, users=0, growth="-40%")
    result = calculate_trending_score(tool)
    assert result["factors"]["growth"] == 0
    assert result["score"] == pytest.approx(0.10)


def test_missing_values_count_as_zero():
    tool = SimpleNamespace(
        name="Blank", rating=None, review_count=None, weekly_users=None, growth=None
    )
    assert calculate_trending_score(tool)["score"] == pytest.approx(0.10)


def test_get_trending_tools_orders_and_limits():
    low = _tool("Low", rating=2, reviews=1, users=10, growth="0%")
    mid = _tool("Mid")
    high = _tool("High", rating=5, reviews=200, users=20000, growth="+80%")

    assert get_trending_tools([low, high, mid], limit=2) == [high, mid]


def test_get_trending_categories_aggregates_per_category():
    tools = [
        _tool("A", category="Language", growth="+10%"),
        _tool("B", category="Language", growth="+30%"),
        _tool("C", category="Image", growth="+5%"),
        _tool("D", category=None, growth="0%"),
    ]

    categories = get_trending_categories(tools)
    by_name = {entry["name"]: entry for entry in categories}

    assert categories[0]["name"] == "Language"
    assert by_name["Language"]["tool_count"] == 2
    assert by_name["Language"]["growth"] == "+20%"
    assert by_name["Language"]["color"] == CATEGORY_COLORS[0]
    assert by_name["Image"]["color"] == CATEGORY_COLORS[1]
    assert "Uncategorized" in by_name


def test_get_trending_insights():
    popular = _tool("Popular", users=90000)
    growing = _tool("Growing", growth="+150%")
    rated = _tool("Rated", rating=4.9)
    reviewed = _tool("Reviewed", reviews=900)

    insights = get_trending_insights([popular, growing, rated, reviewed])

    assert insights["most_popular"] is popular
    assert insights["fastest_growing"] is growing
    assert insights["highest_rated"] is rated
    assert insights["most_reviewed"] is reviewed


def test_get_trending_insights_empty():
    assert get_trending_insights([]) == {
        "most_popular": None,
        "fastest_growing": None,
        "highest_rated": None,
        "most_reviewed": None,
    }


@pytest.mark.parametrize(
    "index,text",
    [
        (0, "🔥 Hot"),
        (1, "⚡ Rising"),
        (2, "📈 Trending"),
        (3, "⭐ Popular"),
        (5, "⭐ Popular"),
        (6, "💫 Trending"),
    ],
)
def test_get_trending_badge(index, text):
    assert get_trending_badge(index)["text"] == text


def test_time_based_trending():
    fast = _tool("Fast", reviews=10, growth="+90%")
    reviewed = _tool("Reviewed", reviews=500, growth="+1%")

    assert get_time_based_trending([reviewed, fast], "day") == [fast, reviewed]
    assert get_time_based_trending([fast, reviewed], "month") == [reviewed, fast]
    assert len(get_time_based_trending([fast, reviewed], "week")) == 2


@pytest.mark.parametrize(
    "lower,higher",
    [
        ("+0%", "+1%"),
        ("-5%", "+5%"),
        ("+10%", "+25%"),
        ("+99%", "+150%"),
        (3, 3.5),
    ],
)
def test_higher_growth_scores_higher(lower, higher):
    slow = _tool("Slow", rating=4.2, reviews=80, users=12000, growth=lower)
    fast = _tool("Fast", rating=4.2, reviews=80, users=12000, growth=higher)

    assert calculate_trending_score(fast)["score"] > (
        calculate_trending_score(slow)["score"]
    )
