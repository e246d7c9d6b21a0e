"""
Tests for the catalog search filters and relevance scores.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.models.catalog import Tool
from app.services.search import (
    advanced_relevance,
    apply_advanced_filters,
    apply_basic_filters,
    apply_text_match,
    basic_relevance,
)
from tests.conftest import make_tool


@pytest.fixture
def catalog(app):
    return {
        "writer": make_tool(
            integrations=["Slack"], languages=["French"], ai_models=["GPT-4"]
        ),
        "painter": make_tool(
            name="Painter",
            description="Image generation",
            category="Image",
            pricing="Paid",
            rating=3.9,
            weekly_users=900,
            growth="+5%",
            tags=["art"],
            features=["Upscaling"],
        ),
        "coder": make_tool(
            name="Coder",
            description="Pair programmer",
            category="Code",
            rating=4.8,
            weekly_users=2_000_000,
            growth="+120%",
            tags=["code"],
            features=["Autocomplete"],
            ai_models=["Claude"],
        ),
    }


def _names(query):
    return sorted(tool.name for tool in query.all())


class TestBasicFilters:
    def test_name_query(self, catalog):
        assert _names(apply_basic_filters(Tool.query, q="writ")) == ["Writer Pro"]

    def test_blank_filters_are_ignored(self, catalog):
        query = apply_basic_filters(Tool.query, q="  ", category="", rating="abc")
        assert len(query.all()) == 3

    def test_category_pricing_rating(self, catalog):
        assert _names(apply_basic_filters(Tool.query, category="Image")) == [
            "Painter"
        ]
        assert _names(apply_basic_filters(Tool.query, pricing="Paid")) == [
            "Painter"
        ]
        assert _names(apply_basic_filters(Tool.query, rating="4.5")) == [
            "Coder",
            "Writer Pro",
        ]

    def test_minimum_weekly_users(self, catalog):
        assert _names(apply_basic_filters(Tool.query, weekly_users="1000000")) == [
            "Coder"
        ]

    def test_json_list_filters(self, catalog):
        assert _names(apply_basic_filters(Tool.query, integration="slack")) == [
            "Writer Pro"
        ]
        assert _names(apply_basic_filters(Tool.query, language="French")) == [
            "Writer Pro"
        ]
        assert _names(apply_basic_filters(Tool.query, ai_model="claude")) == [
            "Coder"
        ]


class TestAdvancedFilters:
    def test_text_match_covers_description_and_tags(self, catalog):
        assert _names(apply_text_match(Tool.query, "generation")) == ["Painter"]
        assert _names(apply_text_match(Tool.query, "art")) == ["Painter"]

    def test_category_list_and_minimums(self, catalog):
        query = apply_advanced_filters(
            Tool.query, {"category": ["Code", "Image"], "rating": 4}
        )
        assert _names(query) == ["Coder"]
        query = apply_advanced_filters(Tool.query, {"popularity": 10000})
        assert _names(query) == ["Coder", "Writer Pro"]

    def test_price_all_disables_filter(self, catalog):
        assert len(apply_advanced_filters(Tool.query, {"price": "all"}).all()) == 3
        assert _names(apply_advanced_filters(Tool.query, {"price": "Paid"})) == [
            "Painter"
        ]

    def test_features_any_overlap(self, catalog):
        query = apply_advanced_filters(
            Tool.query, {"features": ["Upscaling", "Autocomplete"]}
        )
        assert _names(query) == ["Coder", "Painter"]

    def test_date_range(self, catalog):
        future = datetime.now(timezone.utc) + timedelta(days=60)
        assert apply_advanced_filters(
            Tool.query, {"date_range": "month"}, now=future
        ).all() == []
        assert (
            len(apply_advanced_filters(Tool.query, {"date_range": "year"}).all())
            == 3
        )


def test_basic_relevance():
    tool = SimpleNamespace(name="Writer Pro", rating=4.6, weekly_users=150000)
    assert basic_relevance(tool, "writer") == 10 + 5 + 3
    assert basic_relevance(tool) == 8

    modest = SimpleNamespace(name="Other", rating=4.1, weekly_users=20000)
    assert basic_relevance(modest, "writer") == 3 + 2


def test_advanced_relevance_is_capped():
    tool = SimpleNamespace(
        name="Art Studio",
        description="Art generation",
        category="Art",
        tags=["art"],
        weekly_users=1_000_000,
        rating=5,
    )
    assert advanced_relevance(tool, "art") == 1.0

    plain = SimpleNamespace(
        name="Coder",
        description="",
        category="Code",
        tags=[],
        weekly_users=0,
        rating=0,
    )
    assert advanced_relevance(plain, "cod") == pytest.approx(0.6)
