"""
tool_validation.py
------------------

Plausibility checks for catalog data. Used by the admin validation
endpoint and the data quality report script.

A tool can be passed either as a mapping (request payload, snake_case
keys) or as a :class:`app.models.Tool` instance.
"""

import re
from collections.abc import Mapping

DEFAULT_VALIDATION_RULES = {
    "rating": {"min": 1.0, "max": 5.0, "warning_threshold": 4.8},
    "review_count": {"min": 1, "max": 100000, "warning_threshold": 50000},
    "weekly_users": {"min": 100, "max": 2000000, "warning_threshold": 500000},
    "growth": {"min_percent": -50, "max_percent": 200, "warning_threshold": 100},
}

GROWTH_PATTERN = re.compile(r"^([+-]?)(\d+(?:\.\d+)?)%?$")


def _get(tool, key):
    if isinstance(tool, Mapping):
        return tool.get(key)
    return getattr(tool, key, None)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _blank(value):
    return not isinstance(value, str) or not value.strip()


def _check_range(value, label, rule, errors, warnings, fmt="{:,}"):
    if not _is_number(value):
        errors.append(f"{label} must be a number")
        return
    if value < rule["min"] or value > rule["max"]:
        errors.append(
            f"{label} must be between {fmt.format(rule['min'])} and "
            f"{fmt.format(rule['max'])}"
        )
    elif value > rule["warning_threshold"]:
        warnings.append(
            f"{label} {fmt.format(value)} is unusually high. "
            "Consider verifying this value."
        )


def validate_tool_data(tool, rules=None):
    """
    Validate catalog values for plausibility.

    Args:
        tool: Mapping or model exposing rating, review_count, weekly_users,
            growth, name, description, category and website.
        rules (dict): Override of :data:`DEFAULT_VALIDATION_RULES`.

    Returns:
        dict: ``is_valid``, ``errors``, ``warnings`` and ``suggestions``.
    """
    rules = rules or DEFAULT_VALIDATION_RULES
    errors = []
    warnings = []
    suggestions = []

    rating = _get(tool, "rating")
    review_count = _get(tool, "review_count")
    weekly_users = _get(tool, "weekly_users")
    growth = _get(tool, "growth")

    _check_range(rating, "Rating", rules["rating"], errors, warnings, "{}")
    _check_range(
        review_count, "Review count", rules["review_count"], errors, warnings
    )
    _check_range(
        weekly_users, "Weekly users", rules["weekly_users"], errors, warnings
    )

    if isinstance(growth, str):
        match = GROWTH_PATTERN.match(growth)
        if match:
            value = float(match.group(2))
            if match.group(1) == "-":
                value = -value
            growth_rule = rules["growth"]
            if (
                value < growth_rule["min_percent"]
                or value > growth_rule["max_percent"]
            ):
                errors.append(
                    f"Growth must be between {growth_rule['min_percent']}% "
                    f"and {growth_rule['max_percent']}%"
                )
            elif abs(value) > growth_rule["warning_threshold"]:
                warnings.append(
                    f"Growth {growth} is unusually high. "
                    "Consider verifying this value."
                )
        else:
            errors.append('Growth must be in format like "+25%" or "-10%"')
    else:
        errors.append("Growth must be a string")

    if _blank(_get(tool, "name")):
        errors.append("Tool name is required")
    if _blank(_get(tool, "description")):
        errors.append("Tool description is required")
    if _blank(_get(tool, "category")):
        errors.append("Tool category is required")
    website = _get(tool, "website")
    if not isinstance(website, str) or not website.startswith("http"):
        errors.append("Valid website URL is required")

    if _is_number(rating) and 0 < rating < 3.5:
        suggestions.append(
            "Consider if this tool really deserves such a low rating"
        )
    if _is_number(review_count) and 0 < review_count < 10:
        suggestions.append(
            "Very few reviews might indicate a new or unpopular tool"
        )
    if _is_number(weekly_users) and 0 < weekly_users < 1000:
        suggestions.append("Low user count might indicate a niche or new tool")

    if rating == 4.2 and review_count == 189 and weekly_users == 150000:
        warnings.append(
            "This data pattern matches known mock data. "
            "Please verify all values."
        )
    if rating == 4.2 and review_count == 189:
        warnings.append(
            "Rating 4.2 with exactly 189 reviews is suspicious. Please verify."
        )
    if weekly_users == 150000:
        warnings.append(
            "Weekly users of exactly 150,000 is suspicious. Please verify."
        )

    return {
        "is_valid": not errors,
        "errors": errors,
        "warnings": warnings,
        "suggestions": suggestions,
    }


def is_mock_data(tool):
    """True when the tool's values match known placeholder data."""
    rating = _get(tool, "rating")
    review_count = _get(tool, "review_count")
    weekly_users = _get(tool, "weekly_users")
    growth = _get(tool, "growth")
    patterns = [
        rating == 4.2 and review_count == 189,
        weekly_users in (150000, 100000, 50000),
        growth in ("28%", "+28%"),
        review_count in (100, 500),
        rating in (4.0, 4.5, 5.0),
    ]
    return any(patterns)


def summarize_catalog(tools, rules=None):
    """
    Run :func:`validate_tool_data` over ``tools``.

    Returns:
        dict: ``tools_checked``, ``invalid_tools``, ``warnings``,
        ``mock_data_tools`` and per-tool ``reports`` for the tools with
        errors or warnings.
    """
    summary = {
        "tools_checked": 0,
        "invalid_tools": 0,
        "warnings": 0,
        "mock_data_tools": 0,
        "reports": [],
    }
    for tool in tools:
        report = validate_tool_data(tool, rules)
        mock = is_mock_data(tool)
        summary["tools_checked"] += 1
        summary["warnings"] += len(report["warnings"])
        if not report["is_valid"]:
            summary["invalid_tools"] += 1
        if mock:
            summary["mock_data_tools"] += 1
        if report["errors"] or report["warnings"]:
            summary["reports"].append(
                dict(
                    report,
                    id=_get(tool, "id"),
                    name=_get(tool, "name"),
                    is_mock_data=mock,
                )
            )
    return summary
