"""Focused tests for MCP argument sanitization helpers."""

import math

import pytest

from prior_mcp.mcp.sanitize import (
    sanitize_array,
    sanitize_object,
    sanitize_string,
    validate_enum,
    validate_number,
)


def test_sanitize_string_required_and_empty():
    with pytest.raises(ValueError, match="query is required"):
        sanitize_string(None, "query")
    with pytest.raises(ValueError, match="query cannot be empty"):
        sanitize_string("   ", "query")
    assert sanitize_string(None, "notes", required=False) == ""


def test_sanitize_string_strips_control_chars_keeps_newlines():
    assert sanitize_string("a\x00b\tc\nd\x7f", "field") == "ab\tc\nd"


def test_sanitize_string_type_and_length():
    with pytest.raises(ValueError, match="must be a string"):
        sanitize_string(5, "title")
    with pytest.raises(ValueError, match="too long"):
        sanitize_string("abcd", "title", max_length=3)


def test_sanitize_array_none_returns_empty():
    """None input is coerced to an empty array."""
    assert sanitize_array(None, "tags") == []


def test_sanitize_array_requires_array_and_enforces_limits():
    with pytest.raises(ValueError, match="must be an array"):
        sanitize_array("not-a-list", "tags")

    with pytest.raises(ValueError, match="too many items"):
        sanitize_array(["one", "two", "three"], "tags", max_items=2)

    with pytest.raises(ValueError, match="must not contain null items"):
        sanitize_array(["ok", None], "tags")


def test_sanitize_array_item_constraints():
    """Item-level checks for max length and empty-item filtering are enforced."""
    assert sanitize_array(["", "valid", "a\x00b", "", "x"], "items", item_max_length=5) == [
        "valid",
        "ab",
        "x",
    ]

    with pytest.raises(ValueError, match=r"items\[1\] must be a string"):
        sanitize_array(["ok", 7], "items")


def test_validate_enum():
    assert validate_enum("useful", "outcome", ["useful", "irrelevant"]) == "useful"
    assert validate_enum(None, "ttl", ["30d"], default="30d") == "30d"
    with pytest.raises(ValueError, match="must be one of"):
        validate_enum("great", "outcome", ["useful", "irrelevant"])
    with pytest.raises(ValueError, match="outcome is required"):
        validate_enum(None, "outcome", ["useful"], required=True)


@pytest.mark.parametrize("value", [True, "3", [1]])
def test_validate_number_rejects_non_numbers(value):
    with pytest.raises(ValueError, match="must be a number"):
        validate_number(value, "maxResults")


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_validate_number_rejects_non_finite(value):
    with pytest.raises(ValueError, match="finite"):
        validate_number(value, "minQuality")


def test_validate_number_bounds_and_default():
    assert validate_number(None, "maxResults", 1, 10) is None
    assert validate_number(None, "maxResults", 1, 10, default=3) == 3
    assert validate_number(0.5, "minQuality", 0.0, 1.0) == 0.5
    with pytest.raises(ValueError, match=">= 1"):
        validate_number(0, "maxResults", 1, 10)
    with pytest.raises(ValueError, match="<= 10"):
        validate_number(11, "maxResults", 1, 10)


def test_sanitize_object_keeps_known_fields_only():
    result = sanitize_object(
        {"runtime": "python", "tools": ["pytest", ""], "extra": "dropped", "tokens": 12},
        "context",
        string_fields={"runtime": 100},
        array_fields={"tools": 5},
        number_fields=["tokens"],
    )
    assert result == {"runtime": "python", "tools": ["pytest"], "tokens": 12}


def test_sanitize_object_empty_becomes_none():
    assert sanitize_object(None, "context") is None
    assert sanitize_object({"runtime": ""}, "context", string_fields={"runtime": 10}) is None


def test_sanitize_object_errors():
    with pytest.raises(ValueError, match="context must be an object"):
        sanitize_object(["x"], "context")
    with pytest.raises(ValueError, match="effort.tokensUsed must be >= 0"):
        sanitize_object({"tokensUsed": -1}, "effort", number_fields=["tokensUsed"])
