"""Shared sanitization utilities for MCP layer.

These functions provide input validation and sanitization
for all Prior tools, so bad input is rejected before any network call.
"""

import math
import re
from typing import Any, Dict, List, Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Sanitize and validate string inputs.

    Args:
        value: The value to sanitize.
        field_name: Name of the field for error messages.
        max_length: Maximum allowed string length.
        required: If True, empty strings are rejected.

    Returns:
        Sanitized string ("" for a missing optional value).

    Raises:
        ValueError: If validation fails.
    """
    if value is None:
        if required:
            raise ValueError(f"{field_name} is required")
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    # Remove null bytes and control characters except newlines and tabs
    return _CONTROL_CHARS.sub("", value)


def sanitize_array(
    value: Any, field_name: str, item_max_length: int = 500, max_items: int = 100
) -> List[str]:
    """Sanitize and validate array inputs.

    Args:
        value: The array to sanitize
        field_name: Name of the field for error messages
        item_max_length: Maximum length for each item
        max_items: Maximum number of items allowed

    Returns:
        List of sanitized strings (empty items removed)

    Raises:
        ValueError: If validation fails
    """
    if value is None:
        return []

    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be an array, got {type(value).__name__}")

    if len(value) > max_items:
        raise ValueError(f"{field_name} too many items (max {max_items}, got {len(value)})")

    if any(item is None for item in value):
        raise ValueError(f"{field_name} must not contain null items")

    sanitized = []
    for i, item in enumerate(value):
        sanitized_item = sanitize_string(
            item, f"{field_name}[{i}]", item_max_length, required=False
        )
        if sanitized_item:
            sanitized.append(sanitized_item)

    return sanitized


def validate_enum(
    value: Any,
    field_name: str,
    valid_values: List[str],
    default: Optional[str] = None,
    required: bool = False,
) -> str:
    """Validate enum values.

    Raises:
        ValueError: If the value is missing (and has no default) or not allowed.
    """
    if value is None:
        if required or default is None:
            raise ValueError(f"{field_name} is required")
        return default

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")

    if value not in valid_values:
        raise ValueError(f"{field_name} must be one of {valid_values}, got '{value}'")

    return value


def validate_number(
    value: Any,
    field_name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    default: Optional[float] = None,
) -> Optional[float]:
    """Validate numeric values.

    Returns:
        The validated number, ``default`` when the value is missing (which
        may itself be None for optional fields).

    Raises:
        ValueError: If validation fails
    """
    if value is None:
        return default

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {type(value).__name__}")

    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        raise ValueError(f"{field_name} must be a finite number, got {value}")

    if min_val is not None and value < min_val:
        raise ValueError(f"{field_name} must be >= {min_val}, got {value}")

    if max_val is not None and value > max_val:
        raise ValueError(f"{field_name} must be <= {max_val}, got {value}")

    return value


def sanitize_object(
    value: Any,
    field_name: str,
    string_fields: Optional[Dict[str, int]] = None,
    array_fields: Optional[Dict[str, int]] = None,
    number_fields: Optional[List[str]] = None,
) -> Optional[Dict[str, Any]]:
    """Sanitize a flat nested object with known fields.

    Unknown keys are dropped; empty values are omitted.

    Args:
        value: The object to sanitize.
        field_name: Name of the field for error messages.
        string_fields: Allowed string keys mapped to their max length.
        array_fields: Allowed string-array keys mapped to their max item count.
        number_fields: Allowed non-negative numeric keys.

    Returns:
        The sanitized dict, or None when the value is missing or ends up empty.
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be an object, got {type(value).__name__}")

    sanitized: Dict[str, Any] = {}
    for key, max_length in (string_fields or {}).items():
        text = sanitize_string(value.get(key), f"{field_name}.{key}", max_length, required=False)
        if text:
            sanitized[key] = text
    for key, max_items in (array_fields or {}).items():
        items = sanitize_array(value.get(key), f"{field_name}.{key}", 200, max_items)
        if items:
            sanitized[key] = items
    for key in number_fields or []:
        number = validate_number(value.get(key), f"{field_name}.{key}", 0, None)
        if number is not None:
            sanitized[key] = number

    return sanitized or None
