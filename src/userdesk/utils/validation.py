"""
Input validation utilities for user directory queries.

Provides reusable validation functions for request-style inputs such as
user ids, age filters, roles and sort options, mirroring the checks the
user directory server applies to query parameters.
"""

import re
from typing import Any

from userdesk.core.models import USER_ROLES

MAX_AGE_FILTER = 150

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


def validate_user_id(user_id: Any, field_name: str = "id") -> str:
    """
    Validate a user id.

    User ids are 24 hexadecimal characters (MongoDB ObjectId format).

    Args:
        user_id: The user id to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated user id (stripped of whitespace)

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_user_id("588935f57546a2daea44de7c")
        '588935f57546a2daea44de7c'
        >>> validate_user_id("wrong")  # doctest: +SKIP
        ValidationError: id wasn't a legal Mongo Object ID
    """
    if not user_id or not isinstance(user_id, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    user_id = user_id.strip()

    if not OBJECT_ID_PATTERN.match(user_id):
        raise ValidationError(f"The requested user {field_name} wasn't a legal Mongo Object ID.")

    return user_id


def validate_age(age: Any, field_name: str = "age", max_age: int = MAX_AGE_FILTER) -> int:
    """
    Validate an age filter.

    Accepts integers or strings holding an integer (as read from a query
    string or the command line).

    Args:
        age: The age value to validate
        field_name: Name of the field (for error messages)
        max_age: Largest accepted age (inclusive)

    Returns:
        The validated age as an int

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_age("37")
        37
        >>> validate_age(151)  # doctest: +SKIP
        ValidationError: age must be between 0 and 150; got 151
    """
    if isinstance(age, bool):
        raise ValidationError(f"{field_name} must be an integer, got bool")

    if isinstance(age, str):
        try:
            age = int(age.strip())
        except ValueError:
            raise ValidationError(f"{field_name} must be an integer, got '{age}'")

    if not isinstance(age, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(age).__name__}")

    if age < 0 or age > max_age:
        raise ValidationError(f"{field_name} must be between 0 and {max_age}; got {age}")

    return age


def validate_role(role: Any, field_name: str = "role") -> str:
    """
    Validate a role filter.

    Args:
        role: The role to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated role

    Raises:
        ValidationError: If the role is not one of admin, editor, viewer

    Examples:
        >>> validate_role("viewer")
        'viewer'
    """
    if role not in USER_ROLES:
        raise ValidationError(f"{field_name} must be one of {', '.join(USER_ROLES)}; got '{role}'")
    return role


def validate_sort_option(value: Any, allowed: tuple[str, ...], field_name: str) -> str:
    """
    Validate a sort key or sort order against the allowed values.

    Examples:
        >>> validate_sort_option("count", ("company", "count"), "sort_by")
        'count'
    """
    if value not in allowed:
        raise ValidationError(f"{field_name} must be one of {', '.join(allowed)}; got '{value}'")
    return value
