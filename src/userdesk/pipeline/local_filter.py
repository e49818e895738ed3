"""
Local (client-side) filtering of users by name and company.
"""

from collections.abc import Iterable

from userdesk.core.models import UserRecord


def _matches(value: str | None, needle: str | None) -> bool:
    if not needle:
        return True
    if value is None:
        return False
    return needle.lower() in value.lower()


def filter_users(
    users: Iterable[UserRecord],
    name: str | None = None,
    company: str | None = None,
) -> list[UserRecord]:
    """
    Keep the users whose name and company contain the given substrings.

    Matching is case-insensitive. None or "" means no constraint on that
    field. Order is preserved and the input is not modified, so the function
    is idempotent and safe to call on every keystroke.

    Args:
        users: Users to filter
        name: Substring to look for in the user's name
        company: Substring to look for in the user's company

    Returns:
        New list with the matching users
    """
    return [
        user for user in users
        if _matches(user.name, name) and _matches(user.company, company)
    ]
