"""
Grouping of users by company.
"""

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel

from userdesk.core.models import UserRecord
from userdesk.utils.validation import validate_sort_option

SORT_KEYS = ("company", "count")
SORT_ORDERS = ("asc", "desc")


class CompanySummary(BaseModel):
    """
    Users working for one company.

    Attributes:
        company: Company name as spelled by its first user
        count: Number of users
        users: The users, in input order
    """

    company: str
    count: int
    users: tuple[UserRecord, ...] = ()

    class Config:
        frozen = True


def summarize_companies(
    users: Iterable[UserRecord],
    sort_by: Literal["company", "count"] = "company",
    sort_order: Literal["asc", "desc"] = "asc",
) -> list[CompanySummary]:
    """
    Group users by company.

    Companies are compared case-insensitively. Users without a company are
    skipped. Companies with the same count are ordered by name.

    Args:
        users: Users to group
        sort_by: "company" (alphabetical) or "count"
        sort_order: "asc" or "desc"

    Returns:
        One CompanySummary per company

    Raises:
        ValueError: If sort_by or sort_order is not recognised
    """
    validate_sort_option(sort_by, SORT_KEYS, "sort_by")
    validate_sort_option(sort_order, SORT_ORDERS, "sort_order")

    groups: dict[str, list[UserRecord]] = {}
    for user in users:
        if not user.company:
            continue
        groups.setdefault(user.company.lower(), []).append(user)

    summaries = [
        CompanySummary(company=members[0].company, count=len(members), users=tuple(members))
        for members in groups.values()
    ]

    reverse = sort_order == "desc"
    summaries.sort(key=lambda s: s.company.lower())
    if sort_by == "count":
        # Stable sort keeps the name order among equal counts
        summaries.sort(key=lambda s: s.count, reverse=reverse)
    elif reverse:
        summaries.reverse()

    return summaries
