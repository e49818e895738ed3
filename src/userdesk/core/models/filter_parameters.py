"""
FilterParameters model holding the caller-owned filter state.
"""

from pydantic import BaseModel, Field

from .user_record import UserRole


class FilterParameters(BaseModel):
    """
    Filter criteria for the user list.

    Role and age are applied by the data source (remote filtering); name and
    company are applied locally as case-insensitive substring matches. The
    model is frozen: every change produces a new value.

    Attributes:
        role: Exact role to match, or None for any role
        age: Exact age to match, or None for any age
        name: Substring of the user's name, or None/"" for no constraint
        company: Substring of the user's company, or None/"" for no constraint
    """

    role: UserRole | None = None
    age: int | None = Field(None, ge=0)
    name: str | None = None
    company: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "role": "editor",
                "age": 25,
                "name": "jo",
                "company": "ohm"
            }
        }

    @property
    def remote_key(self) -> tuple[str | None, int | None]:
        """The (role, age) pair that drives remote queries."""
        return (self.role, self.age)

    @property
    def has_remote_criteria(self) -> bool:
        return self.role is not None or self.age is not None
