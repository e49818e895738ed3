"""
UserRecord model representing a single user as stored by the user directory.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

UserRole = Literal["admin", "editor", "viewer"]

USER_ROLES: tuple[str, ...] = ("admin", "editor", "viewer")


class UserRecord(BaseModel):
    """
    A user record. Drafts that have not been persisted yet have no id.

    The model is strict: no type coercion, unknown fields are rejected and
    the role must be one of the closed role set. Validating a payload against
    this model is the structural schema check that runs before every write.

    Attributes:
        id: Opaque identifier assigned on persistence (wire name "_id")
        name: Display name
        age: Age in years (unsigned 8-bit range)
        company: Employer, optional at the schema level
        email: Contact address
        role: One of "admin", "editor", "viewer"
        avatar: Optional avatar URL
    """

    id: str | None = Field(None, alias="_id")
    name: str
    age: int = Field(..., ge=0, le=255)
    company: str | None = None
    email: str
    role: UserRole
    avatar: str | None = None

    class Config:
        strict = True
        extra = "forbid"
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "_id": "588935f57546a2daea44de7c",
                "name": "Connie Stewart",
                "age": 25,
                "company": "OHMNET",
                "email": "conniestewart@ohmnet.com",
                "role": "viewer",
                "avatar": "https://gravatar.com/avatar/8c9616d6cc5de638ea6920fb5d65fc6c?d=identicon"
            }
        }

    def to_wire(self) -> dict[str, Any]:
        """Return the record as the wire-format mapping (``_id`` key, no null fields)."""
        return self.model_dump(by_alias=True, exclude_none=True)
