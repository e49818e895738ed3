"""
SubmitOutcome model representing the result of submitting a draft user.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class SubmitError(BaseModel):
    """
    Why a submission did not produce a new user.

    Attributes:
        kind: "validation" (rejected locally, no write attempted), "client",
              "server" or "timeout" (the write collaborator failed)
        message: Message to show the operator
        status_code: Status reported by the write collaborator, if any
        field_errors: Per-field messages for validation failures
    """

    kind: Literal["validation", "client", "server", "timeout"]
    message: str
    status_code: int | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)


class SubmitOutcome(BaseModel):
    """
    Result of a submission attempt.

    Attributes:
        success: Whether the user was created
        user_id: Identity of the created user
        error: Failure descriptor, None on success
        status_message: Latest message for the status sink
    """

    success: bool
    user_id: str | None = None
    error: SubmitError | None = None
    status_message: str | None = None

    @model_validator(mode="after")
    def check_consistency(self):
        """Validate that success carries an id and failure carries an error."""
        if self.success and (self.user_id is None or self.error is not None):
            raise ValueError("successful outcome needs a user_id and no error")
        if not self.success and self.error is None:
            raise ValueError("failed outcome needs an error")
        return self

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "success": False,
                "user_id": None,
                "error": {
                    "kind": "server",
                    "message": "Tried to add an illegal new user",
                    "status_code": 400,
                    "field_errors": {}
                },
                "status_message": "Tried to add an illegal new user"
            }
        }
