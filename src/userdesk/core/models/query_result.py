"""
QueryResult model representing the outcome of one remote user query (ephemeral).
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .user_record import UserRecord


class QueryError(BaseModel):
    """
    Describes why a remote query failed.

    Attributes:
        kind: "client" (the request never reached the server), "server"
              (the server answered with a failure or an unusable payload)
              or "timeout" (no answer within the configured bound)
        message: Human-readable description
        status_code: HTTP-style status for server errors, if known
    """

    kind: Literal["client", "server", "timeout"]
    message: str
    status_code: int | None = None

    def describe(self) -> str:
        """Render the message shown to the operator."""
        if self.kind == "client":
            return f"Problem in the client - Error: {self.message}"
        if self.kind == "timeout":
            return f"Timed out contacting the server - Error: {self.message}"
        return (
            f"Problem contacting the server - Error Code: {self.status_code}\n"
            f"Message: {self.message}"
        )


class QueryResult(BaseModel):
    """
    Outcome of a remote query: either a sequence of users or an error, never both.

    An error result always carries an empty user sequence so that downstream
    filtering keeps working after a failure.

    Attributes:
        users: Users returned by the data source
        error: Failure descriptor, None on success
    """

    users: tuple[UserRecord, ...] = ()
    error: QueryError | None = None

    @field_validator('error')
    @classmethod
    def check_exclusive(cls, v, info):
        """Validate that an error result carries no users."""
        if v is not None and info.data.get('users'):
            raise ValueError("QueryResult cannot carry both users and an error")
        return v

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, users) -> "QueryResult":
        return cls(users=tuple(users))

    @classmethod
    def failure(cls, error: QueryError) -> "QueryResult":
        return cls(users=(), error=error)
