"""
Exceptions raised by user directory collaborators.

Data sources and write collaborators raise these; the remote query stage and
the submission controller catch them at the boundary and turn them into
QueryError / SubmitError values.
"""


class UserDeskError(Exception):
    """Base class for user directory errors."""


class DataSourceError(UserDeskError):
    """Raised when a data source or write collaborator call fails."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ClientConnectivityError(DataSourceError):
    """The call never reached the server (no network, DNS failure, refused connection)."""


class ServerRejectionError(DataSourceError):
    """The server answered with a failure status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"
