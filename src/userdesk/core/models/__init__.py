"""
Core data models for the user directory.

All models use Pydantic for runtime validation and type safety.
"""

from .filter_parameters import FilterParameters
from .query_result import QueryError, QueryResult
from .submit_outcome import SubmitError, SubmitOutcome
from .user_record import USER_ROLES, UserRecord, UserRole
from .validation_outcome import ValidationOutcome

__all__ = [
    "USER_ROLES",
    "UserRole",
    "UserRecord",
    "FilterParameters",
    "QueryError",
    "QueryResult",
    "ValidationOutcome",
    "SubmitError",
    "SubmitOutcome",
]
