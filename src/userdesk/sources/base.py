"""
Collaborator contracts consumed by the filtering pipeline and the submission controller.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from userdesk.core.models import UserRecord


class UserDataSource(ABC):
    """
    Supplies users filtered by role and/or age.

    Implementations may be called repeatedly with different parameters and
    need not resolve calls in order; the pipeline drops stale results.
    Failures are reported by raising ClientConnectivityError or
    ServerRejectionError.
    """

    @abstractmethod
    async def fetch_users(
        self,
        role: str | None = None,
        age: int | None = None,
    ) -> Sequence[UserRecord | Mapping[str, Any]]:
        """
        Return the users matching role and age (None means no constraint).

        Raw mappings are accepted and checked against the UserRecord schema
        by the caller.
        """
        pass


class UserWriter(ABC):
    """Persists new users."""

    @abstractmethod
    async def create_user(self, user: UserRecord) -> str:
        """
        Store a new user and return its identity.

        Raises:
            ServerRejectionError: If the user is rejected
            ClientConnectivityError: If the store cannot be reached
        """
        pass
