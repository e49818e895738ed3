"""
In-memory user store implementing both collaborator contracts.

Follows the user directory server's behaviour (filtering, id and avatar
generation, rejection of illegal users) without any persistence. Used by
the CLI and by tests.
"""

import asyncio
import hashlib
import json
import re
import secrets
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as SchemaValidationError

from userdesk.core.errors import ServerRejectionError
from userdesk.core.models import USER_ROLES, UserRecord
from userdesk.core.validators import EMAIL_PATTERN
from userdesk.observability.logger import get_logger
from userdesk.utils.validation import ValidationError, validate_age, validate_role, validate_user_id

from .base import UserDataSource, UserWriter

logger = get_logger(__name__)

ILLEGAL_USER_MESSAGE = "Tried to add an illegal new user"
USER_NOT_FOUND_MESSAGE = "The requested user was not found"

_EMAIL_RE = re.compile(EMAIL_PATTERN)


def gravatar_url(email: str) -> str:
    """Avatar URL derived from the email address."""
    digest = hashlib.md5(email.encode("utf-8")).hexdigest()
    return f"https://gravatar.com/avatar/{digest}?d=identicon"


class InMemoryUserStore(UserDataSource, UserWriter):
    """
    Dictionary-backed user store.

    Args:
        users: Initial users; users without an id get one assigned
        require_company: Reject new users without a company
        latency: Seconds to wait before answering each call
    """

    def __init__(
        self,
        users: Iterable[UserRecord] = (),
        require_company: bool = True,
        latency: float = 0.0,
    ):
        self.require_company = require_company
        self.latency = latency
        self._users: dict[str, UserRecord] = {}
        for user in users:
            user_id = user.id or self._new_id()
            self._users[user_id] = user.model_copy(update={"id": user_id})

    @classmethod
    def from_json_file(cls, path: str | Path, **kwargs) -> "InMemoryUserStore":
        """
        Load users from a JSON array of wire-format user objects.

        Raises:
            ValueError: If the file is not a JSON array of valid users
        """
        with open(path) as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array of users")

        users = []
        for idx, item in enumerate(data):
            try:
                users.append(UserRecord.model_validate(item))
            except SchemaValidationError as e:
                raise ValueError(f"User at index {idx} in {path} is invalid: {e}")

        return cls(users, **kwargs)

    def __len__(self) -> int:
        return len(self._users)

    @property
    def users(self) -> list[UserRecord]:
        return list(self._users.values())

    async def fetch_users(
        self,
        role: str | None = None,
        age: int | None = None,
        company: str | None = None,
    ) -> list[UserRecord]:
        """
        Users with exactly this role and age, and a case-insensitive company match.

        Raises:
            ServerRejectionError: 400 for an out-of-range age or unknown role
        """
        await self._wait()

        try:
            if age is not None:
                age = validate_age(age)
            if role is not None:
                role = validate_role(role)
        except ValidationError as e:
            raise ServerRejectionError(400, str(e))

        matches = []
        for user in self._users.values():
            if role is not None and user.role != role:
                continue
            if age is not None and user.age != age:
                continue
            if company is not None and (user.company or "").lower() != company.lower():
                continue
            matches.append(user)

        logger.debug(f"Fetched {len(matches)} users (role={role}, age={age}, company={company})")
        return matches

    async def get_user(self, user_id: str) -> UserRecord:
        """
        Look up one user.

        Raises:
            ServerRejectionError: 400 for a malformed id, 404 for an unknown one
        """
        await self._wait()

        try:
            user_id = validate_user_id(user_id)
        except ValidationError as e:
            raise ServerRejectionError(400, str(e))

        user = self._users.get(user_id)
        if user is None:
            raise ServerRejectionError(404, USER_NOT_FOUND_MESSAGE)
        return user

    async def create_user(self, user: UserRecord) -> str:
        """
        Store a new user, assigning an id and an avatar.

        Raises:
            ServerRejectionError: 400 if the user is illegal
        """
        await self._wait()

        if not self._is_legal(user):
            logger.info(f"Rejected illegal new user '{user.name}'")
            raise ServerRejectionError(400, ILLEGAL_USER_MESSAGE)

        user_id = self._new_id()
        self._users[user_id] = user.model_copy(
            update={"id": user_id, "avatar": user.avatar or gravatar_url(user.email)}
        )
        logger.info(f"Added user '{user.name}'", extra={"user_id": user_id})
        return user_id

    def _is_legal(self, user: UserRecord) -> bool:
        if not user.name.strip():
            return False
        if not 0 < user.age < 150:
            return False
        if user.role not in USER_ROLES:
            return False
        if not _EMAIL_RE.match(user.email):
            return False
        if self.require_company and not (user.company or "").strip():
            return False
        return True

    def _new_id(self) -> str:
        user_id = secrets.token_hex(12)
        while user_id in self._users:
            user_id = secrets.token_hex(12)
        return user_id

    async def _wait(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
