"""
Pytest configuration and fixtures for userdesk tests

This module provides shared fixtures and fake collaborators for unit and
integration tests.
"""
import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from userdesk.core.models import UserRecord
from userdesk.sources import InMemoryUserStore
from userdesk.sources.base import UserDataSource, UserWriter


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that exercise a single component"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that run the pipeline or CLI end to end"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SAMPLE DATA
# =======================

SAMPLE_USERS = [
    {
        "_id": "588935f57546a2daea44de7c",
        "name": "Connie Stewart",
        "age": 25,
        "company": "OHMNET",
        "email": "conniestewart@ohmnet.com",
        "role": "viewer",
    },
    {
        "_id": "588935f5597fe2bd8f4f4b75",
        "name": "Joann Ware",
        "age": 25,
        "company": "Xurban",
        "email": "joannware@xurban.com",
        "role": "editor",
    },
    {
        "_id": "588935f5c668650dc77df581",
        "name": "Pat Wood",
        "age": 20,
        "company": "Ohmnet",
        "email": "patwood@ohmnet.com",
        "role": "editor",
    },
    {
        "_id": "588935f5c668650dc77df582",
        "name": "Jo Blake",
        "age": 25,
        "company": "Acme",
        "email": "jo@acme.com",
        "role": "editor",
    },
    {
        "_id": "588935f5c668650dc77df583",
        "name": "Lynn Ferguson",
        "age": 37,
        "email": "lynn@example.com",
        "role": "admin",
    },
]


def make_user(**overrides) -> UserRecord:
    """Build a valid UserRecord, overriding selected fields."""
    data = {
        "name": "John Smith",
        "age": 25,
        "company": "Acme",
        "email": "user@example.com",
        "role": "editor",
    }
    data.update(overrides)
    return UserRecord(**data)


@pytest.fixture(scope="function")
def sample_users() -> list[UserRecord]:
    """Users as returned by the user directory server"""
    return [UserRecord.model_validate(u) for u in SAMPLE_USERS]


@pytest.fixture(scope="function")
def user_store(sample_users) -> InMemoryUserStore:
    """In-memory store seeded with the sample users"""
    return InMemoryUserStore(sample_users)


@pytest.fixture(scope="function")
def users_file(tmp_path) -> str:
    """
    JSON file holding the sample users

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the file
    """
    path = tmp_path / "users.json"
    path.write_text(json.dumps(SAMPLE_USERS))
    return str(path)


@pytest.fixture(scope="function")
def valid_draft() -> dict:
    """Draft that passes every default field rule"""
    return {
        "name": "John Smith",
        "age": 25,
        "email": "user@example.com",
        "role": "editor",
        "company": "Acme",
    }


# =======================
# FAKE COLLABORATORS
# =======================

@dataclass
class PendingCall:
    role: str | None
    age: int | None
    future: asyncio.Future = field(repr=False)


class ControlledDataSource(UserDataSource):
    """
    Data source whose calls stay pending until the test resolves them

    Lets a test decide the order in which in-flight queries complete.
    """

    def __init__(self):
        self.calls: list[PendingCall] = []

    async def fetch_users(self, role=None, age=None):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(PendingCall(role, age, future))
        return await future

    def resolve(self, index: int, users: Sequence) -> None:
        self.calls[index].future.set_result(list(users))

    def fail(self, index: int, error: Exception) -> None:
        self.calls[index].future.set_exception(error)


class LatencyDataSource(UserDataSource):
    """
    Data source answering from a fixed user list after a per-call delay

    Args:
        users: Users to filter
        delays: Delay in seconds for each successive call
    """

    def __init__(self, users: Sequence[UserRecord], delays: Sequence[float]):
        self.users = list(users)
        self.delays = list(delays)
        self.call_count = 0

    async def fetch_users(self, role=None, age=None):
        delay = self.delays[self.call_count % len(self.delays)] if self.delays else 0.0
        self.call_count += 1
        await asyncio.sleep(delay)
        return [
            u for u in self.users
            if (role is None or u.role == role) and (age is None or u.age == age)
        ]


class RecordingWriter(UserWriter):
    """Write collaborator that remembers what it was asked to store"""

    def __init__(self, error: Exception | None = None, delay: float = 0.0):
        self.error = error
        self.delay = delay
        self.received: list[UserRecord] = []

    async def create_user(self, user):
        self.received.append(user)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return "5f0c1d2e3a4b5c6d7e8f9a0b"


@pytest.fixture(scope="function")
def controlled_source() -> ControlledDataSource:
    return ControlledDataSource()
