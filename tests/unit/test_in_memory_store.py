"""
Unit tests for the in-memory user store.
"""

import hashlib
import json
import re

import pytest

from userdesk.core.errors import ServerRejectionError
from userdesk.sources import ILLEGAL_USER_MESSAGE, InMemoryUserStore, gravatar_url
from userdesk.sources.in_memory import USER_NOT_FOUND_MESSAGE

from conftest import make_user


class TestFetchUsers:
    """Tests for InMemoryUserStore.fetch_users"""

    @pytest.mark.asyncio
    async def test_no_criteria_returns_everyone(self, user_store):
        assert len(await user_store.fetch_users()) == 5

    @pytest.mark.asyncio
    async def test_role_and_age_exact(self, user_store):
        users = await user_store.fetch_users(role="editor", age=25)
        assert sorted(u.name for u in users) == ["Jo Blake", "Joann Ware"]

    @pytest.mark.asyncio
    async def test_age_as_string(self, user_store):
        users = await user_store.fetch_users(age="20")
        assert [u.name for u in users] == ["Pat Wood"]

    @pytest.mark.asyncio
    async def test_company_exact_case_insensitive(self, user_store):
        users = await user_store.fetch_users(company="ohmnet")
        assert sorted(u.name for u in users) == ["Connie Stewart", "Pat Wood"]
        assert await user_store.fetch_users(company="ohm") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{"age": 151}, {"age": -1}, {"age": "abc"}, {"role": "owner"}])
    async def test_bad_criteria_rejected(self, user_store, kwargs):
        with pytest.raises(ServerRejectionError) as exc_info:
            await user_store.fetch_users(**kwargs)
        assert exc_info.value.status_code == 400


class TestGetUser:
    """Tests for InMemoryUserStore.get_user"""

    @pytest.mark.asyncio
    async def test_existing_user(self, user_store):
        user = await user_store.get_user("588935f57546a2daea44de7c")
        assert user.name == "Connie Stewart"

    @pytest.mark.asyncio
    async def test_malformed_id(self, user_store):
        with pytest.raises(ServerRejectionError) as exc_info:
            await user_store.get_user("wrong")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "The requested user id wasn't a legal Mongo Object ID."

    @pytest.mark.asyncio
    async def test_unknown_id(self, user_store):
        with pytest.raises(ServerRejectionError) as exc_info:
            await user_store.get_user("000000000000000000000000")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == USER_NOT_FOUND_MESSAGE
        assert str(exc_info.value) == "[404] The requested user was not found"


class TestCreateUser:
    """Tests for InMemoryUserStore.create_user"""

    @pytest.mark.asyncio
    async def test_assigns_id_and_avatar(self, user_store):
        user_id = await user_store.create_user(make_user(email="new@example.com"))

        assert re.fullmatch(r"[0-9a-f]{24}", user_id)
        assert len(user_store) == 6

        stored = await user_store.get_user(user_id)
        assert stored.id == user_id
        assert stored.avatar == gravatar_url("new@example.com")

    @pytest.mark.asyncio
    async def test_keeps_given_avatar(self, user_store):
        user_id = await user_store.create_user(make_user(avatar="https://example.com/me.png"))
        assert (await user_store.get_user(user_id)).avatar == "https://example.com/me.png"

    @pytest.mark.asyncio
    async def test_does_not_modify_argument(self, user_store):
        user = make_user()
        await user_store.create_user(user)
        assert user.id is None
        assert user.avatar is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"company": None},
        {"company": "  "},
        {"name": " "},
        {"age": 0},
        {"age": 150},
        {"email": "plainstring"},
    ])
    async def test_illegal_user_rejected(self, user_store, overrides):
        with pytest.raises(ServerRejectionError) as exc_info:
            await user_store.create_user(make_user(**overrides))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == ILLEGAL_USER_MESSAGE
        assert len(user_store) == 5

    @pytest.mark.asyncio
    async def test_company_optional_when_not_required(self):
        store = InMemoryUserStore(require_company=False)
        await store.create_user(make_user(company=None))
        assert len(store) == 1


class TestConstruction:
    """Tests for store construction helpers"""

    def test_users_without_id_get_one(self):
        store = InMemoryUserStore([make_user(), make_user()])
        assert len(store) == 2
        assert all(re.fullmatch(r"[0-9a-f]{24}", u.id) for u in store.users)

    def test_from_json_file(self, users_file):
        store = InMemoryUserStore.from_json_file(users_file, latency=0.01)
        assert len(store) == 5
        assert store.latency == 0.01

    def test_from_json_file_not_a_list(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps({"users": []}))
        with pytest.raises(ValueError, match="JSON array"):
            InMemoryUserStore.from_json_file(path)

    def test_from_json_file_invalid_user(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"name": "Pat"}]))
        with pytest.raises(ValueError, match="index 0"):
            InMemoryUserStore.from_json_file(path)

    def test_gravatar_url(self):
        digest = hashlib.md5(b"pat@example.com").hexdigest()
        assert gravatar_url("pat@example.com") == f"https://gravatar.com/avatar/{digest}?d=identicon"
