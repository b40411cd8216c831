"""
Tests for the In-Memory User Directory.
"""

import pytest

from otp_auth.infrastructure.adapters.users import InMemoryUserDirectory
from otp_auth.infrastructure.ports.users import UserData


@pytest.fixture
def users():
    return InMemoryUserDirectory(
        [
            UserData(user_id="u1", email="Jane@Example.com", phone_number="+30 691 234 5678"),
            UserData(user_id="u2", email="bob@example.com"),
        ]
    )


@pytest.mark.asyncio
async def test_lookup_by_email_is_normalized(users):
    user = await users.get_user_by_email("  JANE@example.com")
    assert user.user_id == "u1"
    assert await users.get_user_by_email("nobody@example.com") is None


@pytest.mark.asyncio
async def test_lookup_by_phone_is_normalized(users):
    user = await users.get_user_by_phone("+306912345678")
    assert user.user_id == "u1"
    assert await users.get_user_by_phone("+306900000000") is None


@pytest.mark.asyncio
async def test_set_password(users):
    await users.set_password("u2", "hunter2")

    assert users.check_password("u2", "hunter2")
    assert not users.check_password("u2", "hunter3")
    assert not users.check_password("u1", "hunter2")


@pytest.mark.asyncio
async def test_set_password_unknown_user(users):
    with pytest.raises(KeyError):
        await users.set_password("ghost", "pw")


def test_clear(users):
    users.clear()
    assert users._users == {}
