"""Integration tests for UserService backed by the SQLite repository."""

import pytest
from argon2 import PasswordHasher

from userhub.domain.exceptions import DuplicateEmailError
from userhub.domain.services import UserService
from userhub.infrastructure.api.schemas import CreateUserRequest, UpdateUserRequest


@pytest.fixture
def user_service(user_repository, clock):
    """UserService using the real repository and Argon2 hashing."""
    return UserService(user_repository, default_role_id=4, clock=clock)


def create_request(email: str = "ada@example.com", **overrides) -> CreateUserRequest:
    data = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": email,
        "password": "secret1",
    }
    data.update(overrides)
    return CreateUserRequest(**data)


@pytest.mark.asyncio
async def test_create_then_fetch(user_service, user_repository):
    created = await user_service.create_user(create_request(email=" Ada@Example.COM ", role_id=1))

    assert created.user_id == 1
    assert created.email == "ada@example.com"
    assert created.role_id == 4

    fetched = await user_service.get_user_by_id(created.user_id)
    assert fetched == created

    stored = await user_repository.get_by_id(created.user_id)
    assert stored.password_hash != "secret1"
    assert PasswordHasher().verify(stored.password_hash, "secret1")


@pytest.mark.asyncio
async def test_duplicate_email_in_other_case_is_rejected(user_service):
    await user_service.create_user(create_request())

    with pytest.raises(DuplicateEmailError):
        await user_service.create_user(create_request(email="ADA@example.com"))

    assert len(await user_service.get_all_users()) == 1


@pytest.mark.asyncio
async def test_update_lifecycle(user_service):
    ada = await user_service.create_user(create_request())
    grace = await user_service.create_user(create_request(email="grace@example.com", first_name="Grace"))

    updated = await user_service.update_user(ada.user_id, UpdateUserRequest(last_name="Byron", team_id=5))
    assert updated.last_name == "Byron"
    assert updated.first_name == "Ada"
    assert updated.team_id == 5
    assert updated.updated_at > ada.updated_at

    with pytest.raises(DuplicateEmailError):
        await user_service.update_user(grace.user_id, UpdateUserRequest(email="ADA@example.com"))

    unchanged = await user_service.get_user_by_id(grace.user_id)
    assert unchanged.email == "grace@example.com"

    same = await user_service.update_user(ada.user_id, UpdateUserRequest(email="Ada@Example.com"))
    assert same.email == "ada@example.com"


@pytest.mark.asyncio
async def test_delete_lifecycle(user_service):
    created = await user_service.create_user(create_request())

    assert await user_service.delete_user(created.user_id) is True
    assert await user_service.get_user_by_id(created.user_id) is None
    assert await user_service.delete_user(created.user_id) is False
    assert await user_service.email_exists("ada@example.com") is False


@pytest.mark.asyncio
async def test_lookups_and_statistics(user_service):
    ada = await user_service.create_user(create_request(team_id=1))
    await user_service.create_user(create_request(email="grace@example.com"))

    by_email = await user_service.get_user_by_email("ADA@EXAMPLE.COM")
    assert by_email.user_id == ada.user_id

    by_role = await user_service.get_users_by_role(4)
    assert len(by_role) == 2

    assert await user_service.email_exists("ada@example.com", exclude_id=ada.user_id) is False

    stats = await user_service.get_user_statistics()
    assert stats.total_users == 2
    assert stats.users_by_role == {4: 2}
    assert stats.users_by_team == {1: 1}
    assert stats.users_without_team == 1
    assert stats.new_users == 2
