"""Integration tests for SQLAlchemyUserRepository against SQLite."""

from datetime import datetime, timezone

import pytest

from userhub.domain.entities.user import User
from userhub.domain.exceptions import DuplicateEmailError, PersistenceError
from userhub.infrastructure.persistence.repositories import SQLAlchemyUserRepository

CREATED = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def new_user(email: str, role_id: int = 4, team_id: int | None = None) -> User:
    return User(
        first_name="Ada",
        last_name="Lovelace",
        email=email,
        password_hash="$argon2id$hash",
        role_id=role_id,
        team_id=team_id,
        created_at=CREATED,
        updated_at=CREATED,
        last_credential_issued_at=CREATED,
    )


@pytest.mark.asyncio
async def test_add_assigns_id_and_round_trips(user_repository):
    created = await user_repository.add(new_user("ada@example.com", team_id=3))
    await user_repository.commit()

    assert created.user_id is not None

    loaded = await user_repository.get_by_id(created.user_id)
    assert loaded.email == "ada@example.com"
    assert loaded.team_id == 3
    assert loaded.password_hash == "$argon2id$hash"
    assert loaded.created_at == CREATED
    assert loaded.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_get_by_id_missing_returns_none(user_repository):
    assert await user_repository.get_by_id(404) is None


@pytest.mark.asyncio
async def test_get_all_ordered_by_id(user_repository):
    first = await user_repository.add(new_user("a@example.com"))
    second = await user_repository.add(new_user("b@example.com"))
    await user_repository.commit()

    users = await user_repository.get_all()

    assert [u.user_id for u in users] == [first.user_id, second.user_id]


@pytest.mark.asyncio
async def test_find_matching_and_first_matching(user_repository):
    await user_repository.add(new_user("a@example.com", role_id=4))
    await user_repository.add(new_user("b@example.com", role_id=2))
    await user_repository.add(new_user("c@example.com", role_id=4))
    await user_repository.commit()

    admins = await user_repository.find_matching(lambda u: u.role_id == 4)
    first_admin = await user_repository.first_matching(lambda u: u.role_id == 4)
    nobody = await user_repository.first_matching(lambda u: u.role_id == 9)

    assert [u.email for u in admins] == ["a@example.com", "c@example.com"]
    assert first_admin.email == "a@example.com"
    assert nobody is None


@pytest.mark.asyncio
async def test_find_by_email_ignores_case(user_repository):
    await user_repository.add(new_user("ada@example.com"))
    await user_repository.commit()

    assert (await user_repository.find_by_email("ADA@Example.com")).email == "ada@example.com"
    assert await user_repository.find_by_email("grace@example.com") is None


@pytest.mark.asyncio
async def test_update_persists_changes(user_repository):
    created = await user_repository.add(new_user("ada@example.com"))
    await user_repository.commit()

    created.first_name = "Grace"
    created.role_id = 2
    await user_repository.update(created)
    await user_repository.commit()

    loaded = await user_repository.get_by_id(created.user_id)
    assert loaded.first_name == "Grace"
    assert loaded.role_id == 2


@pytest.mark.asyncio
async def test_remove_deletes_row(user_repository):
    created = await user_repository.add(new_user("ada@example.com"))
    await user_repository.commit()

    await user_repository.remove(created)
    await user_repository.commit()

    assert await user_repository.get_by_id(created.user_id) is None
    assert await user_repository.get_all() == []


@pytest.mark.asyncio
async def test_update_unknown_user_raises(user_repository):
    ghost = new_user("ghost@example.com")
    ghost.user_id = 77

    with pytest.raises(PersistenceError):
        await user_repository.update(ghost)


@pytest.mark.asyncio
async def test_unique_constraint_maps_to_duplicate_email(user_repository):
    await user_repository.add(new_user("ada@example.com"))
    await user_repository.commit()

    with pytest.raises(DuplicateEmailError) as exc_info:
        await user_repository.add(new_user("ada@example.com"))

    assert exc_info.value.email == "ada@example.com"
    assert len(await user_repository.get_all()) == 1


@pytest.mark.asyncio
async def test_second_session_hits_unique_constraint(session_factory):
    async with session_factory() as session:
        first = SQLAlchemyUserRepository(session)
        await first.add(new_user("ada@example.com"))
        await first.commit()

    # A writer that skipped or lost the email check is still rejected
    async with session_factory() as session:
        second = SQLAlchemyUserRepository(session)
        with pytest.raises(DuplicateEmailError):
            await second.add(new_user("ada@example.com"))
            await second.commit()
