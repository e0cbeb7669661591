"""Unit tests for the user mapping functions."""

from datetime import datetime, timezone

import pytest

from userhub.domain.entities.user import User
from userhub.domain.exceptions import MappingError
from userhub.domain.services.user_mapper import create_request_to_entity, entity_to_dto
from userhub.infrastructure.api.schemas import CreateUserRequest


class TestEntityToDto:
    """Tests for entity_to_dto."""

    def test_maps_public_fields(self):
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        user = User(
            user_id=3,
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            password_hash="$argon2id$secret",
            role_id=4,
            team_id=9,
            created_at=created,
            updated_at=created,
        )

        dto = entity_to_dto(user)

        assert dto.user_id == 3
        assert dto.first_name == "Ada"
        assert dto.email == "ada@example.com"
        assert dto.role_id == 4
        assert dto.team_id == 9
        assert dto.created_at == created

    def test_never_exposes_password_hash(self):
        user = User(user_id=1, first_name="A", last_name="B", email="a@example.com", password_hash="h", role_id=4)

        dumped = entity_to_dto(user).model_dump()

        assert "password_hash" not in dumped
        assert "h" not in dumped.values()

    def test_unpersisted_entity_raises_mapping_error(self):
        user = User(first_name="A", last_name="B", email="a@example.com")

        with pytest.raises(MappingError, match="UserDto"):
            entity_to_dto(user)

    def test_wrong_type_raises_mapping_error(self):
        with pytest.raises(MappingError):
            entity_to_dto(object())


class TestCreateRequestToEntity:
    """Tests for create_request_to_entity."""

    def test_builds_partial_entity(self):
        request = CreateUserRequest(
            first_name="  Ada ",
            last_name="Lovelace",
            email="Ada@Example.com",
            password="secret1",
            role_id=1,
            team_id=5,
        )

        user = create_request_to_entity(request)

        assert user.user_id is None
        assert user.first_name == "Ada"
        assert user.team_id == 5
        assert user.password_hash == ""
        # Role is never copied from the request
        assert user.role_id == 0

    def test_invalid_input_raises_mapping_error(self):
        with pytest.raises(MappingError):
            create_request_to_entity(None)
