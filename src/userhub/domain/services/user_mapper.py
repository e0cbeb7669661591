"""Conversions between the User entity and its transfer objects.

Both functions are pure. Any failure is raised as ``MappingError`` so callers
can tell a misconfigured mapping apart from a bad request.
"""

from pydantic import ValidationError

from userhub.domain.entities.user import User
from userhub.domain.exceptions import MappingError
from userhub.infrastructure.api.schemas.users_schemas import CreateUserRequest, UserDto


def entity_to_dto(user: User) -> UserDto:
    """Map a persisted user to its outbound transfer object.

    Args:
        user: User entity with an assigned ``user_id``.

    Returns:
        UserDto without the password hash.

    Raises:
        MappingError: If the entity does not fit the transfer object.
    """
    try:
        return UserDto(
            user_id=user.user_id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            role_id=user.role_id,
            team_id=user.team_id,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
    except (ValidationError, AttributeError, TypeError) as e:
        raise MappingError(f"Cannot map User to UserDto: {e}") from e


def create_request_to_entity(request: CreateUserRequest) -> User:
    """Build a partially populated entity from a create request.

    The caller is responsible for the derived fields: normalized email,
    password hash, role and timestamps. The request's role is not copied.

    Args:
        request: Validated create request.

    Returns:
        User entity without identity.

    Raises:
        MappingError: If the request cannot be turned into an entity.
    """
    try:
        return User(
            first_name=request.first_name.strip(),
            last_name=request.last_name.strip(),
            email=str(request.email),
            team_id=request.team_id,
        )
    except (ValueError, AttributeError, TypeError) as e:
        raise MappingError(f"Cannot map CreateUserRequest to User: {e}") from e
