"""API Schemas for request/response validation."""

from userhub.infrastructure.api.schemas.common_schemas import ApiResponse
from userhub.infrastructure.api.schemas.users_schemas import (
    CreateUserRequest,
    UpdateUserRequest,
    UserDto,
    UserStatistics,
)

__all__ = [
    "ApiResponse",
    "CreateUserRequest",
    "UpdateUserRequest",
    "UserDto",
    "UserStatistics",
]
