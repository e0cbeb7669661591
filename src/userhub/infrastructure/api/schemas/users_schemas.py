"""Pydantic schemas for User CRUD operations.

These are the transfer objects exchanged with API clients. None of them
carries a password hash.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, SecretStr, field_validator


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


class CreateUserRequest(BaseModel):
    """Request schema for creating a new user.

    ``role_id`` is accepted for client compatibility but is always replaced
    by the configured default role.
    """

    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")
    email: EmailStr = Field(..., description="User's email address")
    password: SecretStr = Field(..., min_length=6, description="User's password")
    role_id: int | None = Field(None, description="Ignored on creation")
    team_id: int | None = Field(None, ge=1, description="Team ID")

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Any) -> Any:
        """Trim surrounding whitespace before validation."""
        return _strip(v)


class UpdateUserRequest(BaseModel):
    """Request schema for updating a user.

    All fields are optional. Only provided, non-blank fields are applied.
    The password cannot be changed through this schema.
    """

    first_name: str | None = Field(None, max_length=100, description="Given name")
    last_name: str | None = Field(None, max_length=100, description="Family name")
    email: EmailStr | None = Field(None, description="User's email address")
    role_id: int | None = Field(None, ge=1, description="Role ID")
    team_id: int | None = Field(None, ge=1, description="Team ID")

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat blank strings as absent fields."""
        v = _strip(v)
        if v == "":
            return None
        return v


class UserDto(BaseModel):
    """Response schema for a single user."""

    user_id: int = Field(..., description="User ID")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    email: str = Field(..., description="Normalized email address")
    role_id: int = Field(..., description="Role ID")
    team_id: int | None = Field(None, description="Team ID, if assigned")
    created_at: datetime = Field(..., description="When the user was created")
    updated_at: datetime = Field(..., description="When the user was last updated")

    model_config = {"from_attributes": True}


class UserStatistics(BaseModel):
    """Aggregate figures about the user population."""

    total_users: int = Field(..., ge=0, description="Number of stored users")
    users_by_role: dict[int, int] = Field(default_factory=dict, description="User count per role ID")
    users_by_team: dict[int, int] = Field(default_factory=dict, description="User count per team ID")
    users_without_team: int = Field(0, ge=0, description="Users not assigned to a team")
    new_users: int = Field(0, ge=0, description="Users created within the window")
    window_days: int = Field(..., ge=1, description="Size of the new-users window in days")
