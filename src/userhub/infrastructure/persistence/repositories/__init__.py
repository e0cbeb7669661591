"""Persistence repositories for database operations."""

from userhub.infrastructure.persistence.repositories.user_repository import (
    SQLAlchemyUserRepository,
)

__all__ = [
    "SQLAlchemyUserRepository",
]
