"""SQLAlchemy models for UserHub."""

from userhub.infrastructure.persistence.models.user import UserModel

__all__ = [
    "UserModel",
]
