"""Repository contracts for the user domain."""

from userhub.domain.repositories.user_repository import UserPredicate, UserRepository

__all__ = [
    "UserPredicate",
    "UserRepository",
]
