"""Repository contract for user persistence.

The user service depends on this protocol only. Implementations live in
``userhub.infrastructure.persistence.repositories``.
"""

from collections.abc import Callable
from typing import Protocol

from userhub.domain.entities.user import User

UserPredicate = Callable[[User], bool]


class UserRepository(Protocol):
    """Async access to stored users.

    Writes (``add``, ``update``, ``remove``) are staged until ``commit``.
    Every method raises ``PersistenceError`` when the store is unavailable;
    a violated email uniqueness constraint raises ``DuplicateEmailError``.
    """

    async def get_all(self) -> list[User]:
        """Return all users in a stable order."""
        ...

    async def get_by_id(self, user_id: int) -> User | None:
        """Return the user with ``user_id`` or None."""
        ...

    async def find_matching(self, predicate: UserPredicate) -> list[User]:
        """Return every user satisfying ``predicate``."""
        ...

    async def first_matching(self, predicate: UserPredicate) -> User | None:
        """Return the first user satisfying ``predicate`` or None."""
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Return the user whose email matches ``email`` case-insensitively."""
        ...

    async def add(self, user: User) -> User:
        """Stage a new user and return it with its assigned ``user_id``."""
        ...

    async def update(self, user: User) -> None:
        """Stage the current state of an existing user."""
        ...

    async def remove(self, user: User) -> None:
        """Stage the removal of an existing user."""
        ...

    async def commit(self) -> None:
        """Durably apply all staged writes."""
        ...
