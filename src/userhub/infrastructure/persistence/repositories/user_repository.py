"""User repository for database operations.

Implements the ``UserRepository`` protocol on top of an ``AsyncSession``.
Rows are converted to ``User`` entities on the way out; writes are staged
on the session and applied by ``commit``.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.logging import get_logger
from userhub.domain.entities.user import User
from userhub.domain.exceptions import DuplicateEmailError, PersistenceError
from userhub.domain.repositories import UserPredicate
from userhub.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)

EMAIL_CONSTRAINT_MARKERS = ("uq_users_email", "users.email")


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_entity(model: UserModel) -> User:
    return User(
        user_id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        password_hash=model.password_hash,
        role_id=model.role_id,
        team_id=model.team_id,
        created_at=_as_utc(model.created_at),
        updated_at=_as_utc(model.updated_at),
        last_credential_issued_at=_as_utc(model.last_credential_issued_at),
    )


def _apply(user: User, model: UserModel) -> None:
    model.first_name = user.first_name
    model.last_name = user.last_name
    model.email = user.email
    model.password_hash = user.password_hash
    model.role_id = user.role_id
    model.team_id = user.team_id
    model.created_at = user.created_at
    model.updated_at = user.updated_at
    model.last_credential_issued_at = user.last_credential_issued_at


class SQLAlchemyUserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    @asynccontextmanager
    async def _translate_errors(self, action: str, email: str | None = None) -> AsyncIterator[None]:
        """Turn SQLAlchemy failures into domain persistence errors."""
        try:
            yield
        except IntegrityError as e:
            await self.session.rollback()
            if email is not None and any(marker in str(e.orig) for marker in EMAIL_CONSTRAINT_MARKERS):
                raise DuplicateEmailError(email) from e
            raise PersistenceError(f"Failed to {action}: {e.orig}") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to {action}: {e}") from e

    async def _get_model(self, user_id: int | None) -> UserModel:
        model = await self.session.get(UserModel, user_id) if user_id is not None else None
        if model is None:
            raise PersistenceError(f"User {user_id} is not stored")
        return model

    async def get_all(self) -> list[User]:
        """Get all users ordered by ID."""
        async with self._translate_errors("load users"):
            result = await self.session.execute(select(UserModel).order_by(UserModel.id))
            return [_to_entity(model) for model in result.scalars().all()]

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: User ID.

        Returns:
            User entity if found, None otherwise.
        """
        async with self._translate_errors("load user"):
            model = await self.session.get(UserModel, user_id)
            return _to_entity(model) if model is not None else None

    async def find_matching(self, predicate: UserPredicate) -> list[User]:
        """Get every user for which ``predicate`` returns True."""
        return [user for user in await self.get_all() if predicate(user)]

    async def first_matching(self, predicate: UserPredicate) -> User | None:
        """Get the first user, by ID, for which ``predicate`` returns True."""
        return next((user for user in await self.get_all() if predicate(user)), None)

    async def find_by_email(self, email: str) -> User | None:
        """Get a user by email, compared case-insensitively.

        Args:
            email: Email address to look up.

        Returns:
            User entity if found, None otherwise.
        """
        async with self._translate_errors("load user by email"):
            result = await self.session.execute(
                select(UserModel)
                .where(func.lower(UserModel.email) == email.strip().lower())
                .order_by(UserModel.id)
                .limit(1)
            )
            model = result.scalars().first()
            return _to_entity(model) if model is not None else None

    async def add(self, user: User) -> User:
        """Stage a new user and flush to obtain its ID.

        Args:
            user: User entity without identity.

        Returns:
            The stored user with its assigned ID.
        """
        model = UserModel()
        _apply(user, model)
        async with self._translate_errors("add user", email=user.email):
            self.session.add(model)
            await self.session.flush()
        logger.debug("User row staged", user_id=model.id)
        return _to_entity(model)

    async def update(self, user: User) -> None:
        """Copy the entity's state onto its stored row."""
        async with self._translate_errors("update user", email=user.email):
            model = await self._get_model(user.user_id)
            _apply(user, model)

    async def remove(self, user: User) -> None:
        """Stage the deletion of the user's row."""
        async with self._translate_errors("remove user"):
            model = await self._get_model(user.user_id)
            await self.session.delete(model)

    async def commit(self) -> None:
        """Commit the session.

        Raises:
            DuplicateEmailError: If a concurrent write took the same email.
            PersistenceError: If the commit fails for any other reason.
        """
        pending_emails = [
            obj.email for obj in list(self.session.new) + list(self.session.dirty)
            if isinstance(obj, UserModel)
        ]
        email = pending_emails[0] if pending_emails else None
        async with self._translate_errors("commit", email=email):
            await self.session.commit()
