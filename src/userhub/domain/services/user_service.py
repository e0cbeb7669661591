"""User service for business logic.

Orchestrates validation, email uniqueness, password hashing, partial updates
and entity-to-DTO mapping on top of a ``UserRepository``. Every mutating
operation performs at most one write followed by exactly one commit.
"""

import asyncio
from collections import Counter
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any

from userhub.core.logging import LoggingContext, get_logger
from userhub.domain.entities.user import User, utcnow
from userhub.domain.exceptions import DuplicateEmailError, MappingError
from userhub.domain.repositories import UserRepository
from userhub.domain.services.user_mapper import create_request_to_entity, entity_to_dto
from userhub.infrastructure.api.schemas.users_schemas import (
    CreateUserRequest,
    UpdateUserRequest,
    UserDto,
    UserStatistics,
)
from userhub.infrastructure.auth.password_hasher import hash_password

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    """Return the canonical stored form of an email address."""
    return email.strip().lower()


class UserService:
    """Service for user management business logic.

    The email uniqueness check is read-then-write. Two concurrent creates
    with the same email can both pass it; the repository's unique constraint
    rejects the second commit with ``DuplicateEmailError``.
    """

    def __init__(
        self,
        repository: UserRepository,
        *,
        default_role_id: int,
        hasher: Callable[[str], str] = hash_password,
        to_dto: Callable[[User], UserDto] = entity_to_dto,
        to_entity: Callable[[CreateUserRequest], User] = create_request_to_entity,
        clock: Callable[[], datetime] = utcnow,
        statistics_window_days: int = 30,
    ) -> None:
        """Initialize the user service.

        Args:
            repository: User repository implementation.
            default_role_id: Role assigned to every new user.
            hasher: One-way password hash function.
            to_dto: Entity to transfer object mapper.
            to_entity: Create request to entity mapper.
            clock: Source of the current UTC time.
            statistics_window_days: Window for the new-users statistic.
        """
        self.repository = repository
        self.default_role_id = default_role_id
        self.statistics_window_days = statistics_window_days
        self._hash_password = hasher
        self._to_dto = to_dto
        self._to_entity = to_entity
        self._clock = clock

    @contextmanager
    def _log_failures(self, operation: str, **context: Any) -> Iterator[None]:
        """Bind ``operation`` and its keys to every log entry made inside.

        Unexpected failures are logged and re-raised unchanged.
        """
        with LoggingContext(operation=operation, **context):
            try:
                yield
            except DuplicateEmailError:
                raise
            except MappingError as e:
                logger.error("User mapping failed", error=str(e))
                raise
            except Exception as e:
                logger.error("User operation failed", error=str(e), exc_type=type(e).__name__)
                raise

    async def _email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        normalized = normalize_email(email)
        match = await self.repository.first_matching(
            lambda user: user.email.lower() == normalized and user.user_id != exclude_id
        )
        return match is not None

    async def get_all_users(self) -> list[UserDto]:
        """List every stored user.

        Returns:
            Transfer objects in repository order.
        """
        with self._log_failures("get_all_users"):
            logger.info("Listing all users")
            users = await self.repository.get_all()
            return [self._to_dto(user) for user in users]

    async def get_user_by_id(self, user_id: int) -> UserDto | None:
        """Get a user by ID.

        Args:
            user_id: Positive user ID (validated by the caller).

        Returns:
            The user, or None if no such user exists.
        """
        with self._log_failures("get_user_by_id", user_id=user_id):
            logger.info("Fetching user by id", user_id=user_id)
            user = await self.repository.get_by_id(user_id)
            if user is None:
                logger.warning("User not found", user_id=user_id)
                return None
            return self._to_dto(user)

    async def get_user_by_email(self, email: str) -> UserDto | None:
        """Get a user by email, ignoring case and surrounding whitespace."""
        normalized = normalize_email(email)
        with self._log_failures("get_user_by_email", email=normalized):
            logger.info("Fetching user by email", email=normalized)
            user = await self.repository.find_by_email(normalized)
            if user is None:
                logger.warning("User not found", email=normalized)
                return None
            return self._to_dto(user)

    async def get_users_by_role(self, role_id: int) -> list[UserDto]:
        """List the users holding ``role_id`` (possibly none)."""
        with self._log_failures("get_users_by_role", role_id=role_id):
            logger.info("Listing users by role", role_id=role_id)
            users = await self.repository.find_matching(lambda user: user.role_id == role_id)
            return [self._to_dto(user) for user in users]

    async def create_user(self, request: CreateUserRequest) -> UserDto:
        """Create a new user.

        The email is stored trimmed and lower-cased, the password is hashed,
        and the role is always the configured default regardless of the
        request.

        Args:
            request: Validated create request.

        Returns:
            The created user including its assigned ID.

        Raises:
            DuplicateEmailError: If the email is already in use.
        """
        email = normalize_email(str(request.email))
        with self._log_failures("create_user", email=email):
            logger.info("Creating user", email=email)

            if await self.repository.find_by_email(email) is not None:
                logger.warning("Email already in use", email=email)
                raise DuplicateEmailError(email)

            password_hash = await asyncio.to_thread(
                self._hash_password, request.password.get_secret_value()
            )

            user = self._to_entity(request)
            now = self._clock()
            user.email = email
            user.password_hash = password_hash
            user.created_at = now
            user.updated_at = now
            user.last_credential_issued_at = now
            user.role_id = self.default_role_id

            created = await self.repository.add(user)
            await self.repository.commit()

            logger.info("User created", user_id=created.user_id, email=email)
            return self._to_dto(created)

    async def update_user(self, user_id: int, request: UpdateUserRequest) -> UserDto | None:
        """Apply a partial update to a user.

        Only fields present and non-blank in ``request`` change; ``updated_at``
        is always refreshed.

        Args:
            user_id: ID of the user to update.
            request: Partial update.

        Returns:
            The updated user, or None if no such user exists.

        Raises:
            DuplicateEmailError: If the new email belongs to another user.
        """
        with self._log_failures("update_user", user_id=user_id):
            logger.info("Updating user", user_id=user_id)

            user = await self.repository.get_by_id(user_id)
            if user is None:
                logger.warning("User not found", user_id=user_id)
                return None

            if request.email is not None and request.email.strip():
                email = normalize_email(str(request.email))
                if await self._email_taken(email, exclude_id=user_id):
                    logger.warning("Email already in use", email=email, user_id=user_id)
                    raise DuplicateEmailError(email)
                user.email = email

            if request.first_name is not None and request.first_name.strip():
                user.first_name = request.first_name.strip()
            if request.last_name is not None and request.last_name.strip():
                user.last_name = request.last_name.strip()
            if request.role_id is not None:
                user.role_id = request.role_id
            if request.team_id is not None:
                user.team_id = request.team_id

            user.updated_at = self._clock()

            await self.repository.update(user)
            await self.repository.commit()

            logger.info("User updated", user_id=user_id)
            return self._to_dto(user)

    async def delete_user(self, user_id: int) -> bool:
        """Permanently delete a user.

        Args:
            user_id: ID of the user to delete.

        Returns:
            True if the user was deleted, False if it did not exist.
        """
        with self._log_failures("delete_user", user_id=user_id):
            logger.info("Deleting user", user_id=user_id)

            user = await self.repository.get_by_id(user_id)
            if user is None:
                logger.warning("User not found", user_id=user_id)
                return False

            # Only visible to repositories that keep removed rows; the SQL one deletes them
            user.updated_at = self._clock()
            await self.repository.remove(user)
            await self.repository.commit()

            logger.info("User deleted", user_id=user_id)
            return True

    async def email_exists(self, email: str, exclude_id: int | None = None) -> bool:
        """Check whether any user other than ``exclude_id`` uses ``email``.

        Args:
            email: Email to look for, compared case-insensitively.
            exclude_id: Optional user ID to ignore.

        Returns:
            True if a matching user exists.
        """
        with self._log_failures("email_exists", email=email, exclude_id=exclude_id):
            logger.info("Checking email availability", email=email, exclude_id=exclude_id)
            return await self._email_taken(email, exclude_id=exclude_id)

    async def get_user_statistics(self) -> UserStatistics:
        """Compute aggregate figures over all users."""
        with self._log_failures("get_user_statistics"):
            logger.info("Computing user statistics")
            users = await self.repository.get_all()
            since = self._clock() - timedelta(days=self.statistics_window_days)

            by_role = Counter(user.role_id for user in users)
            by_team = Counter(user.team_id for user in users if user.team_id is not None)

            return UserStatistics(
                total_users=len(users),
                users_by_role=dict(sorted(by_role.items())),
                users_by_team=dict(sorted(by_team.items())),
                users_without_team=sum(1 for user in users if user.team_id is None),
                new_users=sum(1 for user in users if user.created_at >= since),
                window_days=self.statistics_window_days,
            )
