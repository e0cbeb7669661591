"""Exceptions raised by the user domain.

A missing user is not an exception: lookups return ``None`` and deletes
return ``False``.
"""


class UserHubError(Exception):
    """Base class for all UserHub domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateEmailError(UserHubError):
    """Raised when an email is already used by another user."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"A user with email '{email}' already exists")


class MappingError(UserHubError):
    """Raised when an entity or transfer object cannot be converted.

    This signals a misconfigured mapping, not a bad request.
    """


class OperationFailedError(UserHubError):
    """Raised when a user operation could not be completed."""


class PersistenceError(OperationFailedError):
    """Raised when the underlying store fails or rejects a write."""
