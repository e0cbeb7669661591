"""User entity.

Users are uniquely identified by an integer ID assigned by the persistence
layer and by their normalized (trimmed, lower-cased) email address.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User entity representing a stored user record.

    Attributes:
        user_id: Identifier assigned on creation (None until persisted).
        first_name: Given name, non-empty after trimming.
        last_name: Family name, non-empty after trimming.
        email: Normalized email address (unique across users).
        password_hash: Argon2 hash of the user's password (never plaintext).
        role_id: Role reference, always set.
        team_id: Optional team reference (None means unassigned).
        created_at: Timestamp when the user was created.
        updated_at: Timestamp of the last mutation.
        last_credential_issued_at: Timestamp of the most recent credential issuance.
    """

    first_name: str
    last_name: str
    email: str
    password_hash: str = ""
    role_id: int = 0
    team_id: int | None = None
    user_id: int | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    last_credential_issued_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if self.user_id is not None and self.user_id <= 0:
            raise ValueError("User ID must be a positive integer")
        if not self.first_name or not self.first_name.strip():
            raise ValueError("First name is required")
        if not self.last_name or not self.last_name.strip():
            raise ValueError("Last name is required")
