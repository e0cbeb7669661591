"""SQLAlchemy model for the users table.

Emails are stored normalized, so the plain unique constraint on ``email``
enforces case-insensitive uniqueness.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from userhub.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key, assigned by the database.
        first_name: Given name.
        last_name: Family name.
        email: Normalized email address (unique).
        password_hash: Argon2 hash.
        role_id: Role reference.
        team_id: Optional team reference.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
        last_credential_issued_at: Timestamp of the last credential issuance.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="User ID",
    )
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Normalized (trimmed, lower-case) email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    role_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    team_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_credential_issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Timestamp of the most recent credential issuance",
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
