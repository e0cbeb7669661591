"""Domain entities for UserHub.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from userhub.domain.entities.user import User, utcnow

__all__ = [
    "User",
    "utcnow",
]
