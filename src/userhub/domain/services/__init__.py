"""Domain services for UserHub.

Services contain business logic that doesn't naturally fit within a single entity.
"""

from userhub.domain.services.user_mapper import create_request_to_entity, entity_to_dto
from userhub.domain.services.user_service import UserService, normalize_email

__all__ = [
    "UserService",
    "create_request_to_entity",
    "entity_to_dto",
    "normalize_email",
]
