"""FastAPI dependencies for wiring the user service per request."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.config import Settings, get_settings
from userhub.domain.services.user_service import UserService
from userhub.infrastructure.persistence.database import get_db_session
from userhub.infrastructure.persistence.repositories import SQLAlchemyUserRepository


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    """Build a request-scoped user service backed by the request's session."""
    return UserService(
        SQLAlchemyUserRepository(session),
        default_role_id=settings.default_role_id,
        statistics_window_days=settings.statistics_window_days,
    )


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
