"""Router for user management.

Every endpoint answers with the ``ApiResponse`` envelope. Duplicate emails,
mapping and persistence failures are translated by the application's
exception handlers.
"""

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse

from userhub.core.logging import get_logger
from userhub.infrastructure.api.dependencies import UserServiceDep
from userhub.infrastructure.api.schemas import (
    ApiResponse,
    CreateUserRequest,
    UpdateUserRequest,
    UserDto,
    UserStatistics,
)

router = APIRouter(tags=["Users"])
logger = get_logger(__name__)


def error_response(status_code: int, message: str, errors: list[str] | None = None) -> JSONResponse:
    """Build an unsuccessful envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(message, errors).model_dump(mode="json"),
    )


def invalid_id_response(name: str = "user ID") -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, f"The {name} must be a positive integer")


def user_not_found_response() -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "User not found")


@router.get("", response_model=ApiResponse[list[UserDto]], summary="List users")
async def list_users(service: UserServiceDep) -> ApiResponse[list[UserDto]]:
    """List every user."""
    users = await service.get_all_users()
    return ApiResponse[list[UserDto]].ok(users, "Users retrieved successfully")


@router.get(
    "/statistics",
    response_model=ApiResponse[UserStatistics],
    summary="Get user statistics",
)
async def get_user_statistics(service: UserServiceDep) -> ApiResponse[UserStatistics]:
    """Aggregate counts over the user population."""
    statistics = await service.get_user_statistics()
    return ApiResponse[UserStatistics].ok(statistics, "Statistics retrieved successfully")


@router.get(
    "/email-exists",
    response_model=ApiResponse[bool],
    summary="Check whether an email is in use",
)
async def email_exists(
    service: UserServiceDep,
    email: str = Query(..., min_length=1, description="Email to check"),
    exclude_id: int | None = Query(None, ge=1, description="User ID to ignore"),
) -> ApiResponse[bool]:
    """Check whether an email is used by a user other than ``exclude_id``."""
    exists = await service.email_exists(email, exclude_id=exclude_id)
    return ApiResponse[bool].ok(exists, "Email is in use" if exists else "Email is available")


@router.get(
    "/by-email/{email}",
    response_model=ApiResponse[UserDto],
    summary="Get a user by email",
)
async def get_user_by_email(email: str, service: UserServiceDep):
    """Get a user by email address, ignoring case."""
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return error_response(status.HTTP_400_BAD_REQUEST, "The email format is not valid")

    user = await service.get_user_by_email(email)
    if user is None:
        return user_not_found_response()
    return ApiResponse[UserDto].ok(user, "User found")


@router.get(
    "/by-role/{role_id}",
    response_model=ApiResponse[list[UserDto]],
    summary="List users by role",
)
async def get_users_by_role(role_id: int, service: UserServiceDep):
    """List the users holding a role."""
    if role_id <= 0:
        return invalid_id_response("role ID")

    users = await service.get_users_by_role(role_id)
    return ApiResponse[list[UserDto]].ok(users, "Users retrieved successfully")


@router.get("/{user_id}", response_model=ApiResponse[UserDto], summary="Get a user")
async def get_user(user_id: int, service: UserServiceDep):
    """Get a specific user by ID."""
    if user_id <= 0:
        return invalid_id_response()

    user = await service.get_user_by_id(user_id)
    if user is None:
        return user_not_found_response()
    return ApiResponse[UserDto].ok(user, "User found")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserDto],
    summary="Create a new user",
)
async def create_user(
    user_data: CreateUserRequest,
    request: Request,
    response: Response,
    service: UserServiceDep,
) -> ApiResponse[UserDto]:
    """Create a user with the default role.

    Returns 409 when the email is already in use.
    """
    user = await service.create_user(user_data)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.user_id))
    logger.info("User created via API", user_id=user.user_id)
    return ApiResponse[UserDto].ok(user, "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserDto], summary="Update a user")
async def update_user(user_id: int, user_data: UpdateUserRequest, service: UserServiceDep):
    """Partially update a user. Absent or blank fields are left unchanged."""
    if user_id <= 0:
        return invalid_id_response()

    user = await service.update_user(user_id, user_data)
    if user is None:
        return user_not_found_response()
    return ApiResponse[UserDto].ok(user, "User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[bool], summary="Delete a user")
async def delete_user(user_id: int, service: UserServiceDep):
    """Permanently delete a user."""
    if user_id <= 0:
        return invalid_id_response()

    deleted = await service.delete_user(user_id)
    if not deleted:
        return user_not_found_response()
    return ApiResponse[bool].ok(True, "User deleted successfully")
