"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope.

    Attributes:
        success: Whether the operation succeeded.
        message: Human-readable outcome.
        data: Payload on success, None otherwise.
        errors: Error details on failure.
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field("", description="Human-readable outcome")
    data: T | None = Field(None, description="Response payload")
    errors: list[str] = Field(default_factory=list, description="Error details")

    @classmethod
    def ok(cls, data: T | None, message: str) -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, errors: list[str] | None = None) -> "ApiResponse[T]":
        return cls(success=False, message=message, errors=errors or [])
