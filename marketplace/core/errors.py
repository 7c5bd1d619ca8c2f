"""
Typed application errors.

Every error carries a machine-readable code and optional structured details.
The GraphQL layer copies ``extensions`` onto the rendered error, so raising one
of these anywhere inside a resolver is enough to produce a structured response.
"""
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_OPERATION = "INVALID_OPERATION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base exception for all marketplace domain errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code.value, "details": self.details}


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND

    @classmethod
    def for_entity(cls, entity: str, entity_id: int) -> "NotFoundError":
        return cls(
            f"{entity} not found",
            details=f"{entity} with ID {entity_id} does not exist",
        )


class AuthenticationError(AppError):
    """Bad credentials on login."""

    code = ErrorCode.AUTHENTICATION_ERROR


class UnauthenticatedError(AppError):
    """No usable token where one is required."""

    code = ErrorCode.UNAUTHENTICATED


class ForbiddenError(AppError):
    code = ErrorCode.FORBIDDEN


class ConflictError(AppError):
    code = ErrorCode.CONFLICT

    def __init__(self, message: str, field: str, reason: str) -> None:
        super().__init__(message, details={"field": field, "message": reason})
        self.field = field


class ValidationError(AppError):
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={"field": field, "message": message})
        self.field = field


class InvalidOperationError(AppError):
    """The request is well-formed but the entity's state forbids it."""

    code = ErrorCode.INVALID_OPERATION


class InternalError(AppError):
    code = ErrorCode.INTERNAL_ERROR
