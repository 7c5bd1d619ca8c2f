"""
Rendering of GraphQL errors into the API's error shape.

Every error leaves the server as ``{message, code, details, locations, path}``:
- domain errors keep their own code and details,
- errors in the request document itself are VALIDATION_ERROR,
- anything else is INTERNAL_ERROR with a generic message.
"""
from typing import Any, Optional
import logging

from graphql import GraphQLError

from marketplace.core.errors import AppError, ErrorCode

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


def format_graphql_error(error: GraphQLError) -> dict[str, Any]:
    original = error.original_error
    message = error.message
    details: Optional[Any] = None

    if isinstance(original, AppError):
        code = original.code.value
        details = original.details
    elif original is None:
        code = ErrorCode.VALIDATION_ERROR.value
    else:
        code = ErrorCode.INTERNAL_ERROR.value
        message = INTERNAL_MESSAGE

    formatted: dict[str, Any] = {"message": message, "code": code, "details": details}
    if error.locations:
        formatted["locations"] = [
            {"line": location.line, "column": location.column}
            for location in error.locations
        ]
    if error.path:
        formatted["path"] = list(error.path)
    return formatted


class ShapedGraphQLError(GraphQLError):
    """A GraphQLError whose ``formatted`` form is the API's error shape."""

    @classmethod
    def from_error(cls, error: GraphQLError) -> "ShapedGraphQLError":
        if isinstance(error, cls):
            return error
        return cls(
            error.message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=error.path,
            original_error=error.original_error,
            extensions=error.extensions,
        )

    @property
    def formatted(self) -> dict[str, Any]:  # type: ignore[override]
        return format_graphql_error(self)


def log_graphql_errors(errors: list[GraphQLError]) -> None:
    """Expected domain errors at WARNING; everything unexpected at ERROR with traceback."""
    for error in errors:
        original = error.original_error
        if isinstance(original, AppError):
            logger.warning(
                "GraphQL %s at %s: %s", original.code.value, error.path, original.message
            )
        elif original is None:
            logger.warning("Invalid GraphQL request: %s", error.message)
        else:
            logger.error(
                "Unhandled error in resolver at %s",
                error.path,
                exc_info=(type(original), original, original.__traceback__),
            )
