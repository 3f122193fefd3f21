"""
ProdTrack Error Kinds

Every failure that reaches a client is one of these. The API layer turns
them into ``{"error": message}`` JSON bodies with the matching status code.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidInputError(AppError):
    """Missing or malformed required fields."""

    status_code = 400
    default_message = "Invalid input"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Duplicate natural key (orderId, itemName, username, email)."""

    status_code = 400
    default_message = "Record already exists"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Access denied. No token provided."


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Invalid token"


class UpstreamUnavailableError(AppError):
    """The external text-completion service failed."""

    status_code = 500
    default_message = "Failed to get AI response"


class InternalError(AppError):
    status_code = 500
