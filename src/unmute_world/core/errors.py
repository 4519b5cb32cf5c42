"""Domain exceptions raised by services and translated by the API layer."""

from __future__ import annotations


class UnmuteError(RuntimeError):
    """Base exception for domain failures surfaced to API callers.

    Each subclass carries the HTTP status the API layer answers with, so
    services never need to know about HTTP themselves.
    """

    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(UnmuteError):
    """Malformed input that passed schema parsing, e.g. a rating outside 1-5."""

    status_code = 400
    default_message = "Invalid input"


class SelfRatingError(UnmuteError):
    """An author attempted to rate their own post."""

    status_code = 400
    default_message = "Cannot rate your own post"


class AuthenticationError(UnmuteError):
    """Credentials or reset token did not check out."""

    status_code = 401
    default_message = "Not authorized"


class ForbiddenError(UnmuteError):
    """The caller may not perform this mutation."""

    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFoundError(UnmuteError):
    """A referenced post, user or category does not exist."""

    status_code = 404
    default_message = "Resource not found"

    def __init__(self, resource: str = "Resource", message: str | None = None) -> None:
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class ConflictError(UnmuteError):
    """The request collides with existing state."""

    status_code = 409
    default_message = "Conflict with existing data"


class DependencyError(UnmuteError):
    """Storage or outbound-mail collaborator is unavailable."""

    status_code = 503
    default_message = "A backing service is unavailable"


__all__ = [
    "UnmuteError",
    "ValidationError",
    "SelfRatingError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "DependencyError",
]
