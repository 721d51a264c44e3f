"""Domain errors raised by services and request dependencies.

Each carries a client-safe ``message``; ErrorMapper turns them into HTTP responses.
"""


class ServiceError(Exception):
    """Base class for expected, client-reportable failures."""

    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ServiceError):
    default_message = "Invalid request"


class UnauthorizedError(ServiceError):
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    default_message = "Access denied"


class NotFoundError(ServiceError):
    default_message = "Not found"


class ConflictError(ServiceError):
    default_message = "Conflict"


class InternalServiceError(ServiceError):
    """Storage or signing failure; the message is logged, never sent to clients."""


class TokenGenerationError(InternalServiceError):
    default_message = "failed to generate unique token"
