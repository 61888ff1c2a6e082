"""Error types raised by the order workflow and its repositories."""


class OrderServiceError(Exception):
    """Base class for errors surfaced to callers.

    Attributes:
        kind: Short error category used by the HTTP layer
        message: Human-readable description
    """

    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(OrderServiceError):
    """Malformed input or a business rule violation."""

    kind = "bad_request"


class NotFoundError(OrderServiceError):
    """Unknown customer or order."""

    kind = "not_found"


class ConflictError(OrderServiceError):
    """Unique-key violation in the backing store."""

    kind = "conflict"


class InternalError(OrderServiceError):
    """Unexpected persistence failure."""

    kind = "internal"
