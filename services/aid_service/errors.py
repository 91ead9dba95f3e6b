"""Domain errors raised by the aid service layer.

Each carries the HTTP status the shared exception handler responds with.
"""

from typing import Any, Optional

from libs.common.errors import ServiceError


class AidServiceError(ServiceError):
    """Base class for errors raised by the aid service."""


class NotFoundError(AidServiceError):
    status_code = 404


class OwnershipError(AidServiceError):
    status_code = 403


class ConflictError(AidServiceError):
    status_code = 409


class InvalidTransition(ConflictError):
    """The requested status change is not in the transition table."""

    def __init__(self, current: Any, requested: Any):
        self.current = getattr(current, "value", current)
        self.requested = getattr(requested, "value", requested)
        super().__init__(
            f"Cannot move application from '{self.current}' to '{self.requested}'"
        )


class StaleVersionError(ConflictError):
    def __init__(self, expected: int, actual: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Application was modified by someone else; reload and try again"
        )


class BankDetailsInUseError(ConflictError):
    pass


class RejectionReasonRequired(AidServiceError):
    status_code = 400

    def __init__(self):
        super().__init__(
            "A rejection reason is required",
            errors=[{"field": "adminNotes", "message": "Rejection reason is required"}],
        )


class VerificationFailed(AidServiceError):
    status_code = 400


class IntakeValidationError(AidServiceError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message, errors=errors)
