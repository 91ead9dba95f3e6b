"""Base exception for domain errors that map onto an HTTP status."""

from typing import Any, Optional


class ServiceError(Exception):
    """
    Raised by service-layer code that must stay independent of the HTTP layer.

    ``add_exception_handlers`` turns it into ``{"detail": message}`` with
    ``status_code``; ``errors`` is included when present.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        super().__init__(message)
