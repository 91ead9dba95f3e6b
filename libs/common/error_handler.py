"""Global exception handlers for consistent error responses.

- Request validation errors become 400 with a field-level error list.
- ``ServiceError`` subclasses become their declared status code.
- Anything else is logged and returned as a generic 500.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from libs.common.errors import ServiceError
from libs.common.logging import get_logger

logger = get_logger(__name__)


def _format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        formatted.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type"),
            }
        )
    return formatted


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {
                "detail": "Invalid data",
                "errors": _format_validation_errors(list(exc.errors())),
            }
        ),
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    content: dict[str, Any] = {"detail": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(content))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the shared exception handlers on ``app``."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
