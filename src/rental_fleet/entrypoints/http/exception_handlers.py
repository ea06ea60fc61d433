"""Translation of raised errors into JSON error responses.

Every body has the ``ErrorResponse`` shape: ``detail``, ``code`` and, for
validation failures, ``errors``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rental_fleet.domain.errors import DomainError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 422,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STORE_ERROR": status.HTTP_502_BAD_GATEWAY,
}

# Location prefixes FastAPI adds that callers don't need to see
_LOCATION_SOURCES = ("body", "query", "path", "header")


def _request_extra(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


def _error_response(
    status_code: int, detail: str, code: str, errors: list[dict[str, Any]] | None = None
) -> JSONResponse:
    body: dict[str, Any] = {"detail": detail, "code": code}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Status from STATUS_BY_ERROR_CODE; unknown codes are the caller's fault (400).

    Store failures (502) are logged at ERROR with their context, everything
    else at INFO.
    """
    status_code = STATUS_BY_ERROR_CODE.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    if status_code >= 500:
        logger.error(
            "Domain error occurred",
            extra={
                "error_code": exc.error_code,
                "error": exc.message,
                "context": exc.context,
                **_request_extra(request),
            },
        )
    else:
        logger.info(
            "Client error",
            extra={"error_code": exc.error_code, "error": exc.message, **_request_extra(request)},
        )

    return _error_response(status_code, exc.message, exc.error_code, exc.to_dict().get("errors"))


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic/FastAPI rejections, e.g. ``limit=0`` or a body without ``name``."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in _LOCATION_SOURCES),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info("Request validation error", extra={"errors": errors, **_request_extra(request)})

    return _error_response(422, "Invalid request parameters", "VALIDATION_ERROR", errors)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error occurred",
        exc_info=exc,
        extra={"error_type": type(exc).__name__, "error": str(exc), **_request_extra(request)},
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred", "INTERNAL_ERROR"
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info("Exception handlers registered")
