"""
FastAPI exception handlers.

WHAT: Converts AppException subclasses, request validation errors, HTTP
errors and database errors into the JSON error body used across the API.

WHY: Xendit retries a callback on any non-2xx response, so the status code
is what matters most: configuration and database failures must come back
as 5xx (retry later), never as a 2xx with an error message.

HOW: `register_exception_handlers(app)` installs every handler; the body
always has the keys error, message, status_code and details.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from xendit_payments.core.exceptions import AppException, DatabaseError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> Optional[str]:
    metadata = getattr(request.state, "metadata", None)
    return metadata.request_id if metadata else None


def _error_body(
    error: str,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "error": error,
        "message": message,
        "status_code": status_code,
        "details": details,
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle AppException and its subclasses.

    WHY: 5xx errors (missing payment method, Xendit unreachable) need an
    operator, so they are logged at error level with the request id that
    ties them to the callback or shop request.

    Args:
        request: The FastAPI request object
        exc: The raised exception

    Returns:
        JSONResponse built from exc.to_dict()
    """
    body = exc.to_dict()
    if exc.status_code >= 500:
        logger.error(
            f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}",
            extra={"request_id": _request_id(request), "details": body["details"]},
        )

    return JSONResponse(status_code=exc.status_code, content=body)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 400 with one entry per field."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=400,
        content=_error_body(
            "ValidationError", "Request validation failed", 400, {"errors": errors}
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle Starlette HTTP exceptions.

    WHY: Routing errors (404, 405) and HTTPBearer's missing-credentials
    error are raised before our code runs. This keeps their body in the
    same shape as everything else.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTPException", str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle database errors raised from DAOs and the order store.

    WHY: A database failure while reconciling a callback is transient.
    Answering 503 makes Xendit retry; the request's transaction has
    already been rolled back by get_db.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}: {exc.__class__.__name__}",
        extra={"request_id": _request_id(request)},
    )
    error = DatabaseError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected exceptions.

    WHY: Logs the full traceback but returns a generic error so internal
    details never reach the caller (OWASP A04).
    """
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"request_id": _request_id(request)},
    )

    return JSONResponse(
        status_code=500,
        content=_error_body("InternalServerError", "An unexpected error occurred", 500),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
