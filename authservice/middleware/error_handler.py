"""
Error handling for the auth service API.
Maps tagged service errors to HTTP responses with a consistent body and
turns anything unexpected into a generic 500.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from authservice.core.constants import ResponseMessage
from authservice.core.exceptions import AuthServiceError, ErrorKind


logger = logging.getLogger("authservice.error")


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error_type: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create standardized error response.

    Args:
        request: Request object
        status_code: HTTP status code
        message: Error message safe to show the caller
        error_type: Error classification
        details: Additional error details
        headers: Extra response headers

    Returns:
        JSON error response
    """
    error_response = {
        "error": {
            "message": message,
            "type": error_type,
            "request_id": getattr(request.state, "request_id", None)
        }
    }
    if details:
        error_response["error"]["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=error_response,
        headers={
            "Cache-Control": "no-store",
            **(headers or {})
        }
    )


async def auth_service_exception_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    """Handle AuthServiceError and its subclasses."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if exc.kind == ErrorKind.INTERNAL:
        # The cause stays in the log
        logger.error(
            f"Internal error on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc
        )
        return create_error_response(
            request,
            status_code,
            ResponseMessage.INTERNAL_ERROR,
            ErrorKind.INTERNAL.value
        )

    headers = None
    if exc.kind == ErrorKind.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}

    logger.warning(f"{request.method} {request.url.path} -> {status_code} {exc.kind.value}")
    return create_error_response(
        request,
        status_code,
        exc.message,
        exc.kind.value,
        details=exc.details,
        headers=headers
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request payloads."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": " -> ".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        })

    return create_error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation failed",
        ErrorKind.INVALID_ARGUMENT.value,
        details={"validation_errors": errors}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthServiceError, auth_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Last-resort handler for exceptions no exception handler claimed.
    Responds with a generic 500; the traceback is only logged.
    """

    def __init__(self, app: ASGIApp, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: "
                f"{type(exc).__name__}: {exc}",
                exc_info=True
            )
            message = str(exc) if self.debug else ResponseMessage.INTERNAL_ERROR
            return create_error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                message,
                ErrorKind.INTERNAL.value
            )
