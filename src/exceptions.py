"""Service error taxonomy and the handlers that render it as response envelopes."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for failures reported to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    envelope_status: str = "fail"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(ServiceError):
    """Bad credentials or no token presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationError(ServiceError):
    """Token presented but invalid or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class ConflictError(ServiceError):
    """Email already belongs to another user."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already in use"


class InternalError(ServiceError):
    """Unexpected repository or crypto failure; the message stays generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    envelope_status = "error"
    default_message = "Internal server error"


def error_response(
    status_code: int, envelope_status: str, message: str, headers=None
) -> JSONResponse:
    """Build a ``{status, message}`` envelope response."""
    return JSONResponse(
        status_code=status_code,
        content={"status": envelope_status, "message": message},
        headers=headers,
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(exc.status_code, exc.envelope_status, exc.message, headers=headers)


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report unparseable bodies and wrongly typed fields as plain 400 failures."""
    errors = exc.errors()
    if any(error["type"] == "json_invalid" for error in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, "fail", "Malformed JSON body")

    fields = [".".join(str(loc) for loc in error["loc"][1:]) for error in errors]
    fields = [field for field in fields if field]
    message = "Invalid request body"
    if fields:
        message = f"Invalid value for field(s): {', '.join(fields)}"
    return error_response(status.HTTP_400_BAD_REQUEST, "fail", message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    envelope_status = "error" if exc.status_code >= 500 else "fail"
    return error_response(exc.status_code, envelope_status, str(exc.detail), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "error", InternalError.default_message
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the envelope-producing exception handlers."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
