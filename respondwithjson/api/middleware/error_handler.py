"""Global exception handlers answering in the envelope format.

Every error leaving a handler is converted with ``respond_with_error`` so
clients always receive ``{"message": "ERROR", "error": "..."}``:

- DecodeError (empty body, unknown field, malformed JSON) -> 400
- FieldValidationError (empty text, zero integer, unsupported kind) -> 422
- any other RespondWithJsonError -> 500
- Starlette HTTPException -> its own status code, ``detail`` as error text
- FastAPI RequestValidationError -> 422
- any other exception -> 500, with internal details hidden in production
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from respondwithjson.api.writer import respond_with_error
from respondwithjson.core.config import get_settings
from respondwithjson.core.exceptions import (
    DecodeError,
    FieldValidationError,
    RespondWithJsonError,
)


def status_for(exc: RespondWithJsonError) -> int:
    """Map a library exception to an HTTP status code.

    Args:
        exc: The exception to map

    Returns:
        int: 400 for decode errors, 422 for field validation errors, 500 otherwise
    """
    if isinstance(exc, DecodeError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, FieldValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def respondwithjson_error_handler(request: Request, exc: Exception) -> Response:
    """Handle RespondWithJsonError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RespondWithJsonError exception to handle

    Returns:
        Response: EnvelopeResponse with the error message

    Raises:
        TypeError: If exc is not a RespondWithJsonError instance
    """
    if not isinstance(exc, RespondWithJsonError):
        raise TypeError(f"Expected RespondWithJsonError, got {type(exc).__name__}")

    status_code = status_for(exc)
    log = (
        logger.warning
        if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
        else logger.error
    )
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        error_code=exc.error_code,
        request_method=request.method,
        request_path=request.url.path,
        status_code=status_code,
    )

    return respond_with_error(status_code, exc)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: EnvelopeResponse listing the failing fields

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    problems = []
    for error in exc.errors():
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        problems.append(f"{field_name}: {error.get('msg', 'Invalid value')}")

    logger.warning(
        "Request validation failed",
        request_method=request.method,
        request_path=request.url.path,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        validation_errors=problems,
    )

    return respond_with_error(
        status.HTTP_422_UNPROCESSABLE_ENTITY, Exception("; ".join(problems))
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: EnvelopeResponse with the exception detail as error text

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    logger.warning(
        "HTTP exception",
        request_method=request.method,
        request_path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail,
    )

    response = respond_with_error(exc.status_code, Exception(str(exc.detail)))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle generic exceptions.

    In production the error text names only the exception type.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: EnvelopeResponse with status 500
    """
    logger.exception(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        request_method=request.method,
        request_path=request.url.path,
    )

    if get_settings().environment == "production":
        reported = Exception(f"internal server error: {type(exc).__name__}")
    else:
        reported = exc

    return respond_with_error(status.HTTP_500_INTERNAL_SERVER_ERROR, reported)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(RespondWithJsonError, respondwithjson_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
