"""Global exception handlers for the FastAPI application.

Action failures never reach these handlers: they are returned as failure
envelopes. What does reach them is a failure of the surface itself, which is
rendered as an ``ErrorResponse``.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from jobboard.api.schemas.errors import ErrorResponse, ServiceInfo
from jobboard.api.utils.responses import ORJSONResponse
from jobboard.core.config import Settings, get_settings
from jobboard.core.context import current_correlation_id, new_error_id
from jobboard.core.error_context import (
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
)
from jobboard.core.exceptions import (
    ActionNotFoundError,
    ErrorCode,
    JobboardError,
    Severity,
    ValidationError,
)


def _correlation_id(request: Request) -> str | None:
    # Unhandled exceptions reach their handler after the request scope closed
    return getattr(request.state, "correlation_id", None) or current_correlation_id()


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings.

    Args:
        settings: Application settings

    Returns:
        ServiceInfo: Instance with current service metadata
    """
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def _status_code_for(exc: JobboardError) -> int:
    if isinstance(exc, ActionNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def jobboard_error_handler(request: Request, exc: Exception) -> Response:
    """Handle JobboardError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The JobboardError exception to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not a JobboardError instance
    """
    if not isinstance(exc, JobboardError):
        raise TypeError(f"Expected JobboardError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = _correlation_id(request)

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "request_headers": sanitize_headers(dict(request.headers)),
        },
    )

    log = logger.bind(correlation_id=correlation_id, **error_context)
    if exc.severity is Severity.LOW:
        log.warning("Handling {}: {}", type(exc).__name__, exc.message)
    else:
        log.error("Handling {}: {}", type(exc).__name__, exc.message)

    debug_info = None
    if settings.environment == "development":
        debug_info = {
            "stack_trace": exc.stack_trace,
            "exception_type": type(exc).__name__,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=sanitize_dict(exc.context) if exc.context else None,
        correlation_id=correlation_id,
        request_id=new_error_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=_status_code_for(exc),
        content=error_response.model_dump(mode="json"),
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with field-level validation errors

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = _correlation_id(request)

    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        field_errors.setdefault(field_name, []).append(
            error.get("msg", "Invalid value")
        )

    logger.bind(
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
        validation_errors=field_errors,
    ).warning("Request validation failed")

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        correlation_id=correlation_id,
        request_id=new_error_id(),
        severity=Severity.LOW.value,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException (unknown routes, wrong methods).

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = _correlation_id(request)

    severity = (
        Severity.HIGH
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
        else Severity.LOW
    )

    logger.bind(
        correlation_id=correlation_id,
        status=exc.status_code,
        method=request.method,
        path=str(request.url.path),
    ).warning("HTTP exception: {}", exc.detail)

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value
        if severity is Severity.HIGH
        else f"HTTP_{exc.status_code}",
        message=str(exc.detail),
        correlation_id=correlation_id,
        request_id=new_error_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions.

    In production, hides internal error details from clients.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with generic error message
    """
    settings = get_settings()
    correlation_id = _correlation_id(request)

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )

    logger.opt(exception=exc).bind(
        correlation_id=correlation_id, **error_context
    ).error("Unhandled exception: {}", type(exc).__name__)

    if settings.environment == "production":
        message = "An internal server error occurred"
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        correlation_id=correlation_id,
        request_id=new_error_id(),
        severity=Severity.CRITICAL.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(JobboardError, jobboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.debug("Exception handlers registered")
