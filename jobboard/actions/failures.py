"""Mapping from internal errors to failure envelopes.

This is the only place where a failure turns into something a caller sees.
The full error (type, message, context, cause) is logged with sensitive
fields redacted; the envelope carries only the fixed message of the action
that failed.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from jobboard.actions.envelope import ActionResult
from jobboard.core.error_context import sanitize_error_context
from jobboard.core.exceptions import JobboardError, OperationError, Severity
from jobboard.core.types import LogContext


def to_gateway_error(error: Exception) -> JobboardError:
    """Classify an arbitrary exception into the gateway's error taxonomy.

    Args:
        error: Exception raised while running an action.

    Returns:
        JobboardError: ``error`` itself when already classified, otherwise an
            ``OperationError`` wrapping it.
    """
    if isinstance(error, JobboardError):
        return error
    if isinstance(error, SQLAlchemyError):
        msg = f"Database operation failed: {type(error).__name__}"
        return OperationError(msg, cause=error)
    msg = f"Unexpected error during operation: {type(error).__name__}"
    return OperationError(msg, cause=error)


def failure_result(
    error: Exception, message: str, context: LogContext | None = None
) -> ActionResult:
    """Log ``error`` in full and return the failure envelope for ``message``.

    Args:
        error: The failure to report.
        message: Fixed, user-displayable message of the failed action.
        context: Extra detail for the log entry only (payload, query).

    Returns:
        ActionResult: ``{"success": False, "message": message}``.
    """
    gateway_error = to_gateway_error(error)
    log_context = sanitize_error_context(
        gateway_error,
        {
            **(context or {}),
            "error_code": gateway_error.error_code,
            "severity": gateway_error.severity.value,
            "fingerprint": gateway_error.fingerprint,
        },
    )
    if gateway_error.cause is not None:
        log_context["cause_type"] = type(gateway_error.cause).__name__
        log_context["cause_message"] = str(gateway_error.cause)

    if gateway_error.severity is Severity.LOW:
        logger.bind(**log_context).warning("{}: {}", message, gateway_error.message)
    else:
        logger.opt(exception=gateway_error).bind(**log_context).error(
            "{}: {}", message, gateway_error.message
        )

    return ActionResult.fail(message)
