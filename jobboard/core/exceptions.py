"""Error taxonomy for the data-access gateway.

Every failure the gateway can experience falls into one of a handful of
categories, each with a fixed error code and severity:

- **ConfigurationError**: required configuration is missing or unusable.
  Fatal; raised to the caller instead of being wrapped in a result envelope.
- **DatabaseConnectionError**: the shared connection could not be established.
  Recovered at the action boundary; the next acquisition retries.
- **OperationError**: a single data operation failed (driver fault, constraint
  violation, bad query).
- **ValidationError**: an action payload did not satisfy its field schema.
- **PaymentGatewayError**: the payment provider rejected or failed a call.

A record that does not exist is not an error anywhere in this package.

The base class keeps the full detail of a failure (context, cause, stack
fingerprint) for structured logs. None of that detail crosses the action
boundary; callers only ever see a fixed human-readable message.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the gateway."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Required configuration is missing or invalid."""

    CONNECTION_ERROR = "CONNECTION_ERROR"
    """The database connection could not be established."""

    OPERATION_ERROR = "OPERATION_ERROR"
    """A data operation failed after the connection was acquired."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    PAYMENT_ERROR = "PAYMENT_ERROR"
    """The payment provider call failed."""

    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"
    """No action is registered under the requested name."""


class Severity(Enum):
    """Severity levels used to pick log levels and alerting."""

    LOW = "LOW"
    """Expected failures caused by caller input."""

    MEDIUM = "MEDIUM"
    """Failures affecting a single operation."""

    HIGH = "HIGH"
    """Failures affecting every operation until resolved."""

    CRITICAL = "CRITICAL"
    """The process cannot serve requests without operator action."""


class JobboardError(Exception):
    """Base exception class for all gateway exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for grouping similar errors in log search.

        Returns:
            str: A short hash of the error type, code and raising location.
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "jobboard/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error occurs during normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error needs operator attention (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ConfigurationError(JobboardError):
    """Raised when required configuration is missing or unusable.

    Raised on first use of the affected resource, not at process start, and
    never converted into a result envelope.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.CRITICAL, context, cause)


class DatabaseConnectionError(JobboardError):
    """Raised when the shared database connection cannot be established."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.CONNECTION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class OperationError(JobboardError):
    """Raised when a single data operation fails."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.OPERATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)


class ValidationError(JobboardError):
    """Raised when an action payload does not satisfy its field schema."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class PaymentGatewayError(JobboardError):
    """Raised when the payment provider call fails."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.PAYMENT_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class ActionNotFoundError(JobboardError):
    """Raised by the RPC surface when no action has the requested name."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.ACTION_NOT_FOUND,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)
