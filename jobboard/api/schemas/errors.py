"""Error response schemas for the HTTP surface.

Action failures are reported inside the result envelope with HTTP 200; these
schemas cover failures of the surface itself (unknown action, malformed
arguments, missing configuration, unexpected errors).
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(..., description="Name of the service", examples=["Jobboard"])

    version: str = Field(
        ...,
        description="Version of the service",
        examples=["0.1.0"],
    )

    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["ACTION_NOT_FOUND", "VALIDATION_ERROR", "CONFIGURATION_ERROR"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Unknown action 'deleteEverything'"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
        examples=[{"action": "deleteEverything"}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this error response",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )
