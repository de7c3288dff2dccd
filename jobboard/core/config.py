"""Centralized configuration management with environment-aware defaults.

Configuration is read with Pydantic Settings, so every value is typed and
validated, can come from the environment or a ``.env`` file, and nested
sections are addressed with the ``__`` delimiter
(``DATABASE_CONFIG__DATABASE_URL``, ``PAYMENT_CONFIG__SECRET_KEY``).

The database endpoint is deliberately optional at load time. A process may
start, serve health checks and report itself degraded without it; the
connection manager raises a ``ConfigurationError`` on the first attempt to
acquire a connection when the endpoint is still missing.

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DATABASE_SCHEMES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    enable_sql_logging: bool = Field(
        default=False,
        description="Enable slow query logging through cursor events",
    )
    slow_query_threshold_ms: int = Field(
        default=100,
        gt=0,
        description="Slow query threshold in milliseconds",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
            "email",
        ],
        description="Field names to redact",
    )


class DatabaseConfig(BaseModel):
    """Database configuration settings."""

    database_url: str | None = Field(
        default=None,
        description="Database endpoint (postgresql+asyncpg or sqlite+aiosqlite URL)",
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of connections to maintain in the pool",
    )
    max_overflow: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Maximum overflow connections above pool_size",
    )
    pool_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout in seconds for acquiring a connection from the pool",
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Whether to test pooled connections before using them",
    )
    echo: bool = Field(
        default=False,
        description="Whether to log SQL statements (use only for debugging)",
    )
    create_tables: bool = Field(
        default=False,
        description="Create missing tables once the connection is established",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Treat an empty endpoint the same as a missing one."""
        if v == "":
            return None
        return v

    @field_validator("database_url", mode="after")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        """Validate the endpoint uses an async driver."""
        if v is not None and not v.startswith(SUPPORTED_DATABASE_SCHEMES):
            msg = (
                "Database URL must use postgresql+asyncpg:// or "
                "sqlite+aiosqlite:// for async support"
            )
            raise ValueError(msg)
        return v

    @property
    def is_postgres(self) -> bool:
        """Whether the configured endpoint targets PostgreSQL."""
        return bool(self.database_url) and self.database_url.startswith(
            "postgresql+asyncpg://"
        )


class PaymentConfig(BaseModel):
    """Payment provider configuration."""

    secret_key: SecretStr | None = Field(
        default=None,
        description="Stripe secret API key",
    )
    api_base: str = Field(
        default="https://api.stripe.com",
        description="Stripe API base URL",
    )
    currency: str = Field(default="inr", description="Currency for recurring prices")
    billing_interval: Literal["day", "week", "month", "year"] = Field(
        default="year",
        description="Billing interval for recurring prices",
    )
    product_name: str = Field(
        default="Premium Plan",
        description="Product label attached to recurring prices",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for provider calls",
    )


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Jobboard", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web application, used for checkout redirects",
    )

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")
    docs_url: str | None = Field(default="/docs", description="Swagger UI URL")
    openapi_url: str | None = Field(
        default="/openapi.json", description="OpenAPI schema URL"
    )

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    database_config: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    payment_config: PaymentConfig = Field(
        default_factory=PaymentConfig, description="Payment provider configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Serverless hosts collect stdout as structured records
        if os.getenv("K_SERVICE") or os.getenv("AWS_LAMBDA_FUNCTION_NAME"):
            return "json"
        if self.environment == "development":
            return "console"
        return "json"

    @field_validator("docs_url", "openapi_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v

    @field_validator("app_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the application URL so paths can be appended."""
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
