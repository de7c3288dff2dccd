"""FastAPI application exposing the server actions over HTTP.

Routes:
- ``POST /actions/{name}``: invoke an action with positional arguments and
  return its result envelope
- ``GET /health``: database connectivity and connection state
- ``GET /info``: application metadata

The database connection is not opened at startup; the first action that
needs it establishes it. Shutdown closes it.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger

from jobboard.actions import invoke
from jobboard.api.constants import ACTIONS_PREFIX
from jobboard.api.middleware.error_handler import register_exception_handlers
from jobboard.api.middleware.request_context import RequestContextMiddleware
from jobboard.api.schemas.actions import ActionRequest
from jobboard.api.utils.responses import ORJSONResponse
from jobboard.core.config import Settings, get_settings
from jobboard.core.logging import setup_logging
from jobboard.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_connection_manager,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # Exception handlers before middleware
    register_exception_handlers(application)
    application.add_middleware(RequestContextMiddleware)

    @application.post(f"{ACTIONS_PREFIX}/{{name}}")
    async def run_action(
        name: str, body: ActionRequest | None = None
    ) -> dict[str, Any]:
        """Invoke the action ``name``.

        Failed actions still answer 200 with ``{"success": false, ...}``;
        only unknown actions, malformed arguments and missing configuration
        produce an error response.

        Args:
            name: Client-facing action name, e.g. ``fetchProfileAction``.
            body: Positional arguments for the action.

        Returns:
            dict[str, Any]: The action's result envelope.
        """
        args = body.args if body is not None else []
        result = await invoke(name, args)
        return result.to_dict()

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring.

        Reports ``degraded`` rather than failing when the database is
        unreachable or not configured.

        Returns:
            dict[str, object]: Status, database connectivity and connection state.
        """
        is_healthy, error_msg = await check_database_connection()
        health_status: dict[str, object] = {
            "status": "healthy" if is_healthy else "degraded",
            "database": is_healthy,
            "connection_state": get_connection_manager().state.value,
        }

        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)

        return health_status

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, Any]:
        """Get application information.

        Args:
            app_settings: Application settings injected via dependency.

        Returns:
            dict[str, Any]: Application name, version and environment.
        """
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    return application


app = create_app()
