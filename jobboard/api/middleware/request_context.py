"""Request context middleware for correlation IDs.

Extracts the caller's correlation ID (or generates one), opens a correlation
scope for the request, and echoes the ID back in the response headers. The
ID is also kept on ``request.state`` for exception handlers that run after
the scope has closed.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from jobboard.api.constants import CORRELATION_ID_HEADER
from jobboard.core.context import correlation_scope


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to manage request context and correlation IDs."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation ID header.
        """
        with correlation_scope(
            request.headers.get(CORRELATION_ID_HEADER)
        ) as correlation_id:
            request.state.correlation_id = correlation_id
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
