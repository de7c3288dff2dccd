"""Request and response schemas of the HTTP surface."""

from jobboard.api.schemas.actions import ActionRequest
from jobboard.api.schemas.errors import ErrorResponse, ServiceInfo

__all__ = ["ActionRequest", "ErrorResponse", "ServiceInfo"]
