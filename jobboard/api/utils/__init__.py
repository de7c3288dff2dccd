"""API utilities."""

from jobboard.api.utils.responses import ORJSONResponse

__all__ = ["ORJSONResponse"]
