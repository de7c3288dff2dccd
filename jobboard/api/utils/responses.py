"""JSON response class using orjson serialization.

Set as the default response class of the application so envelopes and
error responses are rendered the same way, with native handling of
datetime values and pydantic models.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """FastAPI response class using orjson.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json", by_alias=True)

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)
