"""Operation result envelope returned by every action.

Callers branch on ``success``:

- ``{"success": True, "data": ...}``: the operation succeeded. ``data`` may
  be None (single lookup found nothing) or ``[]`` (no matching records); both
  mean "no such record", not failure.
- ``{"success": False, "message": "..."}``: the operation failed. The message
  is fixed per action and safe to display; it never contains error detail.

Update envelopes also report ``matchedCount`` so callers can tell an update
that changed a record from one whose identity matched nothing.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ActionResult(BaseModel):
    """Normalized outcome of a single action."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    data: Any = None
    message: str | None = None
    matched_count: int | None = Field(default=None, alias="matchedCount", ge=0)

    @model_validator(mode="after")
    def check_shape(self) -> Self:
        """Reject envelopes mixing success data with failure messages."""
        if self.success and self.message is not None:
            msg = "A successful result cannot carry a failure message"
            raise ValueError(msg)
        if not self.success:
            if not self.message:
                msg = "A failed result must carry a message"
                raise ValueError(msg)
            if self.data is not None or self.matched_count is not None:
                msg = "A failed result cannot carry data"
                raise ValueError(msg)
        return self

    @classmethod
    def ok(cls, data: Any = None, matched_count: int | None = None) -> Self:  # noqa: ANN401 - records are opaque
        """Build a success envelope."""
        return cls(success=True, data=data, matched_count=matched_count)

    @classmethod
    def fail(cls, message: str) -> Self:
        """Build a failure envelope."""
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        """Render the envelope for callers, omitting absent fields."""
        if not self.success:
            return {"success": False, "message": self.message}

        rendered: dict[str, Any] = {"success": True, "data": self.data}
        if self.matched_count is not None:
            rendered["matchedCount"] = self.matched_count
        return rendered
