"""Schemas for remote action invocation."""

from typing import Any

from pydantic import BaseModel, Field


class ActionRequest(BaseModel):
    """Body of ``POST /actions/{name}``.

    The arguments are passed positionally to the action, in the same order
    the in-process function takes them.
    """

    args: list[Any] = Field(
        default_factory=list,
        description="Positional arguments for the action",
        examples=[[{"userId": "user_1", "role": "candidate"}, "/onboard"]],
    )
