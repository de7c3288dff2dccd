"""Field allow-lists for action payloads and records.

Each entity has three schemas:

- ``<Entity>Create``: fields a caller may set when creating a record
- ``<Entity>Update``: fields a caller may patch, plus the ``_id`` to match
- ``<Entity>Record``: how a stored record is presented back to callers

Payloads use the web client's camelCase field names. Input fields outside the
allow-list are dropped (``extra="ignore"``); only the enumerated fields ever
reach storage. Records are rendered as plain JSON-compatible dicts with the
identity under ``_id`` and ISO-8601 timestamps.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jobboard.core.types import Record


class FieldSchema(BaseModel):
    """Base for payload schemas: camelCase on the wire, unknown fields dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UpdateSchema(FieldSchema):
    """Base for update payloads, which must name the record to patch."""

    id: str = Field(alias="_id", min_length=1)


class RecordSchema(FieldSchema):
    """Base for record presentation."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(alias="_id")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_payload(self) -> Record:
        """Render as a plain JSON-compatible dict."""
        return self.model_dump(mode="json", by_alias=True)


# --- Profile ---


class ProfileFields(FieldSchema):
    user_id: str | None = None
    role: str | None = None
    email: str | None = None
    is_premium_user: bool | None = None
    member_ship_type: str | None = None
    member_ship_start_date: str | None = None
    member_ship_end_date: str | None = None
    recruiter_info: dict[str, Any] | None = None
    candidate_info: dict[str, Any] | None = None


class ProfileCreate(ProfileFields):
    user_id: str
    is_premium_user: bool = False


class ProfileUpdate(ProfileFields, UpdateSchema):
    pass


class ProfileRecord(ProfileFields, RecordSchema):
    pass


# --- Job ---


class JobFields(FieldSchema):
    company_name: str | None = None
    title: str | None = None
    location: str | None = None
    type: str | None = None
    experience: str | None = None
    description: str | None = None
    skills: str | None = None
    recruiter_id: str | None = None
    applicants: list[dict[str, Any]] | None = None


class JobCreate(JobFields):
    recruiter_id: str
    applicants: list[dict[str, Any]] = Field(default_factory=list)


class JobRecord(JobFields, RecordSchema):
    pass


# --- Application ---


class ApplicationFields(FieldSchema):
    recruiter_user_id: str | None = Field(default=None, alias="recruiterUserID")
    name: str | None = None
    email: str | None = None
    candidate_user_id: str | None = Field(default=None, alias="candidateUserID")
    status: str | None = None
    job_id: str | None = Field(default=None, alias="jobID")
    job_applied_date: str | None = None


class ApplicationCreate(ApplicationFields):
    recruiter_user_id: str = Field(alias="recruiterUserID")
    candidate_user_id: str = Field(alias="candidateUserID")


class ApplicationUpdate(ApplicationFields, UpdateSchema):
    pass


class ApplicationRecord(ApplicationFields, RecordSchema):
    pass


# --- Feed ---


class FeedPostFields(FieldSchema):
    user_id: str | None = None
    user_name: str | None = None
    message: str | None = None
    image: str | None = None
    likes: list[dict[str, Any]] | None = None


class FeedPostCreate(FeedPostFields):
    user_id: str
    likes: list[dict[str, Any]] = Field(default_factory=list)


class FeedPostUpdate(FeedPostFields, UpdateSchema):
    pass


class FeedPostRecord(FeedPostFields, RecordSchema):
    pass
