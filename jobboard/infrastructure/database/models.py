"""Entity tables for profiles, jobs, applications and feed posts.

The tables only describe storage. Which fields a caller may write, and how
records are presented back, is owned by the field schemas in
``jobboard.actions.schemas``.
"""

from typing import Any

from sqlalchemy import Boolean, String, Text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import Mapped, mapped_column

from jobboard.infrastructure.database.base import Base, BaseModel, JsonDocument

USER_ID_LENGTH = 255
EMAIL_LENGTH = 320
SHORT_TEXT_LENGTH = 255


class Profile(BaseModel):
    """A candidate or recruiter profile, keyed by the auth provider's user id."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), index=True)
    role: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(EMAIL_LENGTH))
    is_premium_user: Mapped[bool] = mapped_column(Boolean, default=False)
    member_ship_type: Mapped[str | None] = mapped_column(String(64))
    member_ship_start_date: Mapped[str | None] = mapped_column(String(64))
    member_ship_end_date: Mapped[str | None] = mapped_column(String(64))
    recruiter_info: Mapped[dict[str, Any] | None] = mapped_column(JsonDocument)
    candidate_info: Mapped[dict[str, Any] | None] = mapped_column(JsonDocument)


class Job(BaseModel):
    """A job posting owned by a recruiter."""

    __tablename__ = "jobs"

    company_name: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    title: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    location: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    type: Mapped[str | None] = mapped_column(String(64))
    experience: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    recruiter_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), index=True)
    applicants: Mapped[list[dict[str, Any]]] = mapped_column(
        JsonDocument, default=list
    )


class Application(BaseModel):
    """A candidate's application to a job."""

    __tablename__ = "applications"

    recruiter_user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH), index=True
    )
    name: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    email: Mapped[str | None] = mapped_column(String(EMAIL_LENGTH))
    candidate_user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH), index=True
    )
    status: Mapped[str | None] = mapped_column(String(64))
    job_id: Mapped[str | None] = mapped_column(String(USER_ID_LENGTH))
    job_applied_date: Mapped[str | None] = mapped_column(String(64))


class FeedPost(BaseModel):
    """A post on the social feed."""

    __tablename__ = "feed_posts"

    user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), index=True)
    user_name: Mapped[str | None] = mapped_column(String(SHORT_TEXT_LENGTH))
    message: Mapped[str | None] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(Text)
    likes: Mapped[list[dict[str, Any]]] = mapped_column(JsonDocument, default=list)


async def create_all_tables(engine: AsyncEngine) -> None:
    """Create any entity tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
