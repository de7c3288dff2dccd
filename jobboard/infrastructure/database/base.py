"""SQLAlchemy declarative base and common document fields.

Records are addressed by an opaque string identity generated by the
application (a UUID4 hex string), the same way document stores hand out
object ids. Callers send it back as ``_id`` when updating a record.

Nested structures that belong to a single record (recruiter details,
applicants, likes) are stored in JSON columns, which map to ``JSONB`` on
PostgreSQL.
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, MetaData, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

RECORD_ID_LENGTH = 32

JsonDocument = JSON().with_variant(JSONB(), "postgresql")


def generate_record_id() -> str:
    """Generate a new opaque record identity."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Declarative base with constraint naming conventions."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class BaseModel(Base):
    """Abstract base model with identity and timestamps.

    Provides:
    - String identity generated on insert
    - Automatic created_at timestamp
    - Automatic updated_at timestamp (updates on modification)
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(RECORD_ID_LENGTH),
        primary_key=True,
        default=generate_record_id,
        doc="Opaque record identity exposed to callers as _id",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp when the record was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Timestamp when the record was last updated (UTC)",
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
