"""
SQLAlchemy declarative base, portable column types and mixins.

Every rag_* table shares the UUID primary key and UTC timestamp mixins.
Column types that differ between PostgreSQL and the in-memory SQLite test
database are declared here once.

Dependencies: sqlalchemy, pgvector
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, DateTime, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")

# No fixed dimension: one column holds vectors for every collection's model
EmbeddingVector = Vector()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base; importing ragcore.boundary.db.models registers every table."""


class UUIDMixin:
    """UUID v4 primary key generated client-side, so ids exist before flush."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """UTC creation and modification timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
