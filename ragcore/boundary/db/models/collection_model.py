"""
Collection ORM model.

A named, user-owned embedding namespace with a fixed vector dimension.

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Top-level container of the retrieval data model
"""

import uuid

from sqlalchemy import Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragcore.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CollectionModel(Base, UUIDMixin, TimestampMixin):
    """
    Collection ORM model.

    Every chunk stored under the collection's sources has a vector of
    embedding_dimension floats (or no vector yet). The dimension only changes
    by recreating the collection.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owner UUID
        name: Collection name, unique per owner
        description: Optional free text
        embedding_dimension: Vector length for every chunk in the collection

    Relationships:
        sources: Child SourceModels (cascade delete)
    """

    __tablename__ = "rag_collections"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_rag_collections_user_name"),)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    embedding_dimension: Mapped[int] = mapped_column(Integer, nullable=False, default=1024)

    # Relationships
    sources = relationship(
        "SourceModel",
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
