"""
Source ORM model.

Logical grouping of documents inside a collection, typically one per
integration ("wiki", a URL host, "manual").

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Second level of the retrieval containment tree
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragcore.boundary.db.base import Base, JSONType, UUIDMixin, TimestampMixin


class SourceModel(Base, UUIDMixin, TimestampMixin):
    """
    Source ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        collection_id: Foreign key to CollectionModel (cascade delete)
        user_id: Owner UUID
        name: Source name, unique per (collection, owner)
        source_type: Origin kind (manual, url, wiki)
        source_metadata: Free-form provenance map

    Relationships:
        collection: Parent CollectionModel
        documents: Child DocumentModels (cascade delete)
    """

    __tablename__ = "rag_sources"
    __table_args__ = (
        UniqueConstraint("collection_id", "name", "user_id", name="uq_rag_sources_collection_name_user"),
    )

    collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rag_collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    source_type: Mapped[str] = mapped_column(String(50), nullable=False, default="manual")

    source_metadata: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)

    # Relationships
    collection = relationship("CollectionModel", back_populates="sources")
    documents = relationship(
        "DocumentModel",
        back_populates="source",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
