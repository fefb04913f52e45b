"""
Document ORM model.

One ingested unit of content with its embedding lifecycle.

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragcore.boundary.db.base import Base, JSONType, UUIDMixin, TimestampMixin


class DocumentStatus(str, enum.Enum):
    """
    Document embedding lifecycle states.

    PENDING: Created, content changed, or reset by re-embedding
    EMBEDDED: Chunks written with vectors, chunk_count is authoritative
    ERROR: Provider failure; error_message field contains details
    """

    PENDING = "pending"
    EMBEDDED = "embedded"
    ERROR = "error"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking embedding pipeline state.

    Lifecycle: create (PENDING) → chunk + embed (EMBEDDED) or provider failure
    (ERROR). Re-embedding resets EMBEDDED back to PENDING while keeping
    chunk_count, so pending rows with chunk_count > 0 are exactly the
    unfinished rebuild work.

    Attributes:
        id: UUID primary key (auto-generated)
        source_id: Foreign key to SourceModel (cascade delete)
        user_id: Owner UUID; never changes for shared access
        title: Display title
        content: Raw text
        content_hash: SHA-256 of content, used to skip unchanged re-ingests
        status: Current embedding state
        chunk_count: Number of chunks written by the last successful embed
        error_message: Null on success; truncated provider error otherwise
        doc_metadata: Schemaless provenance (wiki_document_id, source_document_id, url)
        space_id: ACL-bearing wiki space, null until known

    Relationships:
        source: Parent SourceModel
        chunks: Child ChunkModels (cascade delete)
    """

    __tablename__ = "rag_documents"
    __table_args__ = (Index("ix_rag_documents_status_chunk_count", "status", "chunk_count"),)

    source_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rag_sources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    content_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    doc_metadata: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)

    space_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    # Relationships
    source = relationship("SourceModel", back_populates="documents")
    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChunkModel.position",
    )
