"""
Chunk ORM model.

Smallest embedded unit of text. The embedding column is a pgvector vector
without a fixed dimension so collections with different models can coexist;
the collection's embedding_dimension is enforced by the pipeline.

Dependencies: sqlalchemy, pgvector
System role: Vector storage for nearest-neighbor search
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragcore.boundary.db.base import Base, EmbeddingVector, JSONType, UUIDMixin, TimestampMixin


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        document_id: Foreign key to DocumentModel (cascade delete)
        content: Chunk text
        content_hash: SHA-256 of content
        position: Order within the document
        token_count: Estimated token count
        chunk_metadata: Free-form metadata (start offset)
        embedding: Vector, null until embedded or after a model switch

    Relationships:
        document: Parent DocumentModel
    """

    __tablename__ = "rag_chunks"
    __table_args__ = (Index("ix_rag_chunks_document_position", "document_id", "position"),)

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rag_documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    content_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    token_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    chunk_metadata: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)

    embedding: Mapped[list[float] | None] = mapped_column(EmbeddingVector, nullable=True)

    # Relationships
    document = relationship("DocumentModel", back_populates="chunks")
