"""
Embedding request ORM model.

Append-only audit row written once per provider call. Not read by any
correctness path.

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Provider usage metrics
"""

import uuid

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ragcore.boundary.db.base import Base, UUIDMixin, TimestampMixin


class EmbeddingRequestModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedding request audit model.

    Attributes:
        request_type: "embed" or "rerank"
        model_id: Provider model identifier
        status: "success" or "error"
        input_count: Number of input texts
        token_count: Estimated input tokens
        latency_ms: Wall-clock provider latency
        error_message: Short error description on failure
        user_id: Requesting user, when known
    """

    __tablename__ = "rag_embedding_requests"

    request_type: Mapped[str] = mapped_column(String(20), nullable=False)

    model_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False)

    input_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    token_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    latency_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
