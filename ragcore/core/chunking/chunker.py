"""
Text chunking using RecursiveCharacterTextSplitter.

Splits document content into ordered, bounded-size chunks with overlap.
Output is deterministic for identical content and policy, which idempotent
re-ingestion relies on.

Dependencies: langchain_text_splitters
System role: First stage of the embedding pipeline
"""

from langchain_text_splitters import RecursiveCharacterTextSplitter
from pydantic import BaseModel, Field

from ragcore.core.content_hash import estimate_token_count
from ragcore.core.exceptions import ValidationError


class ChunkDraft(BaseModel):
    """Chunk produced by the chunker, not yet embedded."""

    content: str = Field(description="Chunk text content")
    position: int = Field(description="Zero-based order within the document")
    token_count: int | None = Field(default=None, description="Estimated token count")
    metadata: dict = Field(default_factory=dict, description="Chunk metadata (start offset)")


class TextChunker:
    """Split text into chunks using RecursiveCharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunker with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks

        Raises:
            ValidationError: When the policy is not satisfiable
        """
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be positive", field="chunk_size")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValidationError(
                "chunk_overlap must be non-negative and smaller than chunk_size",
                field="chunk_overlap",
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            add_start_index=True,
            length_function=len,
        )

    def with_policy(
        self,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
    ) -> "TextChunker":
        """Return a chunker with per-call overrides applied."""
        if chunk_size is None and chunk_overlap is None:
            return self
        return TextChunker(
            chunk_size=chunk_size if chunk_size is not None else self.chunk_size,
            chunk_overlap=chunk_overlap if chunk_overlap is not None else self.chunk_overlap,
        )

    def chunk(self, content: str | None) -> list[ChunkDraft]:
        """
        Split content into ordered chunks.

        Args:
            content: Raw document text

        Returns:
            list[ChunkDraft]: Chunks in document order; empty for blank content
        """
        if not content or not content.strip():
            return []

        documents = self._splitter.create_documents([content])
        return [
            ChunkDraft(
                content=doc.page_content,
                position=position,
                token_count=estimate_token_count([doc.page_content]),
                metadata={"start_index": doc.metadata.get("start_index", 0)},
            )
            for position, doc in enumerate(documents)
        ]
