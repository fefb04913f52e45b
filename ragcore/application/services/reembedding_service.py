"""
Corpus re-embedding after an embedding model change.

clear_all_embeddings() invalidates every vector and resets embedded documents
to pending in one transaction. rebuild_batch() then works through pending
documents that previously had chunks; pending status is the only checkpoint,
so a rebuild can stop and resume at any document boundary.

Dependencies: sqlalchemy, ragcore.boundary.db, ragcore.application.services
System role: Re-embedding manager
"""

import logging
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services.embedding_pipeline import EmbeddingPipeline
from ragcore.boundary.db.CRUD.chunk_crud import chunk_crud
from ragcore.boundary.db.CRUD.document_crud import document_crud
from ragcore.boundary.db.models import DocumentModel
from ragcore.core.chunking import ChunkDraft
from ragcore.core.exceptions import ProviderError, RagException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReembedCounts:
    chunks_cleared: int
    documents_reset: int


@dataclass(frozen=True)
class RebuildProgress:
    """Outcome of one rebuild batch."""

    processed: int
    failed: int
    remaining: bool


class ReembeddingService:
    """Invalidates and rebuilds embeddings across all collections."""

    def __init__(self, db: AsyncSession, pipeline: EmbeddingPipeline | None = None) -> None:
        """
        Initialize re-embedding service.

        Args:
            db: AsyncSession for the unit of work
            pipeline: Embedding pipeline (required for rebuild_batch)
        """
        self.db = db
        self._pipeline = pipeline

    async def clear_all_embeddings(self) -> ReembedCounts:
        """
        Null every chunk embedding and reset embedded documents to pending.

        Both statements commit together. Running it twice in a row reports
        zero on the second run.

        Returns:
            ReembedCounts: Chunks cleared and documents reset
        """
        try:
            chunks_cleared = await chunk_crud.clear_embeddings(self.db)
            documents_reset = await document_crud.reset_embedded_to_pending(self.db)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:clear_all_embeddings - Embeddings cleared",
            extra={"chunks_cleared": chunks_cleared, "documents_reset": documents_reset},
        )
        return ReembedCounts(chunks_cleared=chunks_cleared, documents_reset=documents_reset)

    async def list_documents_for_reembedding(
        self,
        limit: int,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        return await document_crud.list_pending_with_chunks(self.db, limit, offset)

    async def total_chunk_count(self) -> int:
        return await chunk_crud.count(self.db)

    async def rebuild_batch(self, user_id: UUID | None, batch_size: int = 10) -> RebuildProgress:
        """
        Re-embed the next page of pending documents.

        Transient provider errors (429/503) propagate so the job retries the
        batch. Any other failure (including a queue rejection) leaves that
        document in ERROR and moves on.

        Args:
            user_id: Administrator who started the rebuild (for logs)
            batch_size: Documents per batch

        Returns:
            RebuildProgress: Counts and whether more work remains

        Raises:
            ProviderError: On transient provider errors
        """
        if self._pipeline is None:
            raise RuntimeError("rebuild_batch requires an EmbeddingPipeline")

        documents = await self.list_documents_for_reembedding(batch_size, 0)
        processed = failed = 0
        for document in documents:
            try:
                await self._rebuild_document(document)
                processed += 1
            except ProviderError as e:
                if e.is_transient:
                    raise
                failed += 1
                logger.warning(
                    f"{__name__}:rebuild_batch - Document failed: {e.describe()}",
                    extra={"document_id": str(document.id)},
                )
            except RagException as e:
                failed += 1
                logger.warning(
                    f"{__name__}:rebuild_batch - Document failed: {e.message}",
                    extra={"document_id": str(document.id)},
                )

        remaining = bool(await self.list_documents_for_reembedding(1, 0))
        logger.info(
            f"{__name__}:rebuild_batch - Batch complete",
            extra={
                "requested_by": str(user_id) if user_id else None,
                "processed": processed,
                "failed": failed,
                "remaining": remaining,
            },
        )
        return RebuildProgress(processed=processed, failed=failed, remaining=remaining)

    async def _rebuild_document(self, document: DocumentModel) -> DocumentModel:
        # Documents with content are regenerated from it; chunk-only documents
        # (pushed by sync) re-embed their stored chunk texts. Either way the
        # vectors take the active model's dimension and the collection follows.
        if document.content and document.content.strip():
            return await self._pipeline.process_document(
                document.id, document.user_id, adopt_active_dimension=True
            )

        stored = await chunk_crud.get_by_document(self.db, document.id)
        drafts = [
            ChunkDraft(
                content=chunk.content,
                position=chunk.position,
                token_count=chunk.token_count,
                metadata=chunk.chunk_metadata or {},
            )
            for chunk in stored
        ]
        return await self._pipeline.embed_chunks(
            document.id, drafts, document.user_id, adopt_active_dimension=True
        )
