"""
Embedding pipeline orchestrator.

Chunks documents, embeds chunks through the shared EmbedQueue, and replaces a
document's chunks atomically with its status update.

Flow: document → TextChunker → EmbedQueue → provider → chunk store

Dependencies: sqlalchemy, ragcore.core, ragcore.boundary.db
System role: Document embedding lifecycle
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services.collection_service import CollectionService, extract_space_id
from ragcore.boundary.db.CRUD.chunk_crud import chunk_crud
from ragcore.boundary.db.CRUD.collection_crud import collection_crud
from ragcore.boundary.db.CRUD.document_crud import document_crud
from ragcore.boundary.db.models import DocumentModel, DocumentStatus
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.core.chunking import ChunkDraft, TextChunker
from ragcore.core.content_hash import content_hash
from ragcore.core.embed_queue import EmbedQueue
from ragcore.core.exceptions import EmbeddingError, ProviderError, RagException
from ragcore.models.document import DocumentCreate

logger = logging.getLogger(__name__)

DOCUMENT_INPUT_TYPE = "search_document"


@dataclass
class IngestOutcome:
    """Result of a content update: whether anything was rewritten."""

    status: Literal["unchanged", "updated"]
    document: DocumentModel


class EmbeddingPipeline:
    """
    Turns document content into embedded chunks.

    Provider failures leave the document in ERROR with a readable message and
    are re-raised so the job queue can retry. No partial chunk sets are ever
    written.
    """

    def __init__(
        self,
        db: AsyncSession,
        embed_queue: EmbedQueue,
        chunker: TextChunker | None = None,
        config_provider: EmbeddingConfigProvider | None = None,
        error_message_max_chars: int = 10_000,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            db: AsyncSession for the unit of work
            embed_queue: Shared batching queue in front of the provider
            chunker: Default chunking policy
            config_provider: Active embedding model
            error_message_max_chars: Cap for stored error messages
        """
        self.db = db
        self._queue = embed_queue
        self._chunker = chunker or TextChunker()
        self._config_provider = config_provider or EmbeddingConfigProvider()
        self.store = CollectionService(db, self._config_provider)
        self._error_message_max_chars = error_message_max_chars

    async def embed_chunks(
        self,
        document_id: UUID,
        chunks: Sequence[ChunkDraft | dict[str, Any]],
        user_id: UUID,
        dimensions: int | None = None,
        adopt_active_dimension: bool = False,
    ) -> DocumentModel:
        """
        Embed chunks and replace the document's stored chunks.

        Steps:
        1. Resolve document → source → collection (all owned by user_id)
        2. One batched queue call with input_type "search_document"
        3. Verify every vector has the target dimension
        4. In one transaction: delete old chunks, insert new, mark EMBEDDED
           (and move the collection to the target dimension when adopting)

        Args:
            document_id: Target document
            chunks: Chunk drafts (content, position, token_count, metadata)
            user_id: Owner of the document
            dimensions: Override for the collection's embedding dimension
            adopt_active_dimension: Embed at the active model's dimension and
                record it on the collection (corpus rebuild after a model switch)

        Returns:
            DocumentModel: Document marked EMBEDDED with its new chunk_count

        Raises:
            NotFoundError: If any level of the tree is missing or not owned
            ProviderError: If the provider failed (document marked ERROR)
            EmbeddingError: If vectors came back malformed (document marked ERROR)
            RagException: If the queue rejected the submission (document marked ERROR)
        """
        document = await self.store.get_document(document_id, user_id)
        source = await self.store.get_source(document.source_id, user_id)
        collection = await self.store.get_collection(source.collection_id, user_id)
        if adopt_active_dimension:
            dimension = dimensions or self._config_provider.get().dimension
        else:
            dimension = dimensions or collection.embedding_dimension

        drafts = [c if isinstance(c, ChunkDraft) else ChunkDraft.model_validate(c) for c in chunks]
        texts = [draft.content for draft in drafts]

        try:
            vectors = await self._queue.embed(
                texts,
                input_type=DOCUMENT_INPUT_TYPE,
                dimensions=dimension,
                user_id=user_id,
            )
            self._verify_vectors(vectors, len(texts), dimension, document_id)
        except ProviderError as e:
            await self._mark_failed(document, e.describe())
            raise
        except RagException as e:
            await self._mark_failed(document, e.message)
            raise

        rows = [
            {
                "document_id": document.id,
                "content": draft.content,
                "content_hash": content_hash(draft.content),
                "position": draft.position,
                "token_count": draft.token_count,
                "chunk_metadata": draft.metadata,
                "embedding": list(vector),
            }
            for draft, vector in zip(drafts, vectors)
        ]

        try:
            await chunk_crud.delete_by_document(self.db, document.id)
            await chunk_crud.bulk_insert(self.db, rows)
            await document_crud.mark_embedded(self.db, document, len(rows))
            if adopt_active_dimension and collection.embedding_dimension != dimension:
                await collection_crud.update_instance(self.db, collection, embedding_dimension=dimension)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:embed_chunks - Document embedded",
            extra={
                "document_id": str(document.id),
                "chunk_count": len(rows),
                "dimension": dimension,
            },
        )
        return document

    async def process_document(
        self,
        document_id: UUID,
        user_id: UUID,
        chunker: TextChunker | None = None,
        adopt_active_dimension: bool = False,
    ) -> DocumentModel:
        """
        Chunk a document's current content and embed it.

        Blank content clears the document's chunks and marks it EMBEDDED with
        chunk_count 0 without calling the provider.

        Args:
            document_id: Target document
            user_id: Owner
            chunker: Per-call chunking policy
            adopt_active_dimension: See embed_chunks

        Returns:
            DocumentModel: Updated document
        """
        document = await self.store.get_document(document_id, user_id)
        drafts = (chunker or self._chunker).chunk(document.content)

        if not drafts:
            await chunk_crud.delete_by_document(self.db, document.id)
            await document_crud.mark_embedded(self.db, document, 0)
            await self.db.commit()
            return document

        return await self.embed_chunks(
            document.id, drafts, user_id, adopt_active_dimension=adopt_active_dimension
        )

    async def ingest_document(
        self,
        source_id: UUID,
        attrs: dict[str, Any] | DocumentCreate,
        user_id: UUID,
        chunker: TextChunker | None = None,
    ) -> DocumentModel:
        """Create a document and embed it."""
        document = await self.store.create_document(source_id, attrs, user_id)
        return await self.process_document(document.id, user_id, chunker=chunker)

    async def update_document_content(
        self,
        document_id: UUID,
        content: str,
        user_id: UUID,
        metadata: dict[str, Any] | None = None,
        chunker: TextChunker | None = None,
    ) -> IngestOutcome:
        """
        Replace a document's content and re-embed it when it changed.

        Identical content (same SHA-256) performs no writes and no provider
        call.

        Args:
            document_id: Target document
            content: New content
            user_id: Owner
            metadata: Metadata keys merged into the document's metadata
            chunker: Per-call chunking policy

        Returns:
            IngestOutcome: "unchanged" or "updated" with the document
        """
        document = await self.store.get_document(document_id, user_id)
        new_hash = content_hash(content)
        if new_hash == document.content_hash:
            logger.info(
                f"{__name__}:update_document_content - Content unchanged",
                extra={"document_id": str(document.id)},
            )
            return IngestOutcome("unchanged", document)

        changes: dict[str, Any] = {
            "content": content,
            "content_hash": new_hash,
            "status": DocumentStatus.PENDING,
            "error_message": None,
        }
        if metadata:
            merged = {**(document.doc_metadata or {}), **metadata}
            space_id = extract_space_id(metadata)
            if space_id is not None:
                merged["wiki_space_id"] = str(space_id)
                merged.pop("space_id", None)
                changes["space_id"] = space_id
            changes["doc_metadata"] = merged

        # Old chunks stay searchable until embed_chunks replaces them.
        await document_crud.update_instance(self.db, document, **changes)
        await self.db.commit()

        document = await self.process_document(document.id, user_id, chunker=chunker)
        return IngestOutcome("updated", document)

    def _verify_vectors(
        self,
        vectors: list[list[float]],
        expected_count: int,
        dimension: int,
        document_id: UUID,
    ) -> None:
        if len(vectors) != expected_count:
            raise EmbeddingError(
                f"expected {expected_count} vectors, got {len(vectors)}",
                document_id=str(document_id),
            )
        for vector in vectors:
            if len(vector) != dimension:
                raise EmbeddingError(
                    f"expected {dimension}-dimensional vectors, got {len(vector)}",
                    document_id=str(document_id),
                )

    async def _mark_failed(self, document: DocumentModel, message: str) -> None:
        message = (message or "embedding failed")[: self._error_message_max_chars]
        logger.warning(
            f"{__name__}:_mark_failed - Embedding failed",
            extra={"document_id": str(document.id), "error_msg": message[:200]},
        )
        await document_crud.mark_failed(self.db, document, message)
        await self.db.commit()
