"""
Document embedding Celery task.

Async task: embed_document(document_id, user_id)
Flow: load document -> chunk -> embed -> replace chunks -> update status

Dependencies: ragcore.workers, ragcore.application
System role: Async document embedding task
"""

import asyncio
import logging
from uuid import UUID

from ragcore.core.chunking import TextChunker
from ragcore.core.exceptions import EmbeddingError, ProviderError, ValidationError
from ragcore.workers import celery_app
from ragcore.workers.runtime import retry_countdown, worker_runtime

logger = logging.getLogger(__name__)


async def _embed_document(
    document_id: UUID,
    user_id: UUID,
    chunk_size: int | None,
    overlap: int | None,
) -> dict:
    async with worker_runtime() as runtime:
        chunker = None
        if chunk_size is not None or overlap is not None:
            chunker = TextChunker().with_policy(chunk_size, overlap)
        document = await runtime.pipeline.process_document(document_id, user_id, chunker=chunker)
        return {
            "document_id": str(document.id),
            "status": document.status.value,
            "chunk_count": document.chunk_count,
        }


@celery_app.task(bind=True, max_retries=5)
def embed_document(
    self,
    document_id: str,
    user_id: str,
    chunk_size: int | None = None,
    overlap: int | None = None,
) -> dict:
    """
    Chunk and embed a document asynchronously.

    Transient provider errors (429/503) retry the task with backoff. Other
    failures leave the document in ERROR and finish the task.

    Args:
        document_id: Document UUID as string
        user_id: Owner UUID as string
        chunk_size: Chunk size override
        overlap: Chunk overlap override

    Returns:
        dict: Document id, final status and chunk count
    """
    try:
        return asyncio.run(
            _embed_document(UUID(document_id), UUID(user_id), chunk_size, overlap)
        )
    except ProviderError as e:
        if e.is_transient:
            raise self.retry(exc=e, countdown=retry_countdown(self.request.retries))
        logger.error(
            f"{__name__}:embed_document - Provider failure: {e.describe()}",
            extra={"document_id": document_id},
        )
        return {"document_id": document_id, "status": "error", "error": e.describe()}
    except (EmbeddingError, ValidationError) as e:
        logger.error(
            f"{__name__}:embed_document - Embedding failure: {e.message}",
            extra={"document_id": document_id},
        )
        return {"document_id": document_id, "status": "error", "error": e.message}
