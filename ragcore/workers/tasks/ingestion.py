"""
URL ingestion Celery task.

Async task: ingest_url(collection_id, url, user_id, ...)
Flow: fetch -> find/create url source -> create or update document -> chunk -> embed

Dependencies: httpx, ragcore.workers, ragcore.application
System role: Async URL ingestion task
"""

import asyncio
import logging
from uuid import UUID

from ragcore.application.services.ingest_service import IngestService
from ragcore.core.exceptions import EmbeddingError, ProviderError
from ragcore.observability.log_utils import log_with_context
from ragcore.workers import celery_app
from ragcore.workers.runtime import retry_countdown, worker_runtime

logger = logging.getLogger(__name__)


async def _ingest_url(
    collection_id: UUID,
    url: str,
    user_id: UUID,
    method: str,
    headers: dict[str, str],
    chunk_size: int | None,
    overlap: int | None,
) -> dict:
    async with worker_runtime() as runtime:
        service = IngestService(runtime.pipeline)
        result = await service.process_url(
            collection_id,
            url,
            user_id,
            method=method,
            headers=headers,
            chunk_size=chunk_size,
            overlap=overlap,
        )
        return {
            "document_id": str(result.document.id),
            "outcome": result.status,
            "status": result.document.status.value,
            "chunk_count": result.document.chunk_count,
        }


@celery_app.task(bind=True, max_retries=5)
def ingest_url(
    self,
    collection_id: str,
    url: str,
    user_id: str,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    chunk_size: int | None = None,
    overlap: int | None = None,
) -> dict:
    """
    Fetch a URL into a collection and embed it.

    Args:
        collection_id: Collection UUID as string
        url: URL to fetch
        user_id: Owner UUID as string
        method: HTTP method
        headers: Request headers
        chunk_size: Chunk size override
        overlap: Chunk overlap override

    Returns:
        dict: Document id, outcome (created/updated/unchanged), status and chunk count
    """
    try:
        return asyncio.run(
            _ingest_url(
                UUID(collection_id),
                url,
                UUID(user_id),
                method,
                headers or {},
                chunk_size,
                overlap,
            )
        )
    except ProviderError as e:
        if e.is_transient:
            raise self.retry(exc=e, countdown=retry_countdown(self.request.retries))
        log_with_context(
            logger,
            logging.ERROR,
            f"{__name__}:ingest_url - Ingestion failed",
            url=url,
            collection_id=collection_id,
            error=e.describe(),
        )
        return {"url": url, "status": "error", "error": e.describe()}
    except EmbeddingError as e:
        log_with_context(
            logger,
            logging.ERROR,
            f"{__name__}:ingest_url - Embedding failed",
            url=url,
            collection_id=collection_id,
            error=e.message,
        )
        return {"url": url, "status": "error", "error": e.message}
