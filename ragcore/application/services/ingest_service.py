"""
URL ingestion.

ingest_url() checks collection ownership and enqueues a background job.
process_url() is the job body: fetch the URL, file it under a per-host `url`
source, create or update the document keyed by metadata.url, then chunk and
embed. Re-fetching unchanged content is a no-op.

Dependencies: httpx, ragcore.application.services, ragcore.boundary.db
System role: URL ingestion orchestration
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal
from urllib.parse import urlparse
from uuid import UUID

import httpx

from ragcore.application.services.embedding_pipeline import EmbeddingPipeline
from ragcore.boundary.db.CRUD.document_crud import document_crud
from ragcore.boundary.db.models import DocumentModel
from ragcore.core.chunking import TextChunker
from ragcore.core.exceptions import ProviderError, ValidationError

logger = logging.getLogger(__name__)

URL_METADATA_KEY = "url"
URL_SOURCE_TYPE = "url"

Enqueue = Callable[[dict[str, Any]], str]


@dataclass
class UrlIngestResult:
    status: Literal["created", "updated", "unchanged"]
    document: DocumentModel


def enqueue_ingest_task(kwargs: dict[str, Any]) -> str:
    """Send the ingest_url Celery task and return its id."""
    from ragcore.workers.tasks.ingestion import ingest_url

    return ingest_url.delay(**kwargs).id


class IngestService:
    """Fetches remote content into a collection."""

    def __init__(
        self,
        pipeline: EmbeddingPipeline,
        enqueue: Enqueue = enqueue_ingest_task,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize ingest service.

        Args:
            pipeline: Embedding pipeline (also provides the store)
            enqueue: Job submitter returning a job id
            http_client: Shared client (tests); a fresh one per fetch otherwise
            timeout: Fetch timeout in seconds
        """
        self.pipeline = pipeline
        self.store = pipeline.store
        self._enqueue = enqueue
        self._http_client = http_client
        self._timeout = timeout

    async def ingest_url(
        self,
        collection_id: UUID,
        url: str,
        user_id: UUID,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        chunk_size: int | None = None,
        overlap: int | None = None,
    ) -> str:
        """
        Enqueue ingestion of a URL into an owned collection.

        Args:
            collection_id: Target collection
            url: URL to fetch
            user_id: Owner
            method: HTTP method
            headers: Request headers
            chunk_size: Chunk size override
            overlap: Chunk overlap override

        Returns:
            str: Background job id

        Raises:
            NotFoundError: If the collection is missing or not owned
            ValidationError: If the chunking override is invalid
        """
        await self.store.get_collection(collection_id, user_id)
        if chunk_size is not None or overlap is not None:
            TextChunker().with_policy(chunk_size, overlap)

        job_id = self._enqueue(
            {
                "collection_id": str(collection_id),
                "url": url,
                "user_id": str(user_id),
                "method": method,
                "headers": headers or {},
                "chunk_size": chunk_size,
                "overlap": overlap,
            }
        )
        logger.info(
            f"{__name__}:ingest_url - Enqueued",
            extra={"collection_id": str(collection_id), "url": url, "job_id": job_id},
        )
        return job_id

    async def process_url(
        self,
        collection_id: UUID,
        url: str,
        user_id: UUID,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        chunk_size: int | None = None,
        overlap: int | None = None,
    ) -> UrlIngestResult:
        """
        Fetch a URL and embed its content.

        Raises:
            NotFoundError: If the collection is missing or not owned
            ProviderError: If the fetch or the embedding failed
        """
        collection = await self.store.get_collection(collection_id, user_id)
        chunker = TextChunker().with_policy(chunk_size, overlap)
        content = await self.fetch(url, method=method, headers=headers)

        host = urlparse(url).hostname or url
        source = await self.store.find_or_create_rag_source_for_source(
            collection.id, host, user_id, source_type=URL_SOURCE_TYPE
        )

        existing = await document_crud.get_by_metadata(
            self.pipeline.db, (URL_METADATA_KEY,), url, source_id=source.id
        )
        if existing is not None:
            outcome = await self.pipeline.update_document_content(
                existing.id, content, user_id, chunker=chunker
            )
            return UrlIngestResult(outcome.status, outcome.document)

        document = await self.pipeline.ingest_document(
            source.id,
            {"title": url[:1024], "content": content, "metadata": {URL_METADATA_KEY: url}},
            user_id,
            chunker=chunker,
        )
        return UrlIngestResult("created", document)

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
    ) -> str:
        """
        Fetch a URL as text.

        Raises:
            ValidationError: If the URL is not http(s)
            ProviderError: On HTTP error status or transport failure
        """
        if urlparse(url).scheme not in ("http", "https"):
            raise ValidationError("Only http and https URLs can be ingested", field="url")

        try:
            if self._http_client is not None:
                response = await self._http_client.request(method, url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await client.request(method, url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                e.response.reason_phrase or "fetch failed",
                status=e.response.status_code,
                provider="url_fetch",
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(str(e) or type(e).__name__, provider="url_fetch") from e

        return response.text
