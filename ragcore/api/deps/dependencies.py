"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: ragcore.configs, ragcore.application, ragcore.boundary
System role: DI container for service injection
"""

from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services import (
    CollectionService,
    EmbeddingPipeline,
    IngestService,
    ReembeddingService,
    SearchService,
)
from ragcore.boundary.acl import EntityAclAccessControl
from ragcore.boundary.db import get_async_db, get_async_session_factory
from ragcore.boundary.providers import EmbeddingClient, EmbeddingRequestRecorder
from ragcore.configs import Settings, get_settings
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.core.chunking import TextChunker
from ragcore.core.embed_queue import EmbedQueue
from ragcore.core.reranker import Reranker


class ServiceCache:
    """Container for process-wide service instances."""

    def __init__(self):
        self._config_provider = None
        self._embedding_client = None
        self._embed_queue = None
        self._reranker = None

    @property
    def config_provider(self) -> EmbeddingConfigProvider:
        """Get cached embedding config provider."""
        if self._config_provider is None:
            self._config_provider = EmbeddingConfigProvider()
        return self._config_provider

    @property
    def embedding_client(self) -> EmbeddingClient:
        """Get cached embedding client with audit recorder."""
        if self._embedding_client is None:
            self._embedding_client = EmbeddingClient(
                self.config_provider,
                EmbeddingRequestRecorder(get_async_session_factory()),
            )
        return self._embedding_client

    @property
    def embed_queue(self) -> EmbedQueue:
        """Get cached embed queue."""
        if self._embed_queue is None:
            self._embed_queue = EmbedQueue.from_settings(
                self.embedding_client, get_settings().embed_queue
            )
        return self._embed_queue

    @property
    def reranker(self) -> Reranker:
        """Get cached reranker."""
        if self._reranker is None:
            self._reranker = Reranker(self.embedding_client)
        return self._reranker

    async def close(self) -> None:
        """Flush the embed queue and drop all cached instances."""
        if self._embed_queue is not None:
            await self._embed_queue.close()
        self._config_provider = None
        self._embedding_client = None
        self._embed_queue = None
        self._reranker = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_current_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> UUID:
    """
    Resolve the requesting user from the X-User-Id header.

    Raises:
        HTTPException(401): Missing or malformed header
    """
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")


def get_collection_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> CollectionService:
    """
    Get collection service instance.

    Args:
        db: Async database session (injected via Depends)
        cache: Process-wide service cache

    Returns:
        CollectionService: Collection store for this request
    """
    return CollectionService(db=db, config_provider=cache.config_provider)


def get_embedding_pipeline(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> EmbeddingPipeline:
    """
    Get embedding pipeline instance.

    Returns:
        EmbeddingPipeline: Pipeline sharing the process embed queue
    """
    return EmbeddingPipeline(
        db,
        cache.embed_queue,
        chunker=TextChunker(
            chunk_size=settings.retrieval.chunk_size,
            chunk_overlap=settings.retrieval.chunk_overlap,
        ),
        config_provider=cache.config_provider,
        error_message_max_chars=settings.retrieval.error_message_max_chars,
    )


def get_search_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> SearchService:
    """
    Get search service instance.

    Returns:
        SearchService: Search with entity_acls-backed access control
    """
    return SearchService(
        db,
        cache.embedding_client,
        cache.reranker,
        EntityAclAccessControl(db),
        config_provider=cache.config_provider,
        settings=settings.retrieval,
    )


def get_ingest_service(
    pipeline: EmbeddingPipeline = Depends(get_embedding_pipeline),
) -> IngestService:
    """Get URL ingestion service instance."""
    return IngestService(pipeline)


def get_reembedding_service(db: AsyncSession = Depends(get_async_db)) -> ReembeddingService:
    """Get re-embedding service instance."""
    return ReembeddingService(db)
