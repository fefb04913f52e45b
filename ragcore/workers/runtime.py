"""
Per-job async runtime for Celery tasks.

Each task body runs under asyncio.run with its own engine, embedding client
and embed queue, all torn down when the job finishes. The per-tenant rate
limiter is shared by every job in the worker process, so concurrent jobs for
one tenant draw on the same budget.

Dependencies: sqlalchemy, ragcore.boundary, ragcore.application
System role: Wiring of services inside worker processes
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services.embedding_pipeline import EmbeddingPipeline
from ragcore.boundary.db.connection import create_worker_engine, get_async_session_factory
from ragcore.boundary.providers import EmbeddingClient, EmbeddingRequestRecorder
from ragcore.configs import get_settings
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.core.chunking import TextChunker
from ragcore.core.embed_queue import EmbedQueue
from ragcore.core.rate_limiter import TenantRateLimiter


@lru_cache
def get_tenant_limiter() -> TenantRateLimiter:
    """Process-wide per-tenant limiter shared across jobs."""
    return TenantRateLimiter(get_settings().embed_queue.tenant_texts_per_minute)


@dataclass
class WorkerRuntime:
    session: AsyncSession
    pipeline: EmbeddingPipeline
    config_provider: EmbeddingConfigProvider


@asynccontextmanager
async def worker_runtime(
    config_provider: EmbeddingConfigProvider | None = None,
) -> AsyncIterator[WorkerRuntime]:
    """
    Build the services a job needs and dispose of them afterwards.

    Args:
        config_provider: Active embedding model (fresh read when None)

    Yields:
        WorkerRuntime: Session, pipeline and config for the job
    """
    settings = get_settings()
    config_provider = config_provider or EmbeddingConfigProvider()
    engine = create_worker_engine()
    session_factory = get_async_session_factory(engine)

    client = EmbeddingClient(config_provider, EmbeddingRequestRecorder(session_factory))
    # Queue futures belong to this job's event loop, so only the limiter is shared.
    queue = EmbedQueue.from_settings(client, settings.embed_queue, rate_limiter=get_tenant_limiter())
    chunker = TextChunker(
        chunk_size=settings.retrieval.chunk_size,
        chunk_overlap=settings.retrieval.chunk_overlap,
    )

    try:
        async with session_factory() as session:
            pipeline = EmbeddingPipeline(
                session,
                queue,
                chunker=chunker,
                config_provider=config_provider,
                error_message_max_chars=settings.retrieval.error_message_max_chars,
            )
            yield WorkerRuntime(session=session, pipeline=pipeline, config_provider=config_provider)
    finally:
        await queue.close()
        await engine.dispose()


def retry_countdown(retries: int) -> int:
    """Exponential task retry delay in seconds from CelerySettings."""
    celery_config = get_settings().celery
    return min(
        celery_config.task_retry_backoff * (2 ** retries),
        celery_config.task_retry_backoff_max,
    )
