"""
Corpus re-embedding Celery task.

Async task: reembed_corpus(user_id, batch=0)
Flow: take next pending batch -> regenerate chunks + vectors -> chain next batch

Each job handles one batch and enqueues the next while pending work
remains. Jobs cancel themselves when no embedding model is configured.

Dependencies: ragcore.workers, ragcore.application
System role: Async re-embedding task
"""

import asyncio
import logging
from uuid import UUID

from ragcore.application.services.reembedding_service import RebuildProgress, ReembeddingService
from ragcore.configs import get_settings
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.core.exceptions import ProviderError
from ragcore.observability.log_utils import log_exception_with_context
from ragcore.workers import celery_app
from ragcore.workers.runtime import retry_countdown, worker_runtime

logger = logging.getLogger(__name__)


async def _rebuild_batch(
    user_id: UUID | None,
    batch_size: int,
    config_provider: EmbeddingConfigProvider,
) -> RebuildProgress:
    async with worker_runtime(config_provider) as runtime:
        service = ReembeddingService(runtime.session, runtime.pipeline)
        return await service.rebuild_batch(user_id, batch_size=batch_size)


@celery_app.task(bind=True, max_retries=3)
def reembed_corpus(
    self,
    user_id: str | None = None,
    batch: int = 0,
    batch_size: int | None = None,
) -> dict:
    """
    Re-embed one batch of pending documents and chain the next.

    Args:
        user_id: Administrator UUID as string
        batch: Sequence number of this batch
        batch_size: Documents per batch

    Returns:
        dict: Batch outcome, or a cancellation when embedding is disabled
    """
    config_provider = EmbeddingConfigProvider()
    if not config_provider.get().enabled:
        logger.warning(f"{__name__}:reembed_corpus - Embedding disabled, cancelling")
        return {"status": "cancelled", "reason": "embedding_disabled", "batch": batch}

    size = batch_size or get_settings().retrieval.reembed_batch_size
    try:
        progress = asyncio.run(
            _rebuild_batch(UUID(user_id) if user_id else None, size, config_provider)
        )
    except ProviderError as e:
        if e.is_transient:
            raise self.retry(exc=e, countdown=retry_countdown(self.request.retries))
        log_exception_with_context(
            logger, f"{__name__}:reembed_corpus - Batch failed", e, batch=batch
        )
        raise

    if progress.remaining and progress.processed + progress.failed > 0:
        reembed_corpus.apply_async(
            kwargs={"user_id": user_id, "batch": batch + 1, "batch_size": size}
        )

    logger.info(
        f"{__name__}:reembed_corpus - Batch {batch} done",
        extra={
            "processed": progress.processed,
            "failed": progress.failed,
            "remaining": progress.remaining,
        },
    )
    return {
        "status": "ok",
        "batch": batch,
        "processed": progress.processed,
        "failed": progress.failed,
        "remaining": progress.remaining,
    }
