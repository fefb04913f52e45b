"""
Batched embedding queue.

Concurrent callers submit texts and await their own slice of vectors. Requests
sharing (input_type, dimensions) ride the same provider call. A group departs
when it holds `batch_size` texts or `flush_ms` after its first arrival,
whichever comes first. Oversized groups are split into provider-sized slices,
and a submission larger than the tenant budget is split across windows.

Rate limits (429) and unavailability (503) are retried with exponential
backoff; any other failure is delivered to every caller in the batch.

Dependencies: asyncio, tenacity, ragcore.core
System role: Shared throttle in front of the embedding provider
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ragcore.core.exceptions import ProviderError
from ragcore.core.rate_limiter import TenantRateLimiter

logger = logging.getLogger(__name__)

GroupKey = tuple[str, int | None]


class EmbeddingBackend(Protocol):
    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
        user_id: UUID | None = None,
    ) -> list[list[float]]: ...


@dataclass
class _Submission:
    texts: list[str]
    future: asyncio.Future
    user_id: UUID | None


@dataclass
class _Group:
    submissions: list[_Submission] = field(default_factory=list)
    text_count: int = 0
    timer: asyncio.TimerHandle | None = None


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ProviderError) and error.is_transient


class EmbedQueue:
    """Train-station batcher in front of an embedding backend."""

    def __init__(
        self,
        client: EmbeddingBackend,
        batch_size: int = 96,
        flush_ms: int = 2000,
        max_retries: int = 5,
        backoff_ms: int = 1000,
        max_backoff_ms: int = 30000,
        rate_limiter: TenantRateLimiter | None = None,
    ) -> None:
        """
        Initialize queue.

        Args:
            client: Backend performing the actual provider call
            batch_size: Maximum texts per provider call
            flush_ms: Delay after a group's first arrival before it departs
            max_retries: Retries on transient errors
            backoff_ms: First retry delay, doubled per attempt
            max_backoff_ms: Retry delay ceiling
            rate_limiter: Per-tenant limiter (None disables)
        """
        self._client = client
        self.batch_size = batch_size
        self.flush_ms = flush_ms
        self.max_retries = max_retries
        self.backoff_ms = backoff_ms
        self.max_backoff_ms = max_backoff_ms
        self._rate_limiter = rate_limiter
        self._groups: dict[GroupKey, _Group] = {}
        self._inflight: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        client: EmbeddingBackend,
        settings: Any,
        rate_limiter: TenantRateLimiter | None = None,
    ) -> "EmbedQueue":
        """
        Build a queue from EmbedQueueSettings.

        Args:
            client: Embedding backend
            settings: EmbedQueueSettings instance
            rate_limiter: Shared limiter (a new one from settings when None)

        Returns:
            EmbedQueue: Configured queue
        """
        return cls(
            client,
            batch_size=settings.batch_size,
            flush_ms=settings.flush_ms,
            max_retries=settings.max_retries,
            backoff_ms=settings.backoff_ms,
            max_backoff_ms=settings.max_backoff_ms,
            rate_limiter=rate_limiter or TenantRateLimiter(settings.tenant_texts_per_minute),
        )

    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
        user_id: UUID | None = None,
    ) -> list[list[float]]:
        """
        Submit texts and wait for their vectors.

        Args:
            texts: Texts to embed
            input_type: "search_document" or "search_query"
            dimensions: Requested output dimension
            user_id: Submitting tenant (rate limiting and audit)

        Returns:
            list[list[float]]: Vectors aligned with texts

        Raises:
            ProviderError: If the batch failed
        """
        if not texts:
            return []

        if self._rate_limiter is not None:
            window = self._rate_limiter.limit
            if user_id is not None and len(texts) > window:
                vectors: list[list[float]] = []
                for start in range(0, len(texts), window):
                    vectors.extend(
                        await self.embed(
                            texts[start:start + window],
                            input_type=input_type,
                            dimensions=dimensions,
                            user_id=user_id,
                        )
                    )
                return vectors
            await self._rate_limiter.acquire(user_id, len(texts))

        loop = asyncio.get_running_loop()
        key: GroupKey = (input_type, dimensions)
        group = self._groups.setdefault(key, _Group())
        future = loop.create_future()
        group.submissions.append(_Submission(list(texts), future, user_id))
        group.text_count += len(texts)

        if group.text_count >= self.batch_size:
            self._depart(key)
        elif group.timer is None:
            group.timer = loop.call_later(self.flush_ms / 1000, self._depart, key)

        return await future

    async def close(self) -> None:
        """Send every waiting group and wait for in-flight batches."""
        for key in list(self._groups):
            self._depart(key)
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    def pending_count(self) -> int:
        """Texts waiting for departure across all groups."""
        return sum(group.text_count for group in self._groups.values())

    def _depart(self, key: GroupKey) -> None:
        group = self._groups.pop(key, None)
        if group is None:
            return
        if group.timer is not None:
            group.timer.cancel()

        task = asyncio.get_running_loop().create_task(self._flush(key, group))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _flush(self, key: GroupKey, group: _Group) -> None:
        input_type, dimensions = key
        all_texts = [text for sub in group.submissions for text in sub.texts]
        user_id = group.submissions[0].user_id

        logger.info(
            f"{__name__}:_flush - Sending batch",
            extra={
                "input_type": input_type,
                "dimensions": dimensions,
                "text_count": len(all_texts),
                "callers": len(group.submissions),
            },
        )

        try:
            vectors: list[list[float]] = []
            for start in range(0, len(all_texts), self.batch_size):
                chunk = all_texts[start:start + self.batch_size]
                vectors.extend(
                    await self._embed_with_retry(chunk, input_type, dimensions, user_id)
                )
            if len(vectors) != len(all_texts):
                raise ProviderError(
                    f"provider returned {len(vectors)} vectors for {len(all_texts)} texts"
                )
        except Exception as e:
            logger.warning(
                f"{__name__}:_flush - Batch failed: {e}",
                extra={"text_count": len(all_texts)},
            )
            for sub in group.submissions:
                if not sub.future.done():
                    sub.future.set_exception(e)
            return

        offset = 0
        for sub in group.submissions:
            count = len(sub.texts)
            if not sub.future.done():
                sub.future.set_result(vectors[offset:offset + count])
            offset += count

    async def _embed_with_retry(
        self,
        texts: list[str],
        input_type: str,
        dimensions: int | None,
        user_id: UUID | None,
    ) -> list[list[float]]:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.backoff_ms / 1000,
                max=self.max_backoff_ms / 1000,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_embed_with_retry - Retry "
                f"{retry_state.attempt_number}/{self.max_retries} after transient error"
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._client.embed(
                    texts,
                    input_type=input_type,
                    dimensions=dimensions,
                    user_id=user_id,
                )
        raise ProviderError("embedding retries exhausted")
