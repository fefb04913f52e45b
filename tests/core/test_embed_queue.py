"""
Test suite for EmbedQueue.

Tests batching across concurrent callers, per-caller slicing, size and timer
departure, retry of transient provider errors and error fan-out.

System role: Verification of the shared embedding throttle
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from ragcore.core.embed_queue import EmbedQueue
from ragcore.core.exceptions import ProviderError
from ragcore.core.rate_limiter import TenantRateLimiter


def make_queue(backend, **overrides) -> EmbedQueue:
    options = {"batch_size": 96, "flush_ms": 10, "max_retries": 5, "backoff_ms": 1, "max_backoff_ms": 2}
    options.update(overrides)
    return EmbedQueue(backend, **options)


class TestBatching:
    """Test suite for EmbedQueue batching behavior."""

    async def test_empty_input_should_return_empty_without_call(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder)

        assert await queue.embed([], input_type="search_document") == []
        assert fake_embedder.calls == []

    async def test_concurrent_callers_should_share_one_call(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder)

        first, second = await asyncio.gather(
            queue.embed(["a", "b"], input_type="search_document", dimensions=4),
            queue.embed(["c"], input_type="search_document", dimensions=4),
        )

        assert len(fake_embedder.calls) == 1
        assert fake_embedder.calls[0]["texts"] == ["a", "b", "c"]
        assert first == [fake_embedder.vector_for("a", 4), fake_embedder.vector_for("b", 4)]
        assert second == [fake_embedder.vector_for("c", 4)]

    async def test_full_batch_should_depart_without_waiting_for_timer(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder, batch_size=3, flush_ms=60_000)

        vectors = await asyncio.wait_for(
            queue.embed(["a", "b", "c"], input_type="search_document"),
            timeout=1,
        )

        assert len(vectors) == 3
        assert queue.pending_count() == 0

    async def test_oversized_group_should_split_into_provider_slices(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder, batch_size=2)

        vectors = await queue.embed(["a", "b", "c", "d", "e"], input_type="search_document")

        assert [len(call["texts"]) for call in fake_embedder.calls] == [2, 2, 1]
        assert len(vectors) == 5

    async def test_different_input_types_should_not_share_a_call(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder)

        await asyncio.gather(
            queue.embed(["doc"], input_type="search_document"),
            queue.embed(["query"], input_type="search_query"),
        )

        assert sorted(call["input_type"] for call in fake_embedder.calls) == [
            "search_document",
            "search_query",
        ]

    async def test_close_should_flush_waiting_group(self, fake_embedder) -> None:
        queue = make_queue(fake_embedder, flush_ms=60_000)

        pending = asyncio.create_task(queue.embed(["a"], input_type="search_document"))
        await asyncio.sleep(0)
        assert queue.pending_count() == 1

        await queue.close()

        assert len(await pending) == 1


class TestRetries:
    """Test suite for EmbedQueue retry and error delivery."""

    async def test_transient_errors_should_be_retried(self) -> None:
        backend = AsyncMock()
        backend.embed = AsyncMock(
            side_effect=[
                ProviderError("slow down", status=429),
                ProviderError("unavailable", status=503),
                [[0.1, 0.2]],
            ]
        )
        queue = make_queue(backend)

        vectors = await queue.embed(["a"], input_type="search_document")

        assert vectors == [[0.1, 0.2]]
        assert backend.embed.await_count == 3

    async def test_exhausted_retries_should_raise_last_error(self) -> None:
        backend = AsyncMock()
        backend.embed = AsyncMock(side_effect=ProviderError("unavailable", status=503))
        queue = make_queue(backend, max_retries=2)

        with pytest.raises(ProviderError) as exc_info:
            await queue.embed(["a"], input_type="search_document")

        assert exc_info.value.status == 503
        assert backend.embed.await_count == 3

    async def test_permanent_error_should_reach_every_caller_without_retry(self) -> None:
        backend = AsyncMock()
        backend.embed = AsyncMock(side_effect=ProviderError("bad request", status=400))
        queue = make_queue(backend)

        results = await asyncio.gather(
            queue.embed(["a"], input_type="search_document"),
            queue.embed(["b"], input_type="search_document"),
            return_exceptions=True,
        )

        assert all(isinstance(r, ProviderError) and r.status == 400 for r in results)
        assert backend.embed.await_count == 1

    async def test_vector_count_mismatch_should_raise(self) -> None:
        backend = AsyncMock()
        backend.embed = AsyncMock(return_value=[[0.1]])
        queue = make_queue(backend)

        with pytest.raises(ProviderError):
            await queue.embed(["a", "b"], input_type="search_document")


class TestRateLimiting:
    """Test suite for per-tenant limits in front of the queue."""

    async def test_oversized_submission_should_be_split_across_windows(self, fake_embedder, user_id) -> None:
        queue = make_queue(fake_embedder, rate_limiter=TenantRateLimiter(2, window_seconds=0.01))

        vectors = await queue.embed(["a", "b", "c"], input_type="search_document", dimensions=4, user_id=user_id)

        assert [call["texts"] for call in fake_embedder.calls] == [["a", "b"], ["c"]]
        assert vectors == [fake_embedder.vector_for(t, 4) for t in ("a", "b", "c")]

    async def test_shared_limiter_should_count_across_queues(self, fake_embedder, user_id) -> None:
        limiter = TenantRateLimiter(5)
        first = make_queue(fake_embedder, rate_limiter=limiter)
        second = make_queue(fake_embedder, rate_limiter=limiter)

        await first.embed(["a", "b"], input_type="search_document", user_id=user_id)
        await second.embed(["c"], input_type="search_document", user_id=user_id)

        assert limiter.used(user_id) == 3

    def test_from_settings_should_copy_limits(self, fake_embedder) -> None:
        from ragcore.configs.embed_queue import EmbedQueueSettings

        settings = EmbedQueueSettings(batch_size=10, flush_ms=5, max_retries=1, backoff_ms=2)
        queue = EmbedQueue.from_settings(fake_embedder, settings)

        assert (queue.batch_size, queue.flush_ms, queue.max_retries) == (10, 5, 1)

    def test_from_settings_should_reuse_given_limiter(self, fake_embedder) -> None:
        from ragcore.configs.embed_queue import EmbedQueueSettings

        limiter = TenantRateLimiter(7)
        queue = EmbedQueue.from_settings(fake_embedder, EmbedQueueSettings(), rate_limiter=limiter)

        assert queue._rate_limiter is limiter
