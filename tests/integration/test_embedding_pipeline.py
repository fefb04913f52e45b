"""
Test suite for EmbeddingPipeline on the in-memory database.

Tests chunk replacement, idempotent content updates, provider failure
handling and vector validation.

System role: Verification of the document embedding lifecycle
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from ragcore.application.services import EmbeddingPipeline
from ragcore.boundary.db.CRUD import chunk_crud
from ragcore.boundary.db.models import DocumentStatus
from ragcore.core.content_hash import content_hash
from ragcore.core.embed_queue import EmbedQueue
from ragcore.core.exceptions import EmbeddingError, NotFoundError, ProviderError, ValidationError
from ragcore.core.rate_limiter import TenantRateLimiter

LONG_TEXT = "\n\n".join(" ".join(f"token{i}" for i in range(150)) for _ in range(5))


class TestIngestDocument:
    """Test suite for ingest_document() and process_document()."""

    async def test_hello_world_should_embed_one_chunk(self, pipeline, source, user_id, fake_embedder) -> None:
        document = await pipeline.ingest_document(
            source.id, {"title": "Greeting", "content": "hello world"}, user_id
        )

        assert document.status == DocumentStatus.EMBEDDED
        assert document.chunk_count == 1
        assert document.error_message is None

        chunks = await chunk_crud.get_by_document(pipeline.db, document.id)
        assert len(chunks) == 1
        assert chunks[0].position == 0
        assert chunks[0].content == "hello world"
        assert chunks[0].content_hash == content_hash("hello world")
        assert len(chunks[0].embedding) == 4

        call = fake_embedder.calls[0]
        assert call["input_type"] == "search_document"
        assert call["dimensions"] == 4
        assert call["user_id"] == user_id

    async def test_long_text_should_embed_every_chunk_in_one_call(
        self, pipeline, source, user_id, fake_embedder
    ) -> None:
        document = await pipeline.ingest_document(
            source.id, {"title": "Long", "content": LONG_TEXT}, user_id
        )

        chunks = await chunk_crud.get_by_document(pipeline.db, document.id)
        assert document.chunk_count == len(chunks) > 1
        assert [c.position for c in chunks] == list(range(len(chunks)))
        assert len(fake_embedder.calls) == 1

    async def test_blank_content_should_embed_zero_chunks_without_provider(
        self, pipeline, source, user_id, fake_embedder
    ) -> None:
        document = await pipeline.ingest_document(source.id, {"title": "Empty", "content": "  "}, user_id)

        assert document.status == DocumentStatus.EMBEDDED
        assert document.chunk_count == 0
        assert fake_embedder.calls == []

    async def test_other_users_document_should_be_not_found(
        self, pipeline, store, source, user_id, other_user_id
    ) -> None:
        document = await store.create_document(source.id, {"title": "Doc", "content": "x"}, user_id)

        with pytest.raises(NotFoundError):
            await pipeline.process_document(document.id, other_user_id)

    async def test_should_work_through_embed_queue(
        self, test_async_db, fake_embedder, config_provider, source, user_id
    ) -> None:
        queue = EmbedQueue(fake_embedder, flush_ms=1)
        pipeline = EmbeddingPipeline(test_async_db, queue, config_provider=config_provider)

        document = await pipeline.ingest_document(source.id, {"title": "Q", "content": "queued text"}, user_id)
        await queue.close()

        assert document.status == DocumentStatus.EMBEDDED
        assert document.chunk_count == 1


class TestEmbedChunks:
    """Test suite for embed_chunks()."""

    async def test_explicit_chunks_should_replace_stored_chunks(self, pipeline, store, source, user_id) -> None:
        document = await store.create_document(source.id, {"title": "Synced"}, user_id)
        await pipeline.embed_chunks(
            document.id,
            [{"content": "first", "position": 0}, {"content": "second", "position": 1}],
            user_id,
        )

        document = await pipeline.embed_chunks(document.id, [{"content": "only", "position": 0}], user_id)

        chunks = await chunk_crud.get_by_document(pipeline.db, document.id)
        assert [c.content for c in chunks] == ["only"]
        assert document.chunk_count == 1

    async def test_provider_failure_should_mark_error_and_keep_old_chunks(
        self, test_async_db, config_provider, store, source, user_id
    ) -> None:
        embedder = AsyncMock()
        embedder.embed = AsyncMock(side_effect=ProviderError("Service Unavailable", status=503))
        pipeline = EmbeddingPipeline(test_async_db, embedder, config_provider=config_provider)
        document = await store.create_document(source.id, {"title": "Doc", "content": "text"}, user_id)

        with pytest.raises(ProviderError):
            await pipeline.process_document(document.id, user_id)

        assert document.status == DocumentStatus.ERROR
        assert document.error_message == "HTTP 503: Service Unavailable"
        assert list(await chunk_crud.get_by_document(test_async_db, document.id)) == []

    async def test_error_message_should_be_truncated(
        self, test_async_db, config_provider, store, source, user_id
    ) -> None:
        embedder = AsyncMock()
        embedder.embed = AsyncMock(side_effect=ProviderError("x" * 500))
        pipeline = EmbeddingPipeline(
            test_async_db, embedder, config_provider=config_provider, error_message_max_chars=20
        )
        document = await store.create_document(source.id, {"title": "Doc", "content": "text"}, user_id)

        with pytest.raises(ProviderError):
            await pipeline.process_document(document.id, user_id)

        assert len(document.error_message) == 20

    @pytest.mark.parametrize(
        "vectors",
        [[[0.1, 0.2, 0.3]], [[0.1, 0.2, 0.3, 0.4], [0.5, 0.6, 0.7, 0.8]]],
        ids=["wrong-dimension", "wrong-count"],
    )
    async def test_malformed_vectors_should_mark_error(
        self, test_async_db, config_provider, store, source, user_id, vectors
    ) -> None:
        embedder = AsyncMock()
        embedder.embed = AsyncMock(return_value=vectors)
        pipeline = EmbeddingPipeline(test_async_db, embedder, config_provider=config_provider)
        document = await store.create_document(source.id, {"title": "Doc", "content": "text"}, user_id)

        with pytest.raises(EmbeddingError) as exc_info:
            await pipeline.process_document(document.id, user_id)

        assert exc_info.value.document_id == str(document.id)
        assert document.status == DocumentStatus.ERROR
        assert list(await chunk_crud.get_by_document(test_async_db, document.id)) == []

    async def test_queue_rejection_should_mark_error(
        self, test_async_db, config_provider, store, source, user_id
    ) -> None:
        embedder = AsyncMock()
        embedder.embed = AsyncMock(side_effect=ValidationError("submission rejected", field="texts"))
        pipeline = EmbeddingPipeline(test_async_db, embedder, config_provider=config_provider)
        document = await store.create_document(source.id, {"title": "Doc", "content": "text"}, user_id)

        with pytest.raises(ValidationError):
            await pipeline.process_document(document.id, user_id)

        assert document.status == DocumentStatus.ERROR
        assert document.error_message == "submission rejected"

    async def test_submission_over_tenant_limit_should_embed_across_windows(
        self, test_async_db, fake_embedder, config_provider, store, source, user_id
    ) -> None:
        queue = EmbedQueue(fake_embedder, flush_ms=1, rate_limiter=TenantRateLimiter(2, window_seconds=0.01))
        pipeline = EmbeddingPipeline(test_async_db, queue, config_provider=config_provider)
        document = await store.create_document(source.id, {"title": "Synced"}, user_id)

        document = await pipeline.embed_chunks(
            document.id, [{"content": f"part {i}", "position": i} for i in range(3)], user_id
        )
        await queue.close()

        assert document.status == DocumentStatus.EMBEDDED
        assert document.chunk_count == 3
        assert [len(call["texts"]) for call in fake_embedder.calls] == [2, 1]


class TestUpdateDocumentContent:
    """Test suite for update_document_content()."""

    async def test_unchanged_content_should_skip_all_work(self, pipeline, source, user_id, fake_embedder) -> None:
        document = await pipeline.ingest_document(source.id, {"title": "Doc", "content": "same text"}, user_id)
        chunk_ids = [c.id for c in await chunk_crud.get_by_document(pipeline.db, document.id)]

        outcome = await pipeline.update_document_content(document.id, "same text", user_id)

        assert outcome.status == "unchanged"
        assert len(fake_embedder.calls) == 1
        assert [c.id for c in await chunk_crud.get_by_document(pipeline.db, document.id)] == chunk_ids

    async def test_changed_content_should_replace_chunks(self, pipeline, source, user_id) -> None:
        document = await pipeline.ingest_document(source.id, {"title": "Doc", "content": "old text"}, user_id)
        old_ids = {c.id for c in await chunk_crud.get_by_document(pipeline.db, document.id)}

        outcome = await pipeline.update_document_content(document.id, LONG_TEXT, user_id)

        chunks = await chunk_crud.get_by_document(pipeline.db, document.id)
        assert outcome.status == "updated"
        assert outcome.document.content_hash == content_hash(LONG_TEXT)
        assert outcome.document.chunk_count == len(chunks)
        assert old_ids.isdisjoint(c.id for c in chunks)

    async def test_metadata_should_merge_and_promote_space(self, pipeline, source, user_id) -> None:
        document = await pipeline.ingest_document(
            source.id, {"title": "Doc", "content": "v1", "metadata": {"wiki_document_id": "w1"}}, user_id
        )
        space_id = uuid.uuid4()

        outcome = await pipeline.update_document_content(
            document.id, "v2", user_id, metadata={"space_id": str(space_id)}
        )

        assert outcome.document.space_id == space_id
        assert outcome.document.doc_metadata == {"wiki_document_id": "w1", "wiki_space_id": str(space_id)}

    async def test_failed_re_embed_should_keep_previous_chunks(
        self, test_async_db, config_provider, pipeline, source, user_id
    ) -> None:
        document = await pipeline.ingest_document(source.id, {"title": "Doc", "content": "v1"}, user_id)
        old_ids = [c.id for c in await chunk_crud.get_by_document(test_async_db, document.id)]
        embedder = AsyncMock()
        embedder.embed = AsyncMock(side_effect=ProviderError("bad input", status=400))
        failing = EmbeddingPipeline(test_async_db, embedder, config_provider=config_provider)

        with pytest.raises(ProviderError):
            await failing.update_document_content(document.id, "v2", user_id)

        assert document.status == DocumentStatus.ERROR
        assert document.content == "v2"
        assert [c.id for c in await chunk_crud.get_by_document(test_async_db, document.id)] == old_ids
