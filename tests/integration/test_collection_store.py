"""
Test suite for CollectionService on the in-memory database.

Tests owner scoping, attribute validation, cascade deletes, find-or-create
helpers and shared wiki collection discovery.

System role: Verification of the retrieval data store
"""

import uuid

import pytest

from ragcore.boundary.acl import EntityAclAccessControl
from ragcore.boundary.db.CRUD import document_crud, entity_acl_crud
from ragcore.boundary.db.models import DocumentStatus
from ragcore.core.content_hash import content_hash
from ragcore.core.exceptions import NotFoundError, ValidationError


class TestCollections:
    """Test suite for collection operations."""

    async def test_create_should_default_to_active_model_dimension(self, store, user_id) -> None:
        collection = await store.create_collection({"name": "Research"}, user_id)

        assert collection.embedding_dimension == 4
        assert collection.user_id == user_id

    async def test_create_should_accept_explicit_dimension(self, store, user_id) -> None:
        collection = await store.create_collection(
            {"name": "Large", "embedding_dimension": 1536}, user_id
        )

        assert collection.embedding_dimension == 1536

    async def test_duplicate_name_should_raise(self, store, collection, user_id) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store.create_collection({"name": "Notes"}, user_id)

        assert exc_info.value.field == "name"

    async def test_same_name_for_other_user_should_be_allowed(self, store, collection, other_user_id) -> None:
        other = await store.create_collection({"name": "Notes"}, other_user_id)

        assert other.id != collection.id

    @pytest.mark.parametrize("attrs", [{"name": ""}, {"name": "x", "color": "red"}, {}])
    async def test_invalid_attrs_should_raise(self, store, user_id, attrs) -> None:
        with pytest.raises(ValidationError):
            await store.create_collection(attrs, user_id)

    async def test_other_users_collection_should_be_not_found(self, store, collection, other_user_id) -> None:
        with pytest.raises(NotFoundError):
            await store.get_collection(collection.id, other_user_id)

    async def test_update_should_rename(self, store, collection, user_id) -> None:
        updated = await store.update_collection(collection.id, {"name": "Renamed"}, user_id)

        assert updated.name == "Renamed"
        assert updated.embedding_dimension == 4

    async def test_update_should_reject_dimension_change(self, store, collection, user_id) -> None:
        with pytest.raises(ValidationError):
            await store.update_collection(collection.id, {"embedding_dimension": 8}, user_id)

    async def test_delete_should_cascade_to_documents(self, store, collection, source, user_id) -> None:
        document = await store.create_document(source.id, {"title": "Doc", "content": "x"}, user_id)

        await store.delete_collection(collection.id, user_id)

        assert await document_crud.get_by_id(store.db, document.id) is None
        assert list(await store.list_collections(user_id)) == []


class TestSourcesAndDocuments:
    """Test suite for source and document operations."""

    async def test_create_source_in_foreign_collection_should_be_not_found(
        self, store, collection, other_user_id
    ) -> None:
        with pytest.raises(NotFoundError):
            await store.create_source(collection.id, {"name": "wiki"}, other_user_id)

    async def test_create_document_should_hash_content_and_start_pending(self, store, source, user_id) -> None:
        document = await store.create_document(
            source.id, {"title": "Guide", "content": "hello world"}, user_id
        )

        assert document.status == DocumentStatus.PENDING
        assert document.content_hash == content_hash("hello world")
        assert document.chunk_count == 0

    async def test_space_id_in_metadata_should_be_promoted(self, store, source, user_id) -> None:
        space_id = uuid.uuid4()

        document = await store.create_document(
            source.id,
            {"title": "Page", "content": "x", "metadata": {"space_id": str(space_id), "wiki_document_id": "w1"}},
            user_id,
        )

        assert document.space_id == space_id
        assert document.doc_metadata == {"wiki_space_id": str(space_id), "wiki_document_id": "w1"}

    async def test_malformed_space_id_should_raise(self, store, source, user_id) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store.create_document(
                source.id, {"title": "Page", "metadata": {"wiki_space_id": "not-a-uuid"}}, user_id
            )

        assert exc_info.value.field == "metadata.wiki_space_id"

    async def test_list_documents_should_order_by_title(self, store, source, user_id) -> None:
        for title in ("beta", "alpha", "gamma"):
            await store.create_document(source.id, {"title": title}, user_id)

        documents = await store.list_documents(source.id, user_id)

        assert [d.title for d in documents] == ["alpha", "beta", "gamma"]


class TestChunks:
    """Test suite for chunk listing and removal."""

    async def test_chunks_should_list_in_position_order_and_delete(
        self, store, pipeline, source, user_id
    ) -> None:
        text = " ".join(f"sentence number {i}." for i in range(400))
        document = await pipeline.ingest_document(source.id, {"title": "Long", "content": text}, user_id)

        chunks = await store.list_chunks_for_document(document.id)

        assert len(chunks) == document.chunk_count > 1
        assert [c.position for c in chunks] == list(range(len(chunks)))
        assert await store.delete_document_chunks(document.id) == len(chunks)
        assert list(await store.list_chunks_for_document(document.id)) == []


class TestFindOrCreate:
    """Test suite for find-or-create helpers."""

    async def test_wiki_collection_should_be_created_once(self, store, user_id) -> None:
        first = await store.find_or_create_wiki_collection(user_id)
        second = await store.find_or_create_wiki_collection(user_id)

        assert first.id == second.id
        assert first.name == "Wiki"

    async def test_wiki_source_should_be_created_once(self, store, user_id) -> None:
        collection = await store.find_or_create_wiki_collection(user_id)

        first = await store.find_or_create_wiki_source(collection.id, user_id)
        second = await store.find_or_create_wiki_source(collection.id, user_id)

        assert first.id == second.id
        assert first.name == "wiki"

    async def test_rag_source_should_record_source_type(self, store, collection, user_id) -> None:
        source = await store.find_or_create_rag_source_for_source(
            collection.id, "example.com", user_id, source_type="url"
        )

        assert source.source_type == "url"


class TestAccessibleCollections:
    """Test suite for list_accessible_collections()."""

    async def test_shared_space_should_expose_owner_wiki_collection(
        self, store, user_id, other_user_id
    ) -> None:
        own = await store.create_collection({"name": "Mine"}, user_id)
        shared_wiki = await store.find_or_create_wiki_collection(other_user_id)
        await store.create_collection({"name": "Private"}, other_user_id)
        space_id = uuid.uuid4()
        await entity_acl_crud.create(
            store.db, entity_type="wiki_space", entity_id=space_id, user_id=other_user_id, role="owner"
        )
        await entity_acl_crud.create(
            store.db, entity_type="wiki_space", entity_id=space_id, user_id=user_id, role="viewer"
        )
        await store.db.commit()

        collections = await store.list_accessible_collections(user_id, EntityAclAccessControl(store.db))

        assert [c.id for c in collections] == [own.id, shared_wiki.id]

    async def test_without_grants_should_list_own_only(self, store, collection, user_id, mock_access_control) -> None:
        collections = await store.list_accessible_collections(user_id, mock_access_control)

        assert [c.id for c in collections] == [collection.id]
