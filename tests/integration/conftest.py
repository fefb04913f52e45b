"""
Fixtures for database-backed tests.

Provides: CollectionService, EmbeddingPipeline and a ready collection/source
tree on the in-memory database.
"""

import pytest

from ragcore.application.services import CollectionService, EmbeddingPipeline


@pytest.fixture
def store(test_async_db, config_provider) -> CollectionService:
    """Provide CollectionService on the test database."""
    return CollectionService(test_async_db, config_provider)


@pytest.fixture
def pipeline(test_async_db, fake_embedder, config_provider) -> EmbeddingPipeline:
    """Provide EmbeddingPipeline backed by the deterministic embedder."""
    return EmbeddingPipeline(test_async_db, fake_embedder, config_provider=config_provider)


@pytest.fixture
async def collection(store, user_id):
    """Provide an owned collection at the configured dimension (4)."""
    return await store.create_collection({"name": "Notes"}, user_id)


@pytest.fixture
async def source(store, collection, user_id):
    """Provide a manual source inside the collection."""
    return await store.create_source(collection.id, {"name": "manual"}, user_id)
