"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, fake embedding/rerank backends, id fixtures
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import uuid
from unittest.mock import AsyncMock

import pytest

from ragcore.boundary.providers.base import RerankHit
from ragcore.configs.embedding import EmbeddingConfigProvider, EmbeddingModelConfig


class FakeEmbedder:
    """
    Deterministic embedding backend.

    Each text maps to a vector derived from its SHA-256 so identical texts get
    identical vectors. Calls are recorded for assertions.
    """

    def __init__(self, default_dimension: int = 4) -> None:
        self.default_dimension = default_dimension
        self.calls: list[dict] = []

    async def embed(self, texts, *, input_type, dimensions=None, user_id=None):
        self.calls.append(
            {
                "texts": list(texts),
                "input_type": input_type,
                "dimensions": dimensions,
                "user_id": user_id,
            }
        )
        size = dimensions or self.default_dimension
        return [self.vector_for(text, size) for text in texts]

    @staticmethod
    def vector_for(text: str, size: int) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(digest[i % len(digest)] + 1) / 256 for i in range(size)]


class FakeRerankBackend:
    """Rerank backend returning hits in reverse order with descending scores."""

    def __init__(self) -> None:
        self.calls: list[dict] = []

    async def rerank(self, query, documents, *, top_n, user_id=None):
        self.calls.append({"query": query, "documents": list(documents), "top_n": top_n})
        order = list(reversed(range(len(documents))))[:top_n]
        return [
            RerankHit(index=index, relevance_score=1.0 - rank * 0.1)
            for rank, index in enumerate(order)
        ]


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Foreign keys are enforced so ON DELETE CASCADE behaves like PostgreSQL.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from ragcore.boundary.db import models  # noqa: F401
    from ragcore.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_id() -> uuid.UUID:
    """Provide the acting user's UUID."""
    return uuid.uuid4()


@pytest.fixture
def other_user_id() -> uuid.UUID:
    """Provide a second user's UUID."""
    return uuid.uuid4()


@pytest.fixture
def model_config() -> EmbeddingModelConfig:
    """Provide a small-dimension embedding model snapshot."""
    return EmbeddingModelConfig(
        provider_type="openai",
        model_id="text-embedding-3-small",
        dimension=4,
        api_key="sk-test",
    )


@pytest.fixture
def config_provider(model_config: EmbeddingModelConfig) -> EmbeddingConfigProvider:
    """Provide a config provider pinned to model_config."""
    return EmbeddingConfigProvider(model_config)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    """Provide deterministic embedding backend."""
    return FakeEmbedder()


@pytest.fixture
def fake_rerank_backend() -> FakeRerankBackend:
    """Provide deterministic rerank backend."""
    return FakeRerankBackend()


@pytest.fixture
def mock_access_control() -> AsyncMock:
    """
    Create mock AccessControl with no grants.

    Returns:
        AsyncMock: accessible_entity_ids -> [], get_role -> None
    """
    access_control = AsyncMock()
    access_control.accessible_entity_ids = AsyncMock(return_value=[])
    access_control.get_role = AsyncMock(return_value=None)
    access_control.has_access = AsyncMock(return_value=False)
    return access_control
