"""
Search service orchestrator.

Embeds queries, runs nearest-neighbor search with owner or ACL eligibility,
and reranks. Scoped search is owner-only; accessible search and context
augmentation also see documents in wiki spaces shared with the user.

Dependencies: sqlalchemy, ragcore.core, ragcore.boundary
System role: Retrieval orchestration for query flow
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services.collection_service import CollectionService, WIKI_SPACE_ENTITY
from ragcore.boundary.acl.access_control import AccessControl
from ragcore.boundary.db.CRUD.collection_crud import collection_crud
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.configs.retrieval import RetrievalSettings
from ragcore.core.embed_queue import EmbeddingBackend
from ragcore.core.exceptions import NotFoundError, ProviderError
from ragcore.core.reranker import Reranker
from ragcore.core.vector_search import NearestNeighborQuery, SearchHit, hits_from_rows

logger = logging.getLogger(__name__)

QUERY_INPUT_TYPE = "search_query"


class SearchService:
    """Vector search with optional ACL filtering and reranking."""

    def __init__(
        self,
        db: AsyncSession,
        embedder: EmbeddingBackend,
        reranker: Reranker,
        access_control: AccessControl,
        config_provider: EmbeddingConfigProvider | None = None,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize search service.

        Args:
            db: AsyncSession for queries
            embedder: Query embedding backend (EmbeddingClient)
            reranker: Second-stage reranker
            access_control: Authorization collaborator
            config_provider: Active embedding model (augment_context dimension)
            settings: Limits and rerank sizes
        """
        self.db = db
        self._embedder = embedder
        self._reranker = reranker
        self._access_control = access_control
        self._config_provider = config_provider or EmbeddingConfigProvider()
        self.settings = settings or RetrievalSettings()
        self.store = CollectionService(db, self._config_provider)

    async def search(
        self,
        collection_id: UUID,
        query: str,
        user_id: UUID,
        limit: int | None = None,
        dimensions: int | None = None,
    ) -> list[SearchHit]:
        """
        Nearest chunks within one owned collection.

        Args:
            collection_id: Collection to search (must be owned)
            query: Query text
            user_id: Requesting user
            limit: Maximum hits (default 20)
            dimensions: Query vector dimension (default: the collection's)

        Returns:
            list[SearchHit]: Hits by ascending distance, relevance_score None

        Raises:
            NotFoundError: If the collection is missing or not owned
            ProviderError: If the query could not be embedded
        """
        collection = await self.store.get_collection(collection_id, user_id)
        vector = await self._embed_query(
            query, dimensions or collection.embedding_dimension, user_id
        )
        stmt = (
            NearestNeighborQuery(vector, limit or self.settings.search_limit)
            .in_collection(collection.id)
            .with_documents()
            .build()
        )
        return await self._execute(stmt)

    async def rerank(
        self,
        query: str,
        hits: list[SearchHit],
        top_n: int | None = None,
        user_id: UUID | None = None,
    ) -> list[SearchHit]:
        return await self._reranker.rerank(
            query, hits, top_n=top_n or self.settings.rerank_top_n, user_id=user_id
        )

    async def search_and_rerank(
        self,
        collection_id: UUID,
        query: str,
        user_id: UUID,
        search_limit: int | None = None,
        top_n: int | None = None,
        dimensions: int | None = None,
    ) -> list[SearchHit]:
        """
        Scoped search followed by rerank.

        Empty search results skip the reranker entirely.
        """
        hits = await self.search(
            collection_id,
            query,
            user_id,
            limit=search_limit or self.settings.rerank_search_limit,
            dimensions=dimensions,
        )
        if not hits:
            return []
        return await self.rerank(
            query, hits, top_n=top_n or self.settings.rerank_top_n, user_id=user_id
        )

    async def search_accessible(
        self,
        collection_id: UUID,
        query: str,
        user_id: UUID,
        search_limit: int | None = None,
        top_n: int | None = None,
        dimensions: int | None = None,
    ) -> list[SearchHit]:
        """
        ACL-aware search over a collection that may belong to someone else.

        A chunk is eligible when its collection is owned by the user or its
        document sits in a wiki space the user can access.

        Raises:
            NotFoundError: If the collection does not exist
            ProviderError: If the query could not be embedded
        """
        collection = await collection_crud.get_by_id(self.db, collection_id)
        if collection is None:
            raise NotFoundError("collection", collection_id)

        vector = await self._embed_query(
            query, dimensions or collection.embedding_dimension, user_id
        )
        space_ids = await self._access_control.accessible_entity_ids(WIKI_SPACE_ENTITY, user_id)
        stmt = (
            NearestNeighborQuery(vector, search_limit or self.settings.rerank_search_limit)
            .in_collection(collection.id)
            .owned_or_shared(user_id, space_ids)
            .with_documents()
            .build()
        )
        hits = await self._execute(stmt)
        if not hits:
            return []
        return await self.rerank(
            query, hits, top_n=top_n or self.settings.accessible_top_n, user_id=user_id
        )

    async def augment_context(self, query: str, user_id: UUID) -> list[SearchHit]:
        """
        Context for a chat turn across everything the user can see.

        Searches owned collections and shared wiki documents at the active
        model's dimension. With at least augment_rerank_top_n candidates the
        list is reranked down to that size; otherwise all candidates are
        returned with null scores. Chunks carry their document and source.

        Raises:
            ProviderError: If the query could not be embedded
        """
        dimension = self._config_provider.get().dimension
        vector = await self._embed_query(query, dimension, user_id)
        space_ids = await self._access_control.accessible_entity_ids(WIKI_SPACE_ENTITY, user_id)
        stmt = (
            NearestNeighborQuery(vector, self.settings.augment_candidate_limit)
            .owned_or_shared(user_id, space_ids)
            .with_dimension(dimension)
            .with_documents()
            .build()
        )
        hits = await self._execute(stmt)
        if not hits:
            return []

        rerank_top_n = self.settings.augment_rerank_top_n
        if len(hits) >= rerank_top_n:
            return await self._reranker.rerank(query, hits, top_n=rerank_top_n, user_id=user_id)
        return Reranker.fallback(hits, len(hits))

    async def _embed_query(self, query: str, dimension: int, user_id: UUID) -> list[float]:
        vectors = await self._embedder.embed(
            [query],
            input_type=QUERY_INPUT_TYPE,
            dimensions=dimension,
            user_id=user_id,
        )
        if not vectors:
            raise ProviderError("provider returned no query embedding")
        return vectors[0]

    async def _execute(self, stmt) -> list[SearchHit]:
        result = await self.db.execute(stmt)
        hits = hits_from_rows(result.all())
        logger.info(
            f"{__name__}:_execute - Vector search complete",
            extra={"hit_count": len(hits)},
        )
        return hits
