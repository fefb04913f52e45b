"""
Second-stage reranking of vector search hits.

Hits go to the rerank provider as plain texts; returned indices map back to
hits in provider order. When the provider fails, the first `top_n` hits keep
their distance order with null relevance scores.

Dependencies: ragcore.core.vector_search, ragcore.core.exceptions, ragcore.boundary.providers
System role: Relevance reranking with graceful degradation
"""

import logging
from typing import Protocol
from uuid import UUID

from ragcore.boundary.providers.base import RerankHit
from ragcore.core.exceptions import ProviderError
from ragcore.core.vector_search import SearchHit

logger = logging.getLogger(__name__)


class RerankBackend(Protocol):
    async def rerank(
        self,
        query: str,
        documents: list[str],
        *,
        top_n: int,
        user_id: UUID | None = None,
    ) -> list[RerankHit]: ...


class Reranker:
    """Reorders hits by provider relevance."""

    def __init__(self, client: RerankBackend) -> None:
        self._client = client

    async def rerank(
        self,
        query: str,
        hits: list[SearchHit],
        top_n: int = 5,
        user_id: UUID | None = None,
    ) -> list[SearchHit]:
        """
        Rerank hits against the query.

        Args:
            query: Query text
            hits: Candidates in distance order
            top_n: Maximum hits to keep
            user_id: User to attribute the provider call to

        Returns:
            list[SearchHit]: Reranked hits with relevance scores, or the
            distance-ordered prefix with null scores on provider failure
        """
        if not hits:
            return []

        documents = [hit.chunk.content for hit in hits]
        try:
            results = await self._client.rerank(query, documents, top_n=top_n, user_id=user_id)
        except ProviderError as e:
            logger.warning(
                f"{__name__}:rerank - Provider failed, keeping distance order: {e.describe()}",
                extra={"hit_count": len(hits), "top_n": top_n},
            )
            return self.fallback(hits, top_n)

        ranked = [
            hits[result.index].with_score(result.relevance_score)
            for result in results
            if 0 <= result.index < len(hits)
        ]
        return ranked[:top_n]

    @staticmethod
    def fallback(hits: list[SearchHit], top_n: int) -> list[SearchHit]:
        """First top_n hits with relevance scores cleared."""
        return [hit.with_score(None) for hit in hits[:top_n]]
