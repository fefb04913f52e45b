"""
Provider contracts for embedding and reranking backends.

Backends are interchangeable: the pipeline only sees these ABCs and
ProviderError. Wire formats live in the concrete adapters.

Dependencies: abc, dataclasses
System role: Embedding/rerank provider abstraction
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RerankHit:
    """One reranked candidate, by index into the submitted documents."""

    index: int
    relevance_score: float


class EmbeddingProvider(ABC):
    """Turns texts into vectors."""

    name: str = "embedding"

    @abstractmethod
    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
    ) -> list[list[float]]:
        """
        Embed texts, one vector per text in input order.

        Args:
            texts: Texts to embed
            input_type: "search_document" for indexing, "search_query" for queries
            dimensions: Requested output dimension, when the model supports it

        Returns:
            list[list[float]]: Vectors aligned with texts

        Raises:
            ProviderError: On any backend failure
        """


class RerankProvider(ABC):
    """Scores documents against a query."""

    name: str = "rerank"

    @abstractmethod
    async def rerank(
        self,
        query: str,
        documents: list[str],
        *,
        top_n: int,
    ) -> list[RerankHit]:
        """
        Rank documents by relevance to query.

        Args:
            query: Query text
            documents: Candidate texts
            top_n: Maximum hits to return

        Returns:
            list[RerankHit]: Hits in provider order (most relevant first)

        Raises:
            ProviderError: On any backend failure
        """
