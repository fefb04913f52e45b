"""
Nearest-neighbor query builder over chunk embeddings.

One base query (chunks joined to document, source and collection, non-null
embeddings, ordered by cosine distance) with eligibility predicates composed
on top. Scoped, ACL-aware and cross-collection search all go through it.

Dependencies: sqlalchemy, pgvector, ragcore.boundary.db.models
System role: Vector retrieval SQL
"""

from dataclasses import dataclass
from typing import Collection as IdCollection, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.orm import contains_eager

from ragcore.boundary.db.models import ChunkModel, CollectionModel, DocumentModel, SourceModel


@dataclass
class SearchHit:
    """A retrieved chunk with its cosine distance and optional rerank score."""

    chunk: ChunkModel
    distance: float
    relevance_score: float | None = None

    def with_score(self, relevance_score: float | None) -> "SearchHit":
        return SearchHit(chunk=self.chunk, distance=self.distance, relevance_score=relevance_score)


class NearestNeighborQuery:
    """
    Composable nearest-neighbor select.

    Usage:
        stmt = (
            NearestNeighborQuery(vector, limit=50)
            .in_collection(collection_id)
            .owned_or_shared(user_id, space_ids)
            .build()
        )
    """

    def __init__(self, query_vector: Sequence[float], limit: int) -> None:
        self._vector = list(query_vector)
        self._limit = limit
        self._predicates: list = []
        self._eager = False

    def in_collection(self, collection_id: UUID) -> "NearestNeighborQuery":
        """Restrict to chunks of one collection."""
        self._predicates.append(SourceModel.collection_id == collection_id)
        return self

    def owned_by(self, user_id: UUID) -> "NearestNeighborQuery":
        """Restrict to collections owned by the user."""
        self._predicates.append(CollectionModel.user_id == user_id)
        return self

    def owned_or_shared(
        self,
        user_id: UUID,
        space_ids: IdCollection[UUID],
    ) -> "NearestNeighborQuery":
        """
        Restrict to owned collections or documents in accessible spaces.

        Args:
            user_id: Requesting user
            space_ids: Wiki spaces the user may read
        """
        if not space_ids:
            return self.owned_by(user_id)
        self._predicates.append(
            or_(
                CollectionModel.user_id == user_id,
                DocumentModel.space_id.in_(list(space_ids)),
            )
        )
        return self

    def with_dimension(self, dimension: int) -> "NearestNeighborQuery":
        """Restrict to collections embedded at this dimension."""
        self._predicates.append(CollectionModel.embedding_dimension == dimension)
        return self

    def with_documents(self) -> "NearestNeighborQuery":
        """Populate chunk.document and document.source from the join."""
        self._eager = True
        return self

    def distance(self) -> ColumnElement[float]:
        """Cosine distance between each chunk embedding and the query vector."""
        return ChunkModel.embedding.cosine_distance(self._vector)

    def build(self) -> Select:
        distance = self.distance().label("distance")
        stmt = (
            select(ChunkModel, distance)
            .join(DocumentModel, DocumentModel.id == ChunkModel.document_id)
            .join(SourceModel, SourceModel.id == DocumentModel.source_id)
            .join(CollectionModel, CollectionModel.id == SourceModel.collection_id)
            .where(ChunkModel.embedding.is_not(None), *self._predicates)
            .order_by(distance, ChunkModel.document_id, ChunkModel.position)
            .limit(self._limit)
        )
        if self._eager:
            stmt = stmt.options(
                contains_eager(ChunkModel.document).contains_eager(DocumentModel.source)
            )
        return stmt


def hits_from_rows(rows) -> list[SearchHit]:
    """Convert (ChunkModel, distance) rows into SearchHits."""
    return [SearchHit(chunk=chunk, distance=float(distance)) for chunk, distance in rows]
