"""
Test suite for NearestNeighborQuery.

Statements are compiled against the PostgreSQL dialect; the pgvector
distance operator cannot run on the in-memory test database.

System role: Verification of vector retrieval SQL
"""

import uuid

import pytest
from sqlalchemy.dialects import postgresql

from ragcore.boundary.db.models import ChunkModel
from ragcore.core.vector_search import NearestNeighborQuery, SearchHit, hits_from_rows


def compile_sql(stmt):
    compiled = stmt.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


def where_clause(sql: str) -> str:
    return sql.split("WHERE", 1)[1].split("ORDER BY", 1)[0]


@pytest.fixture
def vector() -> list[float]:
    return [0.1, 0.2, 0.3, 0.4]


class TestNearestNeighborQuery:
    """Test suite for NearestNeighborQuery.build()."""

    def test_base_query_should_order_by_cosine_distance_with_tiebreaks(self, vector) -> None:
        sql, params = compile_sql(NearestNeighborQuery(vector, 7).build())

        assert "<=>" in sql
        assert "rag_chunks.embedding IS NOT NULL" in sql
        assert "ORDER BY distance, rag_chunks.document_id, rag_chunks.position" in sql
        assert "JOIN rag_collections" in sql
        assert 7 in params.values()

    def test_in_collection_should_filter_on_source_collection(self, vector) -> None:
        collection_id = uuid.uuid4()

        sql, params = compile_sql(NearestNeighborQuery(vector, 5).in_collection(collection_id).build())

        assert "rag_sources.collection_id = " in where_clause(sql)
        assert collection_id in params.values()

    def test_owned_or_shared_should_or_owner_with_space_membership(self, vector) -> None:
        user_id, space_id = uuid.uuid4(), uuid.uuid4()

        sql, _ = compile_sql(
            NearestNeighborQuery(vector, 5).owned_or_shared(user_id, [space_id]).build()
        )

        where = where_clause(sql)
        assert "rag_collections.user_id = " in where
        assert " OR rag_documents.space_id IN " in where

    def test_owned_or_shared_without_spaces_should_be_owner_only(self, vector) -> None:
        sql, _ = compile_sql(NearestNeighborQuery(vector, 5).owned_or_shared(uuid.uuid4(), []).build())

        where = where_clause(sql)
        assert "rag_collections.user_id = " in where
        assert "space_id" not in where

    def test_with_dimension_should_filter_collection_dimension(self, vector) -> None:
        sql, params = compile_sql(NearestNeighborQuery(vector, 5).with_dimension(1536).build())

        assert "rag_collections.embedding_dimension = " in where_clause(sql)
        assert 1536 in params.values()

    def test_with_documents_should_select_document_and_source_columns(self, vector) -> None:
        plain, _ = compile_sql(NearestNeighborQuery(vector, 5).build())
        eager, _ = compile_sql(NearestNeighborQuery(vector, 5).with_documents().build())

        select_list = eager.split("FROM", 1)[0]
        assert "rag_documents.title" in select_list
        assert "rag_sources.name" in select_list
        assert "rag_documents.title" not in plain.split("FROM", 1)[0]


class TestSearchHit:
    """Test suite for SearchHit helpers."""

    def test_hits_from_rows_should_pair_chunk_and_distance(self) -> None:
        chunk = ChunkModel(content="text", position=0, document_id=uuid.uuid4())

        hits = hits_from_rows([(chunk, 0.25)])

        assert hits == [SearchHit(chunk=chunk, distance=0.25)]
        assert hits[0].relevance_score is None

    def test_with_score_should_not_mutate_original(self) -> None:
        hit = SearchHit(chunk=ChunkModel(content="t", position=0), distance=0.5)

        scored = hit.with_score(0.9)

        assert scored.relevance_score == 0.9
        assert hit.relevance_score is None
