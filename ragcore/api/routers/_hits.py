"""Search hit → response conversion shared by retrieval routers."""

from ragcore.core.vector_search import SearchHit
from ragcore.models.search import SearchHitResponse, SearchResponse


def to_search_response(hits: list[SearchHit]) -> SearchResponse:
    results = []
    for hit in hits:
        chunk = hit.chunk
        document = chunk.document
        source = document.source if document is not None else None
        results.append(
            SearchHitResponse(
                chunk_id=chunk.id,
                document_id=chunk.document_id,
                content=chunk.content,
                position=chunk.position,
                distance=hit.distance,
                relevance_score=hit.relevance_score,
                document_title=document.title if document is not None else None,
                source_name=source.name if source is not None else None,
            )
        )
    return SearchResponse(results=results)
