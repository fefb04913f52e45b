"""
Search API endpoints.

Routes:
- POST /collections/{id}/search - Owner-scoped vector search
- POST /collections/{id}/search/rerank - Search followed by rerank
- POST /collections/{id}/search/accessible - ACL-aware search, shared collections allowed

Dependencies: ragcore.application.services, ragcore.models
System role: Retrieval HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from ragcore.api.deps.dependencies import get_current_user_id, get_search_service
from ragcore.api.routers._hits import to_search_response
from ragcore.application.services import SearchService
from ragcore.models.search import RerankSearchRequest, SearchRequest, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["search"])


@router.post("/{collection_id}/search", response_model=SearchResponse)
async def search_collection(
    collection_id: UUID,
    request: SearchRequest,
    user_id: UUID = Depends(get_current_user_id),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Nearest chunks in an owned collection.

    Raises:
        HTTPException(404): Collection missing or not owned
        HTTPException(502): Query embedding failed
    """
    hits = await search_service.search(collection_id, request.query, user_id, limit=request.limit)
    return to_search_response(hits)


@router.post("/{collection_id}/search/rerank", response_model=SearchResponse)
async def search_and_rerank(
    collection_id: UUID,
    request: RerankSearchRequest,
    user_id: UUID = Depends(get_current_user_id),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search an owned collection and rerank the candidates."""
    hits = await search_service.search_and_rerank(
        collection_id,
        request.query,
        user_id,
        search_limit=request.search_limit,
        top_n=request.top_n,
    )
    return to_search_response(hits)


@router.post("/{collection_id}/search/accessible", response_model=SearchResponse)
async def search_accessible(
    collection_id: UUID,
    request: RerankSearchRequest,
    user_id: UUID = Depends(get_current_user_id),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search a possibly shared collection, returning only chunks the user may see."""
    hits = await search_service.search_accessible(
        collection_id,
        request.query,
        user_id,
        search_limit=request.search_limit,
        top_n=request.top_n,
    )
    return to_search_response(hits)
