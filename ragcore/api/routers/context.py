"""
Context augmentation API endpoint.

Routes: POST /context

Dependencies: ragcore.application.services, ragcore.models
System role: Chat context retrieval HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from ragcore.api.deps.dependencies import get_current_user_id, get_search_service
from ragcore.api.routers._hits import to_search_response
from ragcore.application.services import SearchService
from ragcore.models.search import ContextRequest, SearchResponse

router = APIRouter(prefix="/context", tags=["context"])


@router.post("", response_model=SearchResponse)
async def augment_context(
    request: ContextRequest,
    user_id: UUID = Depends(get_current_user_id),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Relevant chunks across every collection and shared space the user can see."""
    hits = await search_service.augment_context(request.query, user_id)
    return to_search_response(hits)
