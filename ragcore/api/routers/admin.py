"""
Re-embedding administration API endpoints.

Routes:
- GET /admin/embeddings/chunks/count - Total stored chunks
- GET /admin/embeddings/pending - Documents awaiting re-embedding
- POST /admin/embeddings/clear?confirm=true - Invalidate every embedding
- POST /admin/embeddings/rebuild - Start the chained rebuild job

Dependencies: ragcore.application.services, ragcore.workers
System role: Embedding model migration HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ragcore.api.deps.dependencies import get_current_user_id, get_reembedding_service
from ragcore.application.services import ReembeddingService
from ragcore.core.exceptions import ValidationError
from ragcore.models.admin import (
    ChunkCountResponse,
    ClearEmbeddingsResponse,
    PendingDocument,
    PendingDocumentsResponse,
    RebuildRequest,
    RebuildResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/embeddings", tags=["admin"])


@router.get("/chunks/count", response_model=ChunkCountResponse)
async def chunk_count(
    user_id: UUID = Depends(get_current_user_id),
    service: ReembeddingService = Depends(get_reembedding_service),
) -> ChunkCountResponse:
    """Total chunks across all collections."""
    return ChunkCountResponse(total_chunks=await service.total_chunk_count())


@router.get("/pending", response_model=PendingDocumentsResponse)
async def pending_documents(
    limit: int = Query(50, gt=0, le=500),
    offset: int = Query(0, ge=0),
    user_id: UUID = Depends(get_current_user_id),
    service: ReembeddingService = Depends(get_reembedding_service),
) -> PendingDocumentsResponse:
    """Pending documents that had chunks, oldest first."""
    documents = await service.list_documents_for_reembedding(limit, offset)
    return PendingDocumentsResponse(
        documents=[
            PendingDocument(id=doc.id, title=doc.title, chunk_count=doc.chunk_count)
            for doc in documents
        ]
    )


@router.post("/clear", response_model=ClearEmbeddingsResponse)
async def clear_embeddings(
    confirm: bool = Query(False),
    user_id: UUID = Depends(get_current_user_id),
    service: ReembeddingService = Depends(get_reembedding_service),
) -> ClearEmbeddingsResponse:
    """
    Null every embedding and reset embedded documents to pending.

    Raises:
        HTTPException(422): confirm=true not given
    """
    if not confirm:
        raise ValidationError("Clearing embeddings requires confirm=true", field="confirm")
    counts = await service.clear_all_embeddings()
    logger.warning(
        f"{__name__}:clear_embeddings - All embeddings cleared",
        extra={"user_id": str(user_id), "chunks_cleared": counts.chunks_cleared},
    )
    return ClearEmbeddingsResponse(
        chunks_cleared=counts.chunks_cleared,
        documents_reset=counts.documents_reset,
    )


@router.post("/rebuild", response_model=RebuildResponse, status_code=202)
async def rebuild_embeddings(
    request: RebuildRequest | None = None,
    user_id: UUID = Depends(get_current_user_id),
) -> RebuildResponse:
    """Start re-embedding pending documents in chained background batches."""
    from ragcore.workers.tasks.reembedding import reembed_corpus

    batch_size = request.batch_size if request else None
    result = reembed_corpus.delay(user_id=str(user_id), batch=0, batch_size=batch_size)
    return RebuildResponse(task_id=result.id)
