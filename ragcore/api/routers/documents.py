"""
Document ingestion API endpoints.

Routes:
- POST /collections/{id}/ingest-url - Enqueue URL ingestion
- POST /sources/{id}/documents - Create and embed a document
- PUT /documents/{id}/content - Replace content, re-embedding only on change

Dependencies: ragcore.application.services, ragcore.models
System role: Ingestion HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from ragcore.api.deps.dependencies import (
    get_current_user_id,
    get_embedding_pipeline,
    get_ingest_service,
)
from ragcore.application.services import EmbeddingPipeline, IngestService
from ragcore.models.document import (
    DocumentContentUpdate,
    DocumentCreate,
    DocumentResponse,
    IngestResponse,
)
from ragcore.models.search import IngestUrlRequest, IngestUrlResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post(
    "/collections/{collection_id}/ingest-url",
    response_model=IngestUrlResponse,
    status_code=202,
)
async def ingest_url(
    collection_id: UUID,
    request: IngestUrlRequest,
    user_id: UUID = Depends(get_current_user_id),
    ingest_service: IngestService = Depends(get_ingest_service),
) -> IngestUrlResponse:
    """
    Enqueue a URL for background ingestion.

    Returns:
        IngestUrlResponse: Background task id
    """
    task_id = await ingest_service.ingest_url(
        collection_id,
        str(request.url),
        user_id,
        method=request.method,
        headers=request.headers,
        chunk_size=request.chunk_size,
        overlap=request.overlap,
    )
    return IngestUrlResponse(task_id=task_id)


@router.post("/sources/{source_id}/documents", response_model=DocumentResponse, status_code=201)
async def create_document(
    source_id: UUID,
    request: DocumentCreate,
    user_id: UUID = Depends(get_current_user_id),
    pipeline: EmbeddingPipeline = Depends(get_embedding_pipeline),
) -> DocumentResponse:
    """
    Create a document and embed it synchronously.

    Raises:
        HTTPException(404): Source missing or not owned
        HTTPException(502): Provider failed (document left in error)
    """
    document = await pipeline.ingest_document(source_id, request, user_id)
    return DocumentResponse.model_validate(document)


@router.put("/documents/{document_id}/content", response_model=IngestResponse)
async def update_document_content(
    document_id: UUID,
    request: DocumentContentUpdate,
    user_id: UUID = Depends(get_current_user_id),
    pipeline: EmbeddingPipeline = Depends(get_embedding_pipeline),
) -> IngestResponse:
    """Replace a document's content; unchanged content is a no-op."""
    outcome = await pipeline.update_document_content(
        document_id,
        request.content,
        user_id,
        metadata=request.metadata,
    )
    return IngestResponse(
        status=outcome.status,
        document=DocumentResponse.model_validate(outcome.document),
    )
