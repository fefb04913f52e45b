"""
Re-embedding administration schemas.

Dependencies: pydantic
System role: Admin API contracts
"""

import uuid

from pydantic import BaseModel, Field


class ChunkCountResponse(BaseModel):
    total_chunks: int


class PendingDocument(BaseModel):
    id: uuid.UUID
    title: str
    chunk_count: int


class PendingDocumentsResponse(BaseModel):
    documents: list[PendingDocument]


class ClearEmbeddingsResponse(BaseModel):
    chunks_cleared: int
    documents_reset: int


class RebuildRequest(BaseModel):
    batch_size: int | None = Field(None, gt=0, le=500, description="Documents per job")


class RebuildResponse(BaseModel):
    task_id: str
