"""
Search and ingestion schemas.

Request/response schemas for scoped, reranked, ACL-aware and context search,
plus URL ingestion.

Dependencies: pydantic
System role: Retrieval API contracts
"""

import uuid

from pydantic import BaseModel, Field, HttpUrl


class SearchRequest(BaseModel):
    """Scoped search request."""

    query: str = Field(..., min_length=1, description="Query text")
    limit: int | None = Field(None, gt=0, le=500, description="Maximum hits")


class RerankSearchRequest(BaseModel):
    """Search followed by rerank."""

    query: str = Field(..., min_length=1, description="Query text")
    search_limit: int | None = Field(None, gt=0, le=500, description="Candidates before rerank")
    top_n: int | None = Field(None, gt=0, le=100, description="Hits kept after rerank")


class ContextRequest(BaseModel):
    """Cross-collection context augmentation request."""

    query: str = Field(..., min_length=1, description="Query text")


class SearchHitResponse(BaseModel):
    """One retrieved chunk."""

    chunk_id: uuid.UUID
    document_id: uuid.UUID
    content: str
    position: int
    distance: float
    relevance_score: float | None = None
    document_title: str | None = None
    source_name: str | None = None


class SearchResponse(BaseModel):
    """Ranked hits."""

    results: list[SearchHitResponse]


class IngestUrlRequest(BaseModel):
    """URL ingestion request."""

    url: HttpUrl = Field(..., description="URL to fetch")
    method: str = Field("GET", pattern="^(GET|POST)$", description="HTTP method")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    chunk_size: int | None = Field(None, gt=0, description="Chunk size override")
    overlap: int | None = Field(None, ge=0, description="Chunk overlap override")


class IngestUrlResponse(BaseModel):
    """Enqueued ingestion job."""

    task_id: str
