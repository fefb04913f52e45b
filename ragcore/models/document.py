"""
Document schemas.

Request/response schemas for document creation and content updates.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentCreate(BaseModel):
    """Attributes for creating a document."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=1024, description="Document title")
    content: str | None = Field(None, description="Raw text content")
    metadata: dict = Field(
        default_factory=dict,
        description="Provenance (wiki_document_id, source_document_id, url, space_id)",
    )
    space_id: uuid.UUID | None = Field(None, description="Wiki space carrying the ACL")


class DocumentContentUpdate(BaseModel):
    """New content for an existing document."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(..., description="Replacement text content")
    metadata: dict | None = Field(None, description="Metadata keys to merge")


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    source_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    content_hash: str | None
    status: str
    chunk_count: int
    error_message: str | None
    space_id: uuid.UUID | None
    metadata: dict = Field(validation_alias="doc_metadata")
    created_at: datetime
    updated_at: datetime


class IngestResponse(BaseModel):
    """Outcome of a content update."""

    status: str = Field(description="'unchanged' or 'updated'")
    document: DocumentResponse
