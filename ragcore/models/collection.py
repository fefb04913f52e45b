"""
Collection and source schemas.

Request/response schemas for collection and source operations.

Dependencies: pydantic
System role: Collection/source API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CollectionCreate(BaseModel):
    """Attributes for creating a collection."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255, description="Collection name")
    description: str | None = Field(None, max_length=4096, description="Collection description")
    embedding_dimension: int | None = Field(
        None,
        gt=0,
        le=16000,
        description="Vector dimension; the active model's dimension when omitted",
    )


class CollectionUpdate(BaseModel):
    """Attributes for updating a collection. The dimension is immutable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255, description="Collection name")
    description: str | None = Field(None, max_length=4096, description="Collection description")


class CollectionResponse(BaseModel):
    """Response schema for collection operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: str | None
    embedding_dimension: int
    created_at: datetime
    updated_at: datetime


class SourceCreate(BaseModel):
    """Attributes for creating a source."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255, description="Source name")
    source_type: str = Field("manual", min_length=1, max_length=50, description="Source kind")
    metadata: dict = Field(default_factory=dict, description="Source metadata")


class SourceUpdate(BaseModel):
    """Attributes for updating a source."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255, description="Source name")
    source_type: str | None = Field(None, min_length=1, max_length=50, description="Source kind")
    metadata: dict | None = Field(None, description="Source metadata")
