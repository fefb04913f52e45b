"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_engine(): Sync engine for schema scripts
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - CollectionModel, SourceModel, DocumentModel, ChunkModel: Retrieval containment tree
  - EmbeddingRequestModel, EntityAclModel: Audit log and access grants
  - *_crud: CRUD operation singletons

Dependencies: sqlalchemy, pgvector, ragcore.configs
System role: Database adapter providing persistent storage for collections,
documents, chunks and their embeddings.
"""

from ragcore.boundary.db.base import Base, TimestampMixin, UUIDMixin
from ragcore.boundary.db.connection import (
    get_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    create_worker_engine,
)
from ragcore.boundary.db.models import (
    ChunkModel,
    CollectionModel,
    DocumentModel,
    DocumentStatus,
    EmbeddingRequestModel,
    EntityAclModel,
    SourceModel,
)
from ragcore.boundary.db.CRUD import (
    BaseCRUD,
    chunk_crud,
    collection_crud,
    document_crud,
    embedding_request_crud,
    entity_acl_crud,
    source_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "create_worker_engine",
    # Models
    "ChunkModel",
    "CollectionModel",
    "DocumentModel",
    "DocumentStatus",
    "EmbeddingRequestModel",
    "EntityAclModel",
    "SourceModel",
    # CRUD
    "BaseCRUD",
    "chunk_crud",
    "collection_crud",
    "document_crud",
    "embedding_request_crud",
    "entity_acl_crud",
    "source_crud",
]
