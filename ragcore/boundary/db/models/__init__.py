"""
Database models package.

Exports:
  - CollectionModel, SourceModel: Containers
  - DocumentModel, DocumentStatus: Document ORM model and status enum
  - ChunkModel: Embedded chunk with pgvector column
  - EmbeddingRequestModel: Provider call audit log
  - EntityAclModel: Access grants for shared entities

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Database model definitions for domain entities
"""

from ragcore.boundary.db.models.collection_model import CollectionModel
from ragcore.boundary.db.models.source_model import SourceModel
from ragcore.boundary.db.models.document_model import DocumentModel, DocumentStatus
from ragcore.boundary.db.models.chunk_model import ChunkModel
from ragcore.boundary.db.models.embedding_request_model import EmbeddingRequestModel
from ragcore.boundary.db.models.entity_acl_model import EntityAclModel

__all__ = [
    "CollectionModel",
    "SourceModel",
    "DocumentModel",
    "DocumentStatus",
    "ChunkModel",
    "EmbeddingRequestModel",
    "EntityAclModel",
]
