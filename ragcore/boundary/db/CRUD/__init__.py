"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from ragcore.boundary.db.CRUD import collection_crud, document_crud

    # Use singleton instances
    collection = await collection_crud.get_owned(db, collection_id, user_id)
"""

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.CRUD.collection_crud import CollectionCRUD, collection_crud
from ragcore.boundary.db.CRUD.source_crud import SourceCRUD, source_crud
from ragcore.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from ragcore.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from ragcore.boundary.db.CRUD.embedding_request_crud import (
    EmbeddingRequestCRUD,
    embedding_request_crud,
)
from ragcore.boundary.db.CRUD.entity_acl_crud import EntityAclCRUD, entity_acl_crud

__all__ = [
    "BaseCRUD",
    "CollectionCRUD",
    "collection_crud",
    "SourceCRUD",
    "source_crud",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "EmbeddingRequestCRUD",
    "embedding_request_crud",
    "EntityAclCRUD",
    "entity_acl_crud",
]
