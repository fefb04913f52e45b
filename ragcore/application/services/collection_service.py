"""
Collection, source and document store.

Owner-scoped CRUD over the containment tree collection → source → document
→ chunk, plus find-or-create helpers used by wiki and data-source sync.
Missing rows and rows owned by someone else both raise NotFoundError.

Dependencies: sqlalchemy, ragcore.boundary.db, ragcore.boundary.acl, ragcore.models
System role: Retrieval data store orchestration
"""

import logging
import uuid
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services._validation import validate_attrs
from ragcore.boundary.acl.access_control import AccessControl
from ragcore.boundary.db.CRUD.chunk_crud import chunk_crud
from ragcore.boundary.db.CRUD.collection_crud import collection_crud
from ragcore.boundary.db.CRUD.document_crud import document_crud
from ragcore.boundary.db.CRUD.entity_acl_crud import entity_acl_crud
from ragcore.boundary.db.CRUD.source_crud import source_crud
from ragcore.boundary.db.models import (
    ChunkModel,
    CollectionModel,
    DocumentModel,
    DocumentStatus,
    SourceModel,
)
from ragcore.configs.embedding import EmbeddingConfigProvider
from ragcore.core.content_hash import content_hash
from ragcore.core.exceptions import NotFoundError, ValidationError
from ragcore.models.collection import CollectionCreate, CollectionUpdate, SourceCreate, SourceUpdate
from ragcore.models.document import DocumentCreate

logger = logging.getLogger(__name__)

WIKI_COLLECTION_NAME = "Wiki"
WIKI_SOURCE_NAME = "wiki"
WIKI_SPACE_ENTITY = "wiki_space"
SPACE_METADATA_KEYS = ("space_id", "wiki_space_id")


def extract_space_id(metadata: dict[str, Any] | None) -> UUID | None:
    """
    Read a wiki space id from document metadata.

    Args:
        metadata: Document metadata

    Returns:
        UUID if a parseable space id is present, None otherwise
    """
    for key in SPACE_METADATA_KEYS:
        value = (metadata or {}).get(key)
        if value is None:
            continue
        try:
            return value if isinstance(value, UUID) else uuid.UUID(str(value))
        except ValueError as e:
            raise ValidationError(f"{key} is not a valid UUID", field=f"metadata.{key}") from e
    return None


class CollectionService:
    """
    Owner-scoped store for collections, sources, documents and chunks.

    Each mutating operation commits its own unit of work.
    """

    def __init__(
        self,
        db: AsyncSession,
        config_provider: EmbeddingConfigProvider | None = None,
    ) -> None:
        """
        Initialize collection service.

        Args:
            db: AsyncSession for the unit of work
            config_provider: Active embedding model (default collection dimension)
        """
        self.db = db
        self._config_provider = config_provider or EmbeddingConfigProvider()

    # --- Collections ---

    async def create_collection(
        self,
        attrs: dict[str, Any] | CollectionCreate,
        user_id: UUID,
    ) -> CollectionModel:
        """
        Create a collection for a user.

        Args:
            attrs: name, description, optional embedding_dimension
            user_id: Owner

        Returns:
            CollectionModel: The new collection

        Raises:
            ValidationError: On invalid attributes or duplicate name
        """
        data = validate_attrs(CollectionCreate, attrs)
        if await collection_crud.get_by_name(self.db, data.name, user_id):
            raise ValidationError(f"Collection already exists: {data.name}", field="name")

        collection = await collection_crud.create(
            self.db,
            user_id=user_id,
            name=data.name,
            description=data.description,
            embedding_dimension=data.embedding_dimension or self._config_provider.get().dimension,
        )
        await self.db.commit()
        logger.info(
            f"{__name__}:create_collection - Created collection",
            extra={"collection_id": str(collection.id), "user_id": str(user_id)},
        )
        return collection

    async def list_collections(self, user_id: UUID) -> Sequence[CollectionModel]:
        return await collection_crud.get_by_user(self.db, user_id)

    async def list_accessible_collections(
        self,
        user_id: UUID,
        access_control: AccessControl,
    ) -> list[CollectionModel]:
        """
        Own collections plus Wiki collections of users who share spaces with this user.

        Args:
            user_id: Requesting user
            access_control: Authorization collaborator

        Returns:
            list[CollectionModel]: Own collections first, then shared ones, each by name
        """
        own = list(await collection_crud.get_by_user(self.db, user_id))
        space_ids = await access_control.accessible_entity_ids(WIKI_SPACE_ENTITY, user_id)
        if not space_ids:
            return own

        owner_ids = [
            owner_id
            for owner_id in await entity_acl_crud.get_owner_ids(self.db, WIKI_SPACE_ENTITY, space_ids)
            if owner_id != user_id
        ]
        if not owner_ids:
            return own

        shared = await collection_crud.get_named_for_owners(
            self.db,
            WIKI_COLLECTION_NAME,
            owner_ids,
            exclude_ids=[c.id for c in own],
        )
        return own + list(shared)

    async def get_collection(self, collection_id: UUID, user_id: UUID) -> CollectionModel:
        collection = await collection_crud.get_owned(self.db, collection_id, user_id)
        if collection is None:
            raise NotFoundError("collection", collection_id)
        return collection

    async def update_collection(
        self,
        collection_id: UUID,
        attrs: dict[str, Any] | CollectionUpdate,
        user_id: UUID,
    ) -> CollectionModel:
        """
        Rename or re-describe a collection.

        Raises:
            NotFoundError: If missing or not owned
            ValidationError: On invalid attributes (including embedding_dimension)
        """
        collection = await self.get_collection(collection_id, user_id)
        data = validate_attrs(CollectionUpdate, attrs)
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] != collection.name:
            if await collection_crud.get_by_name(self.db, changes["name"], user_id):
                raise ValidationError(f"Collection already exists: {changes['name']}", field="name")

        collection = await collection_crud.update_instance(self.db, collection, **changes)
        await self.db.commit()
        return collection

    async def delete_collection(self, collection_id: UUID, user_id: UUID) -> CollectionModel:
        collection = await self.get_collection(collection_id, user_id)
        await collection_crud.delete_instance(self.db, collection)
        await self.db.commit()
        return collection

    # --- Sources ---

    async def create_source(
        self,
        collection_id: UUID,
        attrs: dict[str, Any] | SourceCreate,
        user_id: UUID,
    ) -> SourceModel:
        """
        Create a source inside an owned collection.

        Raises:
            NotFoundError: If the collection is missing or not owned
            ValidationError: On invalid attributes or duplicate name
        """
        await self.get_collection(collection_id, user_id)
        data = validate_attrs(SourceCreate, attrs)
        if await source_crud.get_by_name(self.db, collection_id, data.name, user_id):
            raise ValidationError(f"Source already exists: {data.name}", field="name")

        source = await source_crud.create(
            self.db,
            collection_id=collection_id,
            user_id=user_id,
            name=data.name,
            source_type=data.source_type,
            source_metadata=data.metadata,
        )
        await self.db.commit()
        return source

    async def list_sources(self, collection_id: UUID, user_id: UUID) -> Sequence[SourceModel]:
        await self.get_collection(collection_id, user_id)
        return await source_crud.get_by_collection(self.db, collection_id)

    async def get_source(self, source_id: UUID, user_id: UUID) -> SourceModel:
        source = await source_crud.get_owned(self.db, source_id, user_id)
        if source is None:
            raise NotFoundError("source", source_id)
        return source

    async def update_source(
        self,
        source_id: UUID,
        attrs: dict[str, Any] | SourceUpdate,
        user_id: UUID,
    ) -> SourceModel:
        source = await self.get_source(source_id, user_id)
        changes = validate_attrs(SourceUpdate, attrs).model_dump(exclude_unset=True)
        if "metadata" in changes:
            changes["source_metadata"] = changes.pop("metadata") or {}
        source = await source_crud.update_instance(self.db, source, **changes)
        await self.db.commit()
        return source

    async def delete_source(self, source_id: UUID, user_id: UUID) -> SourceModel:
        source = await self.get_source(source_id, user_id)
        await source_crud.delete_instance(self.db, source)
        await self.db.commit()
        return source

    # --- Documents ---

    async def create_document(
        self,
        source_id: UUID,
        attrs: dict[str, Any] | DocumentCreate,
        user_id: UUID,
    ) -> DocumentModel:
        """
        Create a pending document inside an owned source.

        Content is hashed; a space id given directly or in metadata is stored
        in the space_id column and mirrored as metadata["wiki_space_id"].

        Raises:
            NotFoundError: If the source is missing or not owned
            ValidationError: On invalid attributes
        """
        await self.get_source(source_id, user_id)
        data = validate_attrs(DocumentCreate, attrs)

        metadata = dict(data.metadata)
        space_id = data.space_id or extract_space_id(metadata)
        if space_id is not None:
            metadata["wiki_space_id"] = str(space_id)
            metadata.pop("space_id", None)

        document = await document_crud.create(
            self.db,
            source_id=source_id,
            user_id=user_id,
            title=data.title,
            content=data.content,
            content_hash=content_hash(data.content),
            status=DocumentStatus.PENDING,
            doc_metadata=metadata,
            space_id=space_id,
        )
        await self.db.commit()
        return document

    async def list_documents(self, source_id: UUID, user_id: UUID) -> Sequence[DocumentModel]:
        await self.get_source(source_id, user_id)
        return await document_crud.get_by_source(self.db, source_id)

    async def get_document(self, document_id: UUID, user_id: UUID) -> DocumentModel:
        document = await document_crud.get_owned(self.db, document_id, user_id)
        if document is None:
            raise NotFoundError("document", document_id)
        return document

    async def delete_document(self, document_id: UUID, user_id: UUID) -> DocumentModel:
        document = await self.get_document(document_id, user_id)
        await document_crud.delete_instance(self.db, document)
        await self.db.commit()
        return document

    # --- Chunks ---

    async def list_chunks_for_document(self, document_id: UUID) -> Sequence[ChunkModel]:
        return await chunk_crud.get_by_document(self.db, document_id)

    async def delete_document_chunks(self, document_id: UUID) -> int:
        count = await chunk_crud.delete_by_document(self.db, document_id)
        await self.db.commit()
        return count

    # --- Find-or-create ---

    async def find_or_create_wiki_collection(self, user_id: UUID) -> CollectionModel:
        return await self.find_or_create_collection_for_source(WIKI_COLLECTION_NAME, user_id)

    async def find_or_create_wiki_source(self, collection_id: UUID, user_id: UUID) -> SourceModel:
        return await self.find_or_create_rag_source_for_source(
            collection_id, WIKI_SOURCE_NAME, user_id
        )

    async def find_or_create_collection_for_source(
        self,
        source_name: str,
        user_id: UUID,
    ) -> CollectionModel:
        """
        Return the user's collection with this name, creating it when missing.

        A concurrent creator winning the unique constraint is tolerated by
        re-reading the row.
        """
        existing = await collection_crud.get_by_name(self.db, source_name, user_id)
        if existing is not None:
            return existing
        try:
            return await self.create_collection({"name": source_name}, user_id)
        except (IntegrityError, ValidationError):
            await self.db.rollback()
            existing = await collection_crud.get_by_name(self.db, source_name, user_id)
            if existing is None:
                raise
            return existing

    async def find_or_create_rag_source_for_source(
        self,
        collection_id: UUID,
        source_name: str,
        user_id: UUID,
        source_type: str = "manual",
    ) -> SourceModel:
        """Return the named source in a collection, creating it when missing."""
        existing = await source_crud.get_by_name(self.db, collection_id, source_name, user_id)
        if existing is not None:
            return existing
        try:
            return await self.create_source(
                collection_id,
                {"name": source_name, "source_type": source_type},
                user_id,
            )
        except (IntegrityError, ValidationError):
            await self.db.rollback()
            existing = await source_crud.get_by_name(self.db, collection_id, source_name, user_id)
            if existing is None:
                raise
            return existing
