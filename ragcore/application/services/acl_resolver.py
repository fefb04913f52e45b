"""
ACL-aware document lookup with self-healing.

Finds retrieval documents by their cross-link metadata (wiki_document_id,
source_document_id). Documents owned by the user or sitting in an accessible
wiki space are found directly. Rows that predate space tracking have no
space_id; for those the wiki space is resolved through the document tree,
the user's role is checked, and the space id is persisted so the next lookup
takes the fast path.

Dependencies: sqlalchemy, ragcore.boundary.db, ragcore.boundary.acl
System role: Shared-document resolution for wiki sync and citations
"""

import logging
import uuid
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.application.services.collection_service import WIKI_SPACE_ENTITY
from ragcore.boundary.acl.access_control import AccessControl
from ragcore.boundary.acl.document_tree import DocumentTree, NullDocumentTree
from ragcore.boundary.db.CRUD.document_crud import document_crud
from ragcore.boundary.db.models import DocumentModel
from ragcore.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

WIKI_DOCUMENT_KEY = "wiki_document_id"
SOURCE_DOCUMENT_KEY = "source_document_id"


class AclResolver:
    """Resolves documents by metadata pointer under the user's permissions."""

    def __init__(
        self,
        db: AsyncSession,
        access_control: AccessControl,
        document_tree: DocumentTree | None = None,
    ) -> None:
        """
        Initialize resolver.

        Args:
            db: AsyncSession for lookups and the space_id backfill
            access_control: Authorization collaborator
            document_tree: Wiki document → space resolution
        """
        self.db = db
        self._access_control = access_control
        self._document_tree = document_tree or NullDocumentTree()

    async def find_document_by_wiki_id(self, wiki_document_id: str, user_id: UUID) -> DocumentModel:
        return await self._find((WIKI_DOCUMENT_KEY,), wiki_document_id, user_id)

    async def find_document_by_source_doc_id(
        self,
        source_document_id: str,
        user_id: UUID,
    ) -> DocumentModel:
        return await self._find((SOURCE_DOCUMENT_KEY,), source_document_id, user_id)

    async def get_document_for_source_doc(self, document_id: str, user_id: UUID) -> DocumentModel:
        """Match either pointer key."""
        return await self._find((WIKI_DOCUMENT_KEY, SOURCE_DOCUMENT_KEY), document_id, user_id)

    async def _find(self, keys: Sequence[str], value: str, user_id: UUID) -> DocumentModel:
        space_ids = await self._access_control.accessible_entity_ids(WIKI_SPACE_ENTITY, user_id)
        document = await document_crud.get_by_metadata_accessible(
            self.db, keys, str(value), user_id, space_ids
        )
        if document is not None:
            return document

        candidate = await document_crud.get_by_metadata(self.db, keys, str(value))
        return await self._resolve_wiki_acl(candidate, user_id, value)

    async def _resolve_wiki_acl(
        self,
        document: DocumentModel | None,
        user_id: UUID,
        lookup: str,
    ) -> DocumentModel:
        if document is None:
            raise NotFoundError("document", lookup)
        if document.user_id == user_id:
            return document
        # A recorded space already failed the fast path
        if document.space_id is not None:
            raise NotFoundError("document", lookup)

        metadata = document.doc_metadata or {}
        wiki_document_id = metadata.get(WIKI_DOCUMENT_KEY)
        if not isinstance(wiki_document_id, str):
            raise NotFoundError("document", lookup)

        space_id = _parse_uuid(metadata.get("wiki_space_id"))
        if space_id is None:
            space_id = await self._document_tree.get_space_id(wiki_document_id)
        if space_id is None:
            raise NotFoundError("document", lookup)

        role = await self._access_control.get_role(WIKI_SPACE_ENTITY, space_id, user_id)
        if role is None:
            raise NotFoundError("document", lookup)

        await document_crud.update_instance(
            self.db,
            document,
            space_id=space_id,
            doc_metadata={**metadata, "wiki_space_id": str(space_id)},
        )
        await self.db.commit()
        logger.info(
            f"{__name__}:_resolve_wiki_acl - Backfilled space_id",
            extra={"document_id": str(document.id), "space_id": str(space_id)},
        )
        return document


def _parse_uuid(value) -> UUID | None:
    if value is None:
        return None
    try:
        return value if isinstance(value, UUID) else uuid.UUID(str(value))
    except ValueError:
        return None
