"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel with
document-specific queries for status tracking, metadata cross-links and
re-embedding pagination.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Document persistence operations
"""

from typing import Collection as IdCollection, Sequence
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with document-specific queries for filtering
    by source, metadata pointers and embedding status.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_by_source(
        self,
        session: AsyncSession,
        source_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve all documents of a source ordered by title.

        Args:
            session: Async database session
            source_id: Parent source UUID

        Returns:
            Sequence of DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.source_id == source_id)
            .order_by(DocumentModel.title)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_metadata(
        self,
        session: AsyncSession,
        keys: Sequence[str],
        value: str,
        source_id: UUID | None = None,
    ) -> DocumentModel | None:
        """
        Retrieve the first document whose metadata matches any of the keys.

        Args:
            session: Async database session
            keys: Metadata keys to compare (e.g. wiki_document_id)
            value: Expected string value
            source_id: Restrict to one source when given

        Returns:
            DocumentModel if found, None otherwise
        """
        stmt = select(DocumentModel).where(self._metadata_match(keys, value))
        if source_id is not None:
            stmt = stmt.where(DocumentModel.source_id == source_id)
        result = await session.execute(stmt.order_by(DocumentModel.created_at).limit(1))
        return result.scalars().first()

    async def get_by_metadata_accessible(
        self,
        session: AsyncSession,
        keys: Sequence[str],
        value: str,
        user_id: UUID,
        space_ids: IdCollection[UUID],
    ) -> DocumentModel | None:
        """
        Retrieve a metadata-matched document owned by the user or in an accessible space.

        Args:
            session: Async database session
            keys: Metadata keys to compare
            value: Expected string value
            user_id: Requesting user
            space_ids: Wiki spaces the user can access

        Returns:
            DocumentModel if found and visible, None otherwise
        """
        visibility = DocumentModel.user_id == user_id
        if space_ids:
            visibility = or_(visibility, DocumentModel.space_id.in_(list(space_ids)))
        stmt = (
            select(DocumentModel)
            .where(self._metadata_match(keys, value), visibility)
            .order_by(DocumentModel.created_at)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_pending_with_chunks(
        self,
        session: AsyncSession,
        limit: int,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve pending documents that were embedded before, oldest first.

        Args:
            session: Async database session
            limit: Page size
            offset: Rows to skip

        Returns:
            Sequence of DocumentModels awaiting re-embedding
        """
        stmt = (
            select(DocumentModel)
            .where(
                DocumentModel.status == DocumentStatus.PENDING,
                DocumentModel.chunk_count > 0,
            )
            .order_by(DocumentModel.created_at, DocumentModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def reset_embedded_to_pending(self, session: AsyncSession) -> int:
        """
        Reset every embedded document to pending in one statement.

        Args:
            session: Async database session

        Returns:
            Number of documents reset
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.status == DocumentStatus.EMBEDDED)
            .values(status=DocumentStatus.PENDING)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def mark_embedded(
        self,
        session: AsyncSession,
        document: DocumentModel,
        chunk_count: int,
    ) -> DocumentModel:
        """
        Mark document as embedded with its new chunk count.

        Args:
            session: Async database session
            document: Document to update
            chunk_count: Number of chunks written

        Returns:
            Updated DocumentModel
        """
        return await self.update_instance(
            session,
            document,
            status=DocumentStatus.EMBEDDED,
            chunk_count=chunk_count,
            error_message=None,
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        document: DocumentModel,
        error_message: str,
    ) -> DocumentModel:
        """
        Mark document as failed with error details.

        Args:
            session: Async database session
            document: Document to update
            error_message: Human-readable error description

        Returns:
            Updated DocumentModel
        """
        return await self.update_instance(
            session,
            document,
            status=DocumentStatus.ERROR,
            error_message=error_message,
        )

    @staticmethod
    def _metadata_match(keys: Sequence[str], value: str):
        return or_(*(DocumentModel.doc_metadata[key].as_string() == value for key in keys))


document_crud = DocumentCRUD()
