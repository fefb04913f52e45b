"""
Chunk CRUD operations.

Bulk insert, wholesale replacement and embedding invalidation for
ChunkModel rows.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.chunk_model import ChunkModel


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve a document's chunks in position order.

        Args:
            session: Async database session
            document_id: Parent document UUID

        Returns:
            Sequence of ChunkModels
        """
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.position)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete every chunk of a document.

        Args:
            session: Async database session
            document_id: Parent document UUID

        Returns:
            Number of chunks deleted
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def bulk_insert(self, session: AsyncSession, rows: list[dict[str, Any]]) -> int:
        """
        Insert many chunk rows in one statement.

        Args:
            session: Async database session
            rows: Column dictionaries (ids and timestamps are filled by defaults)

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        await session.execute(insert(ChunkModel), rows)
        return len(rows)

    async def clear_embeddings(self, session: AsyncSession) -> int:
        """
        Null every stored embedding in one statement.

        Args:
            session: Async database session

        Returns:
            Number of chunks cleared
        """
        stmt = (
            update(ChunkModel)
            .where(ChunkModel.embedding.is_not(None))
            .values(embedding=None)
        )
        result = await session.execute(stmt)
        return result.rowcount


chunk_crud = ChunkCRUD()
