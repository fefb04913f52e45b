"""
Source CRUD operations.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Source persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.source_model import SourceModel


class SourceCRUD(BaseCRUD[SourceModel]):
    """CRUD operations for SourceModel."""

    def __init__(self) -> None:
        """Initialize SourceCRUD with SourceModel."""
        super().__init__(SourceModel)

    async def get_by_collection(
        self,
        session: AsyncSession,
        collection_id: UUID,
    ) -> Sequence[SourceModel]:
        """
        Retrieve all sources of a collection ordered by name.

        Args:
            session: Async database session
            collection_id: Parent collection UUID

        Returns:
            Sequence of SourceModels
        """
        stmt = (
            select(SourceModel)
            .where(SourceModel.collection_id == collection_id)
            .order_by(SourceModel.name)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_name(
        self,
        session: AsyncSession,
        collection_id: UUID,
        name: str,
        user_id: UUID,
    ) -> SourceModel | None:
        """
        Retrieve a source by its natural key.

        Args:
            session: Async database session
            collection_id: Parent collection UUID
            name: Source name
            user_id: Owner UUID

        Returns:
            SourceModel if found, None otherwise
        """
        stmt = select(SourceModel).where(
            SourceModel.collection_id == collection_id,
            SourceModel.name == name,
            SourceModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


source_crud = SourceCRUD()
