"""
Collection CRUD operations.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Collection persistence operations
"""

from typing import Collection as IdCollection, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.collection_model import CollectionModel


class CollectionCRUD(BaseCRUD[CollectionModel]):
    """CRUD operations for CollectionModel with owner-scoped queries."""

    def __init__(self) -> None:
        """Initialize CollectionCRUD with CollectionModel."""
        super().__init__(CollectionModel)

    async def get_by_user(self, session: AsyncSession, user_id: UUID) -> Sequence[CollectionModel]:
        """
        Retrieve a user's collections ordered by name.

        Args:
            session: Async database session
            user_id: Owner UUID

        Returns:
            Sequence of owned CollectionModels
        """
        stmt = (
            select(CollectionModel)
            .where(CollectionModel.user_id == user_id)
            .order_by(CollectionModel.name)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_name(
        self,
        session: AsyncSession,
        name: str,
        user_id: UUID,
    ) -> CollectionModel | None:
        """
        Retrieve a user's collection by name.

        Args:
            session: Async database session
            name: Collection name
            user_id: Owner UUID

        Returns:
            CollectionModel if found, None otherwise
        """
        stmt = select(CollectionModel).where(
            CollectionModel.name == name,
            CollectionModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_named_for_owners(
        self,
        session: AsyncSession,
        name: str,
        owner_ids: IdCollection[UUID],
        exclude_ids: IdCollection[UUID] = (),
    ) -> Sequence[CollectionModel]:
        """
        Retrieve collections with a given name owned by any of several users.

        Args:
            session: Async database session
            name: Collection name
            owner_ids: Candidate owners
            exclude_ids: Collection ids to leave out

        Returns:
            Sequence of CollectionModels ordered by name
        """
        if not owner_ids:
            return []
        stmt = select(CollectionModel).where(
            CollectionModel.name == name,
            CollectionModel.user_id.in_(list(owner_ids)),
        )
        if exclude_ids:
            stmt = stmt.where(CollectionModel.id.not_in(list(exclude_ids)))
        result = await session.execute(stmt.order_by(CollectionModel.name))
        return result.scalars().all()


collection_crud = CollectionCRUD()
