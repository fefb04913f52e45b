"""
Entity ACL CRUD operations.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Access grant persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.entity_acl_model import EntityAclModel


class EntityAclCRUD(BaseCRUD[EntityAclModel]):
    """CRUD operations for EntityAclModel."""

    def __init__(self) -> None:
        """Initialize EntityAclCRUD with EntityAclModel."""
        super().__init__(EntityAclModel)

    async def get_grant(
        self,
        session: AsyncSession,
        entity_type: str,
        entity_id: UUID,
        user_id: UUID,
    ) -> EntityAclModel | None:
        """
        Retrieve a single user's grant on an entity.

        Args:
            session: Async database session
            entity_type: Entity kind
            entity_id: Entity UUID
            user_id: Grantee UUID

        Returns:
            EntityAclModel if granted, None otherwise
        """
        stmt = select(EntityAclModel).where(
            EntityAclModel.entity_type == entity_type,
            EntityAclModel.entity_id == entity_id,
            EntityAclModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_entity_ids(
        self,
        session: AsyncSession,
        entity_type: str,
        user_id: UUID,
    ) -> Sequence[UUID]:
        """
        Retrieve ids of every entity of a type granted to a user.

        Args:
            session: Async database session
            entity_type: Entity kind
            user_id: Grantee UUID

        Returns:
            Sequence of entity UUIDs
        """
        stmt = select(EntityAclModel.entity_id).where(
            EntityAclModel.entity_type == entity_type,
            EntityAclModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_owner_ids(
        self,
        session: AsyncSession,
        entity_type: str,
        entity_ids: Sequence[UUID],
    ) -> Sequence[UUID]:
        """
        Retrieve distinct owners of the given entities.

        Args:
            session: Async database session
            entity_type: Entity kind
            entity_ids: Entity UUIDs

        Returns:
            Sequence of owner user UUIDs
        """
        if not entity_ids:
            return []
        stmt = (
            select(EntityAclModel.user_id)
            .where(
                EntityAclModel.entity_type == entity_type,
                EntityAclModel.entity_id.in_(list(entity_ids)),
                EntityAclModel.role == "owner",
            )
            .distinct()
        )
        result = await session.execute(stmt)
        return result.scalars().all()


entity_acl_crud = EntityAclCRUD()
