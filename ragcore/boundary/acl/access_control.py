"""
Authorization collaborator.

The retrieval core never decides who may see a wiki space; it asks an
AccessControl implementation. EntityAclAccessControl answers from the
entity_acls table.

Dependencies: sqlalchemy, ragcore.boundary.db
System role: Capability lookups for ACL-aware retrieval
"""

from typing import Protocol, Sequence, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.entity_acl_crud import entity_acl_crud


@runtime_checkable
class AccessControl(Protocol):
    """Capability checks on shared entities."""

    async def has_access(self, entity_type: str, entity_id: UUID, user_id: UUID) -> bool: ...

    async def accessible_entity_ids(self, entity_type: str, user_id: UUID) -> Sequence[UUID]: ...

    async def get_role(self, entity_type: str, entity_id: UUID, user_id: UUID) -> str | None: ...


class EntityAclAccessControl:
    """AccessControl backed by entity_acls rows in the caller's session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_access(self, entity_type: str, entity_id: UUID, user_id: UUID) -> bool:
        return await self.get_role(entity_type, entity_id, user_id) is not None

    async def accessible_entity_ids(self, entity_type: str, user_id: UUID) -> Sequence[UUID]:
        return await entity_acl_crud.get_entity_ids(self._session, entity_type, user_id)

    async def get_role(self, entity_type: str, entity_id: UUID, user_id: UUID) -> str | None:
        grant = await entity_acl_crud.get_grant(self._session, entity_type, entity_id, user_id)
        return grant.role if grant else None
