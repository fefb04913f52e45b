"""
Entity ACL ORM model.

Grants a user a role on an external entity (e.g. a wiki space). Backs the
default implementation of the authorization contract.

Dependencies: sqlalchemy, ragcore.boundary.db.base
System role: Access grants consumed by ACL-aware search
"""

import uuid

from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ragcore.boundary.db.base import Base, UUIDMixin, TimestampMixin


class EntityAclModel(Base, UUIDMixin, TimestampMixin):
    """
    Entity ACL model.

    Attributes:
        entity_type: Entity kind (wiki_space)
        entity_id: Entity UUID
        user_id: Grantee UUID
        role: owner, manager, editor or viewer
    """

    __tablename__ = "entity_acls"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", "user_id", name="uq_entity_acls_entity_user"),
    )

    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default="viewer")
