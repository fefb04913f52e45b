"""
Embedding request CRUD operations.

Dependencies: sqlalchemy, ragcore.boundary.db.models
System role: Provider call audit persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragcore.boundary.db.CRUD.base_crud import BaseCRUD
from ragcore.boundary.db.models.embedding_request_model import EmbeddingRequestModel


class EmbeddingRequestCRUD(BaseCRUD[EmbeddingRequestModel]):
    """CRUD operations for EmbeddingRequestModel (append-only)."""

    def __init__(self) -> None:
        """Initialize EmbeddingRequestCRUD with EmbeddingRequestModel."""
        super().__init__(EmbeddingRequestModel)

    async def get_by_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        limit: int = 100,
    ) -> Sequence[EmbeddingRequestModel]:
        """
        Retrieve a user's most recent provider calls.

        Args:
            session: Async database session
            user_id: Requesting user
            limit: Maximum rows

        Returns:
            Sequence of EmbeddingRequestModels, newest first
        """
        stmt = (
            select(EmbeddingRequestModel)
            .where(EmbeddingRequestModel.user_id == user_id)
            .order_by(EmbeddingRequestModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


embedding_request_crud = EmbeddingRequestCRUD()
