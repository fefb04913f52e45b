"""
Embedding request audit recorder.

Writes one EmbeddingRequestModel row per provider call in its own session so
audit rows survive even when the caller's transaction rolls back.

Dependencies: sqlalchemy, ragcore.boundary.db
System role: Provider call audit log
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ragcore.boundary.db.CRUD.embedding_request_crud import embedding_request_crud

logger = logging.getLogger(__name__)


class EmbeddingRequestRecorder:
    """Persists provider call audit rows; never raises into the caller."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize recorder.

        Args:
            session_factory: Factory for short-lived audit sessions
        """
        self._session_factory = session_factory

    async def record(
        self,
        *,
        request_type: str,
        model_id: str | None,
        status: str,
        input_count: int,
        token_count: int,
        latency_ms: int,
        error_message: str | None = None,
        user_id: UUID | None = None,
    ) -> None:
        """
        Insert one audit row.

        Args:
            request_type: "embed" or "rerank"
            model_id: Model that served the call
            status: "success" or "error"
            input_count: Texts (or documents) submitted
            token_count: Estimated tokens submitted
            latency_ms: Wall-clock latency of the provider call
            error_message: Short error description on failure
            user_id: User the call was made for
        """
        try:
            async with self._session_factory() as session:
                await embedding_request_crud.create(
                    session,
                    request_type=request_type,
                    model_id=model_id,
                    status=status,
                    input_count=input_count,
                    token_count=token_count,
                    latency_ms=latency_ms,
                    error_message=error_message,
                    user_id=user_id,
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.warning(
                f"{__name__}:record - Failed to write audit row: {e}",
                extra={"request_type": request_type, "model_id": model_id},
            )
