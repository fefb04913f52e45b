"""
OpenAI-compatible embeddings adapter.

Works against OpenAI, OpenRouter or any server exposing /embeddings with the
same request shape.

Dependencies: openai
System role: OpenAI-compatible embedding backend
"""

import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from ragcore.boundary.providers.base import EmbeddingProvider
from ragcore.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(EmbeddingProvider):
    """Embeddings over an OpenAI-compatible HTTP API."""

    name = "openai_compatible"

    def __init__(
        self,
        model_id: str,
        base_url: str,
        api_key: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize async client.

        Args:
            model_id: Model name sent as `model`
            base_url: API root, e.g. https://api.openai.com/v1
            api_key: Bearer token
            client: Pre-built AsyncOpenAI client (tests)
        """
        self.model_id = model_id
        self.base_url = base_url
        self._client = client or AsyncOpenAI(api_key=api_key or "unused", base_url=base_url)

    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
    ) -> list[list[float]]:
        # input_type has no equivalent in the OpenAI request shape
        kwargs: dict[str, Any] = {"model": self.model_id, "input": texts}
        if dimensions and self.supports_dimensions(self.model_id):
            kwargs["dimensions"] = dimensions

        try:
            response = await self._client.embeddings.create(**kwargs)
        except APIStatusError as e:
            logger.warning(
                f"{__name__}:embed - API error",
                extra={"status": e.status_code, "base_url": self.base_url},
            )
            raise ProviderError(_error_message(e), status=e.status_code, provider=self.name) from e
        except APIConnectionError as e:
            raise ProviderError(str(e), provider=self.name) from e

        rows = sorted(response.data, key=lambda item: item.index)
        return [row.embedding for row in rows]

    @staticmethod
    def supports_dimensions(model_id: str) -> bool:
        """Only text-embedding-3 models accept a `dimensions` parameter."""
        return "text-embedding-3" in model_id


def _error_message(error: APIStatusError) -> str:
    body = error.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return error.message
