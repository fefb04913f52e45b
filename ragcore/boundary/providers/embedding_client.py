"""
Embedding client facade.

Selects the backend for the active embedding model and audits every call.

- provider_type "amazon_bedrock" → BedrockCohereProvider
- anything else → OpenAICompatibleProvider (default base URLs for openai/openrouter)
- no model configured → BedrockCohereProvider with the default Cohere model

Reranking always goes through Bedrock Cohere.

Dependencies: ragcore.boundary.providers, ragcore.configs
System role: Single entry point for embedding and rerank calls
"""

import logging
import time
from typing import Awaitable, Callable, TypeVar
from uuid import UUID

from ragcore.boundary.providers.base import EmbeddingProvider, RerankHit, RerankProvider
from ragcore.boundary.providers.bedrock_cohere import BedrockCohereProvider
from ragcore.boundary.providers.openai_compat import OpenAICompatibleProvider
from ragcore.boundary.providers.request_recorder import EmbeddingRequestRecorder
from ragcore.configs.embedding import EmbeddingConfigProvider, EmbeddingModelConfig
from ragcore.core.content_hash import estimate_token_count
from ragcore.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BEDROCK_MODEL = "cohere.embed-v4:0"

DEFAULT_BASE_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": "https://api.openai.com/v1",
}

ProviderFactory = Callable[[EmbeddingModelConfig], EmbeddingProvider]


def build_embedding_provider(config: EmbeddingModelConfig) -> EmbeddingProvider:
    """
    Build the embedding backend for a model configuration.

    Args:
        config: Active model snapshot

    Returns:
        EmbeddingProvider: Bedrock or OpenAI-compatible adapter
    """
    if not config.enabled or config.provider_type == "amazon_bedrock":
        return BedrockCohereProvider(
            model_id=config.model_id or DEFAULT_BEDROCK_MODEL,
            rerank_model_id=config.rerank_model_id,
            region=config.aws_region,
        )
    return OpenAICompatibleProvider(
        model_id=config.model_id,
        base_url=resolve_base_url(config),
        api_key=config.api_key,
    )


def build_rerank_provider(config: EmbeddingModelConfig) -> RerankProvider:
    """Rerank backend; Cohere on Bedrock regardless of the embedding provider."""
    return BedrockCohereProvider(
        model_id=config.model_id or DEFAULT_BEDROCK_MODEL,
        rerank_model_id=config.rerank_model_id,
        region=config.aws_region,
    )


def resolve_base_url(config: EmbeddingModelConfig) -> str:
    """Configured base URL, else the provider default, else OpenAI."""
    return config.base_url or DEFAULT_BASE_URLS.get(
        config.provider_type, DEFAULT_BASE_URLS["openai"]
    )


class EmbeddingClient:
    """
    Facade over the active embedding and rerank backends.

    Backends are rebuilt whenever the config provider hands out a different
    snapshot, so an explicit reload takes effect on the next call.
    """

    def __init__(
        self,
        config_provider: EmbeddingConfigProvider,
        recorder: EmbeddingRequestRecorder | None = None,
        embedding_factory: ProviderFactory = build_embedding_provider,
        rerank_factory: Callable[[EmbeddingModelConfig], RerankProvider] = build_rerank_provider,
    ) -> None:
        """
        Initialize facade.

        Args:
            config_provider: Source of the active model snapshot
            recorder: Audit recorder (None disables auditing)
            embedding_factory: Builds embedding backends
            rerank_factory: Builds rerank backends
        """
        self._config_provider = config_provider
        self._recorder = recorder
        self._embedding_factory = embedding_factory
        self._rerank_factory = rerank_factory
        self._config: EmbeddingModelConfig | None = None
        self._embedder: EmbeddingProvider | None = None
        self._reranker: RerankProvider | None = None

    @property
    def config(self) -> EmbeddingModelConfig:
        return self._config_provider.get()

    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
        user_id: UUID | None = None,
    ) -> list[list[float]]:
        """
        Embed texts with the active model.

        Args:
            texts: Texts to embed
            input_type: "search_document" or "search_query"
            dimensions: Requested output dimension
            user_id: User to attribute the audit row to

        Returns:
            list[list[float]]: One vector per text

        Raises:
            ProviderError: On backend failure
        """
        self._refresh()
        embedder = self._embedder
        return await self._audited(
            "embed",
            self._config.model_id,
            texts,
            user_id,
            lambda: embedder.embed(texts, input_type=input_type, dimensions=dimensions),
        )

    async def rerank(
        self,
        query: str,
        documents: list[str],
        *,
        top_n: int,
        user_id: UUID | None = None,
    ) -> list[RerankHit]:
        """
        Rerank documents against a query.

        Raises:
            ProviderError: On backend failure
        """
        self._refresh()
        reranker = self._reranker
        return await self._audited(
            "rerank",
            self._config.rerank_model_id,
            [query, *documents],
            user_id,
            lambda: reranker.rerank(query, documents, top_n=top_n),
        )

    def _refresh(self) -> None:
        config = self._config_provider.get()
        if config != self._config or self._embedder is None:
            logger.info(
                f"{__name__}:_refresh - Building backends",
                extra={"provider_type": config.provider_type, "model_id": config.model_id},
            )
            self._embedder = self._embedding_factory(config)
            self._reranker = self._rerank_factory(config)
            self._config = config

    async def _audited(
        self,
        request_type: str,
        model_id: str | None,
        texts: list[str],
        user_id: UUID | None,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        start = time.monotonic()
        try:
            result = await call()
        except ProviderError as e:
            await self._record(request_type, model_id, texts, user_id, start, e)
            raise
        await self._record(request_type, model_id, texts, user_id, start, None)
        return result

    async def _record(
        self,
        request_type: str,
        model_id: str | None,
        texts: list[str],
        user_id: UUID | None,
        start: float,
        error: ProviderError | None,
    ) -> None:
        if self._recorder is None or user_id is None:
            return
        if error is None:
            status, error_message = "success", None
        elif error.status is not None:
            status, error_message = "error", f"HTTP {error.status}"
        else:
            status, error_message = "error", "request_failed"

        await self._recorder.record(
            request_type=request_type,
            model_id=model_id,
            status=status,
            input_count=len(texts),
            token_count=estimate_token_count(texts),
            latency_ms=int((time.monotonic() - start) * 1000),
            error_message=error_message,
            user_id=user_id,
        )
