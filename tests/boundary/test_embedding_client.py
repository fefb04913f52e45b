"""
Test suite for EmbeddingClient.

Tests backend selection, config reload and the audit trail written per
provider call.

System role: Verification of the embedding facade
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcore.boundary.providers.base import RerankHit
from ragcore.boundary.providers.bedrock_cohere import BedrockCohereProvider
from ragcore.boundary.providers.embedding_client import (
    DEFAULT_BEDROCK_MODEL,
    EmbeddingClient,
    build_embedding_provider,
    resolve_base_url,
)
from ragcore.boundary.providers.openai_compat import OpenAICompatibleProvider
from ragcore.configs.embedding import EmbeddingConfigProvider, EmbeddingModelConfig
from ragcore.core.exceptions import ProviderError


@pytest.fixture
def embed_backend() -> AsyncMock:
    backend = AsyncMock()
    backend.embed = AsyncMock(return_value=[[0.1, 0.2, 0.3, 0.4]])
    backend.rerank = AsyncMock(return_value=[RerankHit(index=0, relevance_score=0.8)])
    return backend


@pytest.fixture
def recorder() -> AsyncMock:
    recorder = AsyncMock()
    recorder.record = AsyncMock()
    return recorder


@pytest.fixture
def embedding_factory(embed_backend) -> MagicMock:
    return MagicMock(return_value=embed_backend)


@pytest.fixture
def client(config_provider, recorder, embedding_factory, embed_backend) -> EmbeddingClient:
    return EmbeddingClient(
        config_provider,
        recorder,
        embedding_factory=embedding_factory,
        rerank_factory=MagicMock(return_value=embed_backend),
    )


class TestEmbed:
    """Test suite for EmbeddingClient.embed()."""

    async def test_should_delegate_to_active_backend(self, client, embed_backend) -> None:
        vectors = await client.embed(["hello"], input_type="search_query", dimensions=4)

        assert vectors == [[0.1, 0.2, 0.3, 0.4]]
        embed_backend.embed.assert_awaited_once_with(["hello"], input_type="search_query", dimensions=4)

    async def test_success_should_record_audit_row(self, client, recorder, user_id) -> None:
        await client.embed(["one two three"], input_type="search_document", user_id=user_id)

        kwargs = recorder.record.call_args.kwargs
        assert kwargs["request_type"] == "embed"
        assert kwargs["model_id"] == "text-embedding-3-small"
        assert kwargs["status"] == "success"
        assert kwargs["input_count"] == 1
        assert kwargs["token_count"] == 4
        assert kwargs["error_message"] is None
        assert kwargs["user_id"] == user_id

    async def test_without_user_should_not_record(self, client, recorder) -> None:
        await client.embed(["a"], input_type="search_query")

        recorder.record.assert_not_awaited()

    @pytest.mark.parametrize("status,message", [(429, "HTTP 429"), (None, "request_failed")])
    async def test_failure_should_record_and_reraise(
        self, client, recorder, embed_backend, user_id, status, message
    ) -> None:
        embed_backend.embed.side_effect = ProviderError("boom", status=status)

        with pytest.raises(ProviderError):
            await client.embed(["a"], input_type="search_query", user_id=user_id)

        kwargs = recorder.record.call_args.kwargs
        assert kwargs["status"] == "error"
        assert kwargs["error_message"] == message

    async def test_backends_should_be_rebuilt_after_reload(
        self, client, config_provider, embedding_factory, model_config
    ) -> None:
        await client.embed(["a"], input_type="search_query")
        await client.embed(["b"], input_type="search_query")
        assert embedding_factory.call_count == 1

        config_provider.reload(model_config.model_copy(update={"dimension": 8}))
        await client.embed(["c"], input_type="search_query")

        assert embedding_factory.call_count == 2
        assert embedding_factory.call_args.args[0].dimension == 8


class TestRerank:
    """Test suite for EmbeddingClient.rerank()."""

    async def test_should_record_rerank_with_rerank_model(self, client, recorder, user_id) -> None:
        hits = await client.rerank("q", ["x", "y"], top_n=1, user_id=user_id)

        assert hits == [RerankHit(index=0, relevance_score=0.8)]
        kwargs = recorder.record.call_args.kwargs
        assert kwargs["request_type"] == "rerank"
        assert kwargs["model_id"] == "cohere.rerank-v3-5:0"
        assert kwargs["input_count"] == 3


class TestProviderSelection:
    """Test suite for backend construction from model config."""

    def test_bedrock_provider_type_should_build_bedrock(self) -> None:
        config = EmbeddingModelConfig(provider_type="amazon_bedrock", model_id="cohere.embed-v4:0", dimension=1024)

        provider = build_embedding_provider(config)

        assert isinstance(provider, BedrockCohereProvider)
        assert provider.model_id == "cohere.embed-v4:0"

    def test_no_model_should_fall_back_to_default_bedrock_model(self) -> None:
        config = EmbeddingModelConfig(provider_type="openai", model_id=None, dimension=1024)

        provider = build_embedding_provider(config)

        assert isinstance(provider, BedrockCohereProvider)
        assert provider.model_id == DEFAULT_BEDROCK_MODEL

    def test_other_provider_types_should_build_openai_compatible(self) -> None:
        config = EmbeddingModelConfig(
            provider_type="openrouter", model_id="openai/text-embedding-3-small", dimension=1536, api_key="k"
        )

        provider = build_embedding_provider(config)

        assert isinstance(provider, OpenAICompatibleProvider)
        assert provider.base_url == "https://openrouter.ai/api/v1"

    @pytest.mark.parametrize(
        "provider_type,base_url,expected",
        [
            ("openai", None, "https://api.openai.com/v1"),
            ("openrouter", None, "https://openrouter.ai/api/v1"),
            ("local_vllm", None, "https://api.openai.com/v1"),
            ("openai", "http://localhost:8080/v1", "http://localhost:8080/v1"),
        ],
    )
    def test_resolve_base_url(self, provider_type, base_url, expected) -> None:
        config = EmbeddingModelConfig(provider_type=provider_type, model_id="m", dimension=4, base_url=base_url)

        assert resolve_base_url(config) == expected


class TestConfigProvider:
    """Test suite for EmbeddingConfigProvider."""

    def test_reload_should_replace_snapshot(self, model_config) -> None:
        provider = EmbeddingConfigProvider(model_config)
        replacement = model_config.model_copy(update={"model_id": "text-embedding-3-large", "dimension": 3072})

        assert provider.reload(replacement) is replacement
        assert provider.get().dimension == 3072

    def test_enabled_should_require_model_id(self, model_config) -> None:
        assert model_config.enabled
        assert not model_config.model_copy(update={"model_id": None}).enabled
