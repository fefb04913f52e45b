"""
Embedding model configuration.

Holds the active embedding model (provider, model id, dimension, credentials)
and the rerank model. The active model is process-wide configuration that is
injected into the pipeline through EmbeddingConfigProvider rather than read
from a module-level cache.

Dependencies: pydantic, pydantic_settings
System role: Active embedding model configuration
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import SettingsConfigDict

from ragcore.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding and rerank provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    provider_type: str = Field(
        default="amazon_bedrock",
        description="Provider type: 'amazon_bedrock', 'openai', 'openrouter' or any OpenAI-compatible name",
    )
    model_id: str | None = Field(
        default="cohere.embed-v4:0",
        description="Active embedding model id (unset disables embedding)",
    )
    dimension: int = Field(default=1024, description="Output dimension of the active model")
    base_url: str | None = Field(default=None, description="Base URL for OpenAI-compatible APIs")
    api_key: str | None = Field(default=None, description="API key for OpenAI-compatible APIs")
    aws_region: str = Field(default="us-east-1", description="AWS region for Bedrock runtime")
    rerank_model_id: str = Field(
        default="cohere.rerank-v3-5:0",
        description="Bedrock rerank model id",
    )


class EmbeddingModelConfig(BaseModel):
    """Immutable snapshot of the active embedding model."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider_type: str
    model_id: str | None
    dimension: int
    base_url: str | None = None
    api_key: str | None = None
    aws_region: str = "us-east-1"
    rerank_model_id: str = "cohere.rerank-v3-5:0"

    @property
    def enabled(self) -> bool:
        """Embedding is enabled only when a model is configured."""
        return bool(self.model_id)

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "EmbeddingModelConfig":
        return cls(
            provider_type=settings.provider_type,
            model_id=settings.model_id,
            dimension=settings.dimension,
            base_url=settings.base_url,
            api_key=settings.api_key,
            aws_region=settings.aws_region,
            rerank_model_id=settings.rerank_model_id,
        )


class EmbeddingConfigProvider:
    """
    Injectable holder for the active embedding model.

    Callers read the current snapshot with get(). When an administrator changes
    the embedding model, reload() re-reads the environment (or accepts an
    explicit snapshot) so future embeds pick it up. Already-written vectors are
    never touched by a reload.
    """

    def __init__(self, config: EmbeddingModelConfig | None = None) -> None:
        self._config = config

    def get(self) -> EmbeddingModelConfig:
        if self._config is None:
            self._config = EmbeddingModelConfig.from_settings(EmbeddingSettings())
        return self._config

    def reload(self, config: EmbeddingModelConfig | None = None) -> EmbeddingModelConfig:
        """
        Invalidate the cached snapshot.

        Args:
            config: Explicit replacement; re-read from environment when None

        Returns:
            EmbeddingModelConfig: The new active configuration
        """
        self._config = config or EmbeddingModelConfig.from_settings(EmbeddingSettings())
        return self._config
