"""
Embedding and rerank provider adapters.

Exports:
  - EmbeddingProvider, RerankProvider, RerankHit: Backend contracts
  - BedrockCohereProvider: Cohere models on Amazon Bedrock
  - OpenAICompatibleProvider: OpenAI-compatible embeddings API
  - EmbeddingClient: Facade selecting the backend for the active model
  - EmbeddingRequestRecorder: Provider call audit log

Dependencies: boto3, openai, ragcore.configs
System role: External embedding/rerank services
"""

from ragcore.boundary.providers.base import EmbeddingProvider, RerankHit, RerankProvider
from ragcore.boundary.providers.bedrock_cohere import BedrockCohereProvider
from ragcore.boundary.providers.embedding_client import (
    EmbeddingClient,
    build_embedding_provider,
    build_rerank_provider,
)
from ragcore.boundary.providers.openai_compat import OpenAICompatibleProvider
from ragcore.boundary.providers.request_recorder import EmbeddingRequestRecorder

__all__ = [
    "EmbeddingProvider",
    "RerankProvider",
    "RerankHit",
    "BedrockCohereProvider",
    "OpenAICompatibleProvider",
    "EmbeddingClient",
    "EmbeddingRequestRecorder",
    "build_embedding_provider",
    "build_rerank_provider",
]
