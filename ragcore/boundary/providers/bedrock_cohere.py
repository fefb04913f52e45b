"""
Amazon Bedrock adapter for Cohere embed and rerank models.

Calls bedrock-runtime invoke_model in a worker thread so the event loop is
never blocked by boto3.

Dependencies: boto3, botocore
System role: Bedrock embedding/rerank backend
"""

import asyncio
import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ragcore.boundary.providers.base import EmbeddingProvider, RerankHit, RerankProvider
from ragcore.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

_THROTTLING_CODES = {"ThrottlingException", "TooManyRequestsException"}
_UNAVAILABLE_CODES = {"ServiceUnavailableException", "ModelNotReadyException"}


class BedrockCohereProvider(EmbeddingProvider, RerankProvider):
    """Cohere models served by Bedrock."""

    name = "amazon_bedrock"

    def __init__(
        self,
        model_id: str,
        rerank_model_id: str | None = None,
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        """
        Initialize Bedrock runtime client.

        Args:
            model_id: Embedding model id (e.g. cohere.embed-v4:0)
            rerank_model_id: Rerank model id (e.g. cohere.rerank-v3-5:0)
            region: AWS region
            client: Pre-built bedrock-runtime client (tests)
        """
        self.model_id = model_id
        self.rerank_model_id = rerank_model_id
        self._client = client or boto3.client("bedrock-runtime", region_name=region)

    async def embed(
        self,
        texts: list[str],
        *,
        input_type: str,
        dimensions: int | None = None,
    ) -> list[list[float]]:
        body: dict[str, Any] = {
            "texts": texts,
            "input_type": input_type,
            "embedding_types": ["float"],
        }
        if dimensions:
            body["output_dimension"] = dimensions

        payload = await self._invoke(self.model_id, body)
        embeddings = payload.get("embeddings")
        if isinstance(embeddings, dict):
            embeddings = embeddings.get("float")
        if not isinstance(embeddings, list):
            raise ProviderError("unexpected embed response shape", provider=self.name)
        return embeddings

    async def rerank(
        self,
        query: str,
        documents: list[str],
        *,
        top_n: int,
    ) -> list[RerankHit]:
        if not self.rerank_model_id:
            raise ProviderError("no rerank model configured", provider=self.name)

        body = {
            "query": query,
            "documents": documents,
            "top_n": min(top_n, len(documents)),
            "api_version": 2,
        }
        payload = await self._invoke(self.rerank_model_id, body)
        results = payload.get("results")
        if not isinstance(results, list):
            raise ProviderError("unexpected rerank response shape", provider=self.name)
        return [
            RerankHit(index=int(item["index"]), relevance_score=float(item["relevance_score"]))
            for item in results
        ]

    async def _invoke(self, model_id: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await asyncio.to_thread(
                self._client.invoke_model,
                modelId=model_id,
                body=json.dumps(body),
                contentType="application/json",
                accept="application/json",
            )
        except ClientError as e:
            raise self._to_provider_error(e) from e
        except BotoCoreError as e:
            logger.warning(f"{__name__}:_invoke - Transport failure: {e}")
            raise ProviderError(str(e), provider=self.name) from e

        raw = response["body"].read()
        return json.loads(raw)

    def _to_provider_error(self, error: ClientError) -> ProviderError:
        err = error.response.get("Error", {})
        code = err.get("Code", "")
        message = err.get("Message") or str(error)
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

        if code in _THROTTLING_CODES:
            status = 429
        elif code in _UNAVAILABLE_CODES:
            status = 503

        logger.warning(
            f"{__name__}:_invoke - Bedrock error",
            extra={"code": code, "status": status},
        )
        return ProviderError(message, status=status, provider=self.name)
