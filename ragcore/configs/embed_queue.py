"""
Embed queue configuration settings.

Batching, retry and per-tenant rate limits for outbound embedding calls.

Dependencies: pydantic, pydantic_settings
System role: Embed queue tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragcore.configs.base import BaseSettings


class EmbedQueueSettings(BaseSettings):
    """Embed queue batching and limits."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBED_QUEUE_",
        case_sensitive=False,
        extra="ignore",
    )

    batch_size: int = Field(default=96, description="Maximum texts per provider request")
    flush_ms: int = Field(default=2000, description="Flush delay after first arrival")
    max_retries: int = Field(default=5, description="Retries on 429/503")
    backoff_ms: int = Field(default=1000, description="Initial retry backoff")
    max_backoff_ms: int = Field(default=30000, description="Retry backoff ceiling")
    tenant_texts_per_minute: int = Field(
        default=5000,
        description="Texts a single user may submit per sliding minute",
    )
