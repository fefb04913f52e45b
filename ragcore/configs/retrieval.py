"""
Retrieval configuration settings.

Search limits, rerank sizes, chunking policy and re-embedding batch size.

Dependencies: pydantic, pydantic_settings
System role: Retrieval engine tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragcore.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Vector search and chunking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    search_limit: int = Field(default=20, description="Default top-k for scoped search")
    rerank_search_limit: int = Field(default=50, description="Candidates fetched before rerank")
    rerank_top_n: int = Field(default=5, description="Results kept after search_and_rerank")
    accessible_top_n: int = Field(default=10, description="Results kept after search_accessible")
    augment_candidate_limit: int = Field(default=100, description="Raw hits for augment_context")
    augment_rerank_top_n: int = Field(
        default=40,
        description="Rerank threshold and final size for augment_context",
    )

    chunk_size: int = Field(default=1000, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, description="Overlap between consecutive chunks")

    error_message_max_chars: int = Field(default=10_000, description="Document error message cap")
    reembed_batch_size: int = Field(default=10, description="Documents per re-embedding job")
