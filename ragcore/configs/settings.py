"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and Celery.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from ragcore.configs.base import BaseSettings
from ragcore.configs.celery_config import CelerySettings
from ragcore.configs.database import DatabaseSettings
from ragcore.configs.embed_queue import EmbedQueueSettings
from ragcore.configs.embedding import EmbeddingSettings
from ragcore.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    embed_queue: EmbedQueueSettings = EmbedQueueSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    celery: CelerySettings = CelerySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from ragcore.configs import get_settings
        settings = get_settings()
    """
    return Settings()
