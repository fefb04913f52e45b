"""Service orchestrators."""

from .acl_resolver import AclResolver
from .collection_service import CollectionService
from .embedding_pipeline import EmbeddingPipeline, IngestOutcome
from .ingest_service import IngestService, UrlIngestResult
from .reembedding_service import RebuildProgress, ReembedCounts, ReembeddingService
from .search_service import SearchService

__all__ = [
    "AclResolver",
    "CollectionService",
    "EmbeddingPipeline",
    "IngestOutcome",
    "IngestService",
    "UrlIngestResult",
    "RebuildProgress",
    "ReembedCounts",
    "ReembeddingService",
    "SearchService",
]
