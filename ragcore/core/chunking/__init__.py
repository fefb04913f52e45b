"""
Text chunking for the ingestion pipeline.
"""

from ragcore.core.chunking.chunker import ChunkDraft, TextChunker

__all__ = ["ChunkDraft", "TextChunker"]
