"""
Content hashing for idempotent ingestion.

Dependencies: hashlib
System role: Change detection for documents and chunks
"""

import hashlib


def content_hash(content: str | None) -> str | None:
    """
    Compute a deterministic digest of text content.

    Args:
        content: Text to hash

    Returns:
        str | None: Lowercase hex SHA-256 of the UTF-8 bytes, None for None
    """
    if content is None:
        return None
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def estimate_token_count(texts: list[str]) -> int:
    """Rough token estimate: four tokens per three whitespace-separated words."""
    return sum(len(text.split()) * 4 // 3 for text in texts)
