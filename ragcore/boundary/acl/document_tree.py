"""
Document-tree collaborator.

Resolves which wiki space a wiki document lives in. Used only to heal
documents whose space_id was never recorded.

Dependencies: typing
System role: Wiki hierarchy lookups
"""

from typing import Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class DocumentTree(Protocol):
    """Maps a wiki document to its space."""

    async def get_space_id(self, wiki_document_id: str) -> UUID | None: ...


class NullDocumentTree:
    """Resolves nothing; healing then only succeeds for owners."""

    async def get_space_id(self, wiki_document_id: str) -> UUID | None:
        return None
