"""
Access-control collaborators.

Exports:
  - AccessControl, EntityAclAccessControl: Capability checks on wiki spaces
  - DocumentTree, NullDocumentTree: Wiki document → space resolution

Dependencies: ragcore.boundary.db
System role: External authorization contracts
"""

from ragcore.boundary.acl.access_control import AccessControl, EntityAclAccessControl
from ragcore.boundary.acl.document_tree import DocumentTree, NullDocumentTree

__all__ = [
    "AccessControl",
    "EntityAclAccessControl",
    "DocumentTree",
    "NullDocumentTree",
]
