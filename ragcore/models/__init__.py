"""
API and service schemas.

Pydantic request/response contracts for collections, documents, search and
re-embedding administration.

Dependencies: pydantic
System role: Validation of create/update attributes and API payloads
"""
