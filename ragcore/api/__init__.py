"""
HTTP API layer.

FastAPI routers, dependency injection and application assembly.
"""
