"""
Observability module.

Provides structured logging, correlation ID tracking, and request logging
middleware.
"""

from ragcore.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
