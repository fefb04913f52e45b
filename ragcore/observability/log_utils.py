"""
Structured logging helpers for retrieval workloads.

Log extras in this codebase routinely carry embedding vectors, chunk text and
provider credentials. safe_log_value() keeps records small and safe: vectors
collapse to their shape, document and query text to its length, and
credential keys are redacted.

Dependencies: logging (stdlib), ragcore.core.exceptions
System role: Logging helper functions
"""

import logging
from numbers import Real
from typing import Any

from ragcore.core.exceptions import ProviderError

REDACTED_KEYS = frozenset({"api_key", "authorization", "password", "aws_secret_access_key"})
TEXT_KEYS = frozenset({"content", "text", "texts", "query", "documents"})


def _is_vector(value: Any) -> bool:
    return bool(value) and all(
        isinstance(item, Real) and not isinstance(item, bool) for item in value[:8]
    )


def safe_log_value(value: Any, max_length: int = 500, key: str | None = None) -> str:
    """
    Convert a log extra to a short string.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating
        key: Extra name; credential and text keys are summarized

    Returns:
        str: Safe string representation
    """
    if key in REDACTED_KEYS:
        return "[redacted]"
    if value is None:
        return "None"

    if key in TEXT_KEYS:
        if isinstance(value, str):
            return f"text({len(value)} chars)"
        if isinstance(value, (list, tuple)):
            return f"texts({len(value)} items)"

    if isinstance(value, str):
        val_str = value
    elif isinstance(value, (list, tuple)):
        if _is_vector(value):
            val_str = f"vector({len(value)} dims)"
        elif value and isinstance(value[0], (list, tuple)) and _is_vector(value[0]):
            val_str = f"vectors({len(value)} x {len(value[0])} dims)"
        else:
            val_str = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        val_str = f"dict({len(value)} keys)"
    else:
        val_str = str(value)

    if len(val_str) > max_length:
        return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
    return val_str


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """Log a message with every context value passed through safe_log_value()."""
    safe_context = {key: safe_log_value(val, key=key) for key, val in context.items()}
    logger.log(level, message, extra=safe_context)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context,
) -> None:
    """
    Log an exception with its traceback and context.

    Provider failures are logged with their HTTP status so retries and
    permanent rejections can be told apart in the logs.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    safe_context = {key: safe_log_value(val, key=key) for key, val in context.items()}
    safe_context["error_type"] = type(exc).__name__
    if isinstance(exc, ProviderError):
        safe_context["error_msg"] = exc.describe()
        safe_context["provider_status"] = exc.status
    else:
        safe_context["error_msg"] = str(exc)
    logger.exception(message, extra=safe_context)
