"""
Test suite for logging configuration and helpers.

Tests correlation id propagation into log records, handler setup and the
safe structured-logging helpers.

System role: Verification of observability plumbing
"""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from ragcore.configs.base import BaseSettings
from ragcore.core.exceptions import ProviderError
from ragcore.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from ragcore.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from ragcore.observability.logger import CorrelationIdFilter, configure_logging


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after configure_logging() runs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelationId:
    """Test suite for correlation id context."""

    def test_set_should_generate_when_missing(self) -> None:
        value = set_correlation_id()

        assert value
        assert get_correlation_id() == value
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_filter_should_attach_current_id(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        set_correlation_id("abc-123")
        try:
            CorrelationIdFilter().filter(record)
        finally:
            clear_correlation_id()

        assert record.correlation_id == "abc-123"

    def test_filter_should_use_placeholder_outside_request(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_should_install_single_handler_with_filter(self, restore_root_logger) -> None:
        configure_logging("debug")
        configure_logging("warning")

        root = restore_root_logger
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)
        assert "%(correlation_id)s" in root.handlers[0].formatter._fmt

    def test_should_quiet_provider_libraries(self, restore_root_logger) -> None:
        configure_logging("DEBUG")

        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING

    def test_log_level_setting_should_normalize_case(self) -> None:
        assert BaseSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            BaseSettings(log_level="chatty")


class TestLogUtils:
    """Test suite for safe structured-logging helpers."""

    def test_vectors_should_collapse_to_shape(self) -> None:
        assert safe_log_value([0.1] * 1536) == "vector(1536 dims)"
        assert safe_log_value([[0.1] * 4, [0.2] * 4]) == "vectors(2 x 4 dims)"
        assert safe_log_value(["a", "b"]) == "list(2 items)"

    def test_credentials_should_be_redacted(self) -> None:
        assert safe_log_value("sk-live-123", key="api_key") == "[redacted]"

    def test_text_keys_should_report_length_only(self) -> None:
        assert safe_log_value("private salary notes", key="content") == "text(20 chars)"
        assert safe_log_value(["a", "b", "c"], key="texts") == "texts(3 items)"

    def test_long_strings_should_truncate(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)

        assert value.startswith("xxxxx... (truncated")

    def test_none_and_dicts(self) -> None:
        assert safe_log_value(None) == "None"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_log_with_context_should_stringify_extra(self, caplog) -> None:
        logger = logging.getLogger("ragcore.test")

        with caplog.at_level(logging.INFO, logger="ragcore.test"):
            log_with_context(logger, logging.INFO, "embedded", vector=[0.1, 0.2], count=2)

        record = caplog.records[-1]
        assert record.vector == "vector(2 dims)"
        assert record.count == "2"

    def test_log_exception_should_record_error_type(self, caplog) -> None:
        logger = logging.getLogger("ragcore.test")

        with caplog.at_level(logging.ERROR, logger="ragcore.test"):
            try:
                raise ValueError("boom")
            except ValueError as e:
                log_exception_with_context(logger, "failed", e, batch=3)

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_msg == "boom"
        assert record.batch == "3"
        assert record.exc_info is not None

    def test_log_exception_should_describe_provider_errors(self, caplog) -> None:
        logger = logging.getLogger("ragcore.test")

        with caplog.at_level(logging.ERROR, logger="ragcore.test"):
            try:
                raise ProviderError("throttled", status=429)
            except ProviderError as e:
                log_exception_with_context(logger, "failed", e, api_key="sk-test")

        record = caplog.records[-1]
        assert record.error_msg == "HTTP 429: throttled"
        assert record.provider_status == 429
        assert record.api_key == "[redacted]"
