"""Tests for exceptions, configuration and logging."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from iopipe_generic import (
    GenericHandlerConfig,
    GenericHandlerError,
    IllegalStateError,
    InvalidEntryPointError,
    LogContext,
    NoEntryPointFoundError,
    Shape,
    UnsupportedShapeError,
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from iopipe_generic.logging import LOGGER_NAME, TRACE, _normalize_fields
from iopipe_generic.types import (
    HANDLER_ENV_VAR,
    INSTANCE_PER_REQUEST_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
)

# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """Test every error derives from GenericHandlerError."""
        assert issubclass(InvalidEntryPointError, GenericHandlerError)
        assert issubclass(NoEntryPointFoundError, InvalidEntryPointError)
        assert issubclass(UnsupportedShapeError, GenericHandlerError)
        assert issubclass(IllegalStateError, GenericHandlerError)

    def test_builtin_bases(self):
        """Test errors can be caught by their builtin counterparts."""
        assert issubclass(UnsupportedShapeError, NotImplementedError)
        assert issubclass(IllegalStateError, RuntimeError)

    def test_unsupported_shape_message(self):
        """Test the default message names the shape and its signature."""
        error = UnsupportedShapeError(Shape.STREAMS)

        assert error.shape is Shape.STREAMS
        assert str(error) == "Entry points of shape STREAMS (I, O) are not supported"

    def test_unsupported_shape_custom_message(self):
        """Test a custom message replaces the default one."""
        error = UnsupportedShapeError(Shape.EXECUTION_VALUE, "later")

        assert str(error) == "later"
        assert error.shape is Shape.EXECUTION_VALUE


# =============================================================================
# Configuration
# =============================================================================


class TestGenericHandlerConfig:
    """Tests for GenericHandlerConfig."""

    def test_defaults(self):
        """Test an empty environment gives the defaults."""
        config = GenericHandlerConfig.from_env({})

        assert config.handler is None
        assert config.instance_per_request is False
        assert config.log_level == "info"

    def test_from_env(self):
        """Test every variable is read."""
        config = GenericHandlerConfig.from_env(
            {
                HANDLER_ENV_VAR: "myapp.Greeter::greet",
                INSTANCE_PER_REQUEST_ENV_VAR: " Yes ",
                LOG_LEVEL_ENV_VAR: "DEBUG",
            }
        )

        assert config.handler == "myapp.Greeter::greet"
        assert config.instance_per_request is True
        assert config.log_level == "debug"

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_falsy_instance_per_request(self, value):
        """Test values other than the truthy ones disable the flag."""
        config = GenericHandlerConfig.from_env({INSTANCE_PER_REQUEST_ENV_VAR: value})

        assert config.instance_per_request is False

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            GenericHandlerConfig.from_env({LOG_LEVEL_ENV_VAR: "verbose"})

    def test_extra_fields_forbidden(self):
        """Test unknown fields are rejected."""
        with pytest.raises(ValidationError):
            GenericHandlerConfig(handler="a.B", retries=3)


# =============================================================================
# Logging
# =============================================================================


class TestLogging:
    """Tests for the structured logging helpers."""

    @pytest.fixture(autouse=True)
    def trace_level(self):
        logger = logging.getLogger(LOGGER_NAME)
        previous = logger.level
        logger.setLevel(TRACE)
        yield
        logger.setLevel(previous)

    @pytest.mark.parametrize(
        ("log", "level"),
        [
            (log_error, logging.ERROR),
            (log_warn, logging.WARNING),
            (log_info, logging.INFO),
            (log_debug, logging.DEBUG),
            (log_trace, TRACE),
        ],
    )
    def test_levels(self, caplog, log, level):
        """Test each helper logs at its level."""
        with caplog.at_level(TRACE, logger=LOGGER_NAME):
            log("message")

        assert caplog.records[-1].levelno == level
        assert caplog.records[-1].getMessage() == "message"

    def test_fields_are_rendered(self, caplog):
        """Test fields are appended and attached to the record."""
        with caplog.at_level(TRACE, logger=LOGGER_NAME):
            log_info("Entry point resolved", {"shape": "VALUE", "static": False})

        record = caplog.records[-1]
        assert record.getMessage() == "Entry point resolved shape=VALUE static=False"
        assert record.fields == {"shape": "VALUE", "static": "False"}

    def test_log_context_drops_unset_fields(self, caplog):
        """Test LogContext fields that are None are left out."""
        with caplog.at_level(TRACE, logger=LOGGER_NAME):
            log_error("failed", LogContext(handler="a.B", request_id="r-1"))

        assert caplog.records[-1].getMessage() == "failed handler=a.B request_id=r-1"

    def test_disabled_level_is_skipped(self, caplog):
        """Test messages below the logger level are not emitted."""
        logging.getLogger(LOGGER_NAME).setLevel(logging.INFO)
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log_debug("hidden")

        assert caplog.records == []

    def test_normalize_fields(self):
        """Test field normalization."""
        assert _normalize_fields(None) is None
        assert _normalize_fields({"a": 1}) == {"a": "1"}
        assert _normalize_fields(LogContext(shape="VALUE")) == {"shape": "VALUE"}

    def test_configure_logging(self):
        """Test configure_logging() sets the package level."""
        configure_logging("debug")
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

        configure_logging("unknown")
        assert logging.getLogger(LOGGER_NAME).level == logging.INFO

        configure_logging("trace")
        assert logging.getLevelName(logging.getLogger(LOGGER_NAME).level) == "TRACE"
