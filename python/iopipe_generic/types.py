"""Pydantic models for iopipe-generic.

This module provides the configuration and logging context models,
using Pydantic v2 for validation and serialization.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

HANDLER_ENV_VAR = "IOPIPE_GENERIC_HANDLER"
INSTANCE_PER_REQUEST_ENV_VAR = "IOPIPE_GENERIC_INSTANCE_PER_REQUEST"
LOG_LEVEL_ENV_VAR = "IOPIPE_LOG_LEVEL"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class GenericHandlerConfig(BaseModel):
    """Configuration for the generic handler runtime.

    Example:
        >>> config = GenericHandlerConfig(handler="myapp.handlers.Greeter::greet")
        >>> config.instance_per_request
        False
    """

    handler: str | None = Field(
        default=None,
        description="Handler spec string, 'package.module.ClassName[::method]'.",
    )
    instance_per_request: bool = Field(
        default=False,
        description="Construct a fresh handler instance for every request.",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level for the runtime (trace, debug, info, warn, error).",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GenericHandlerConfig:
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            The validated configuration.
        """
        if environ is None:
            environ = os.environ

        return cls(
            handler=environ.get(HANDLER_ENV_VAR),
            instance_per_request=(
                environ.get(INSTANCE_PER_REQUEST_ENV_VAR, "").strip().lower() in _TRUTHY
            ),
            log_level=environ.get(LOG_LEVEL_ENV_VAR, "info").strip().lower(),
        )


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(
        ...     handler="myapp.handlers.Greeter::greet",
        ...     request_id="abc-123",
        ... )
        >>> log_info("Invocation finished", context)
    """

    handler: str | None = Field(
        default=None,
        description="Handler spec the log line relates to.",
    )
    request_id: str | None = Field(
        default=None,
        description="Platform request id for request tracing.",
    )
    shape: str | None = Field(
        default=None,
        description="Name of the resolved entry point shape.",
    )
    operation: str | None = Field(
        default=None,
        description="Current operation name.",
    )


__all__ = [
    "HANDLER_ENV_VAR",
    "INSTANCE_PER_REQUEST_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "GenericHandlerConfig",
    "LogContext",
]
